import threading
import time
from unittest.mock import MagicMock

import httpx
import pytest

from crptapi.domain.models.common import DocumentLabel, EndpointUrl, Payload
from crptapi.domain.models.submission import (
    Accepted,
    PendingRequest,
    Rejected,
    SubmissionState,
    TransportFailure,
)
from crptapi.infrastructure.resilience.dispatcher import Dispatcher

from conftest import StubTransport

ENDPOINT = EndpointUrl("https://api.example.test/api/v3/lk/documents/create")


def make_request(label: str = "doc-1") -> PendingRequest:
    return PendingRequest(payload=Payload(b'{"doc_id": "1"}'), label=DocumentLabel(label))


@pytest.fixture
def dispatcher(stub_transport):
    d = Dispatcher(transport=stub_transport, endpoint_url=ENDPOINT, max_workers=4)
    yield d
    d.shutdown(wait=True)


def test_status_200_resolves_accepted(dispatcher, stub_transport):
    request = make_request()
    result = dispatcher.submit(request).result(timeout=5)

    assert isinstance(result, Accepted)
    assert result.label == "doc-1"
    assert result.state is SubmissionState.ACCEPTED
    assert result.latency_ms is not None
    url, body, _ = stub_transport.calls[0]
    assert url == ENDPOINT
    assert body == request.payload


def test_status_500_resolves_rejected(dispatcher, stub_transport):
    stub_transport.status_code = 500
    result = dispatcher.submit(make_request()).result(timeout=5)

    assert isinstance(result, Rejected)
    assert result.status_code == 500
    assert result.state is SubmissionState.REJECTED


@pytest.mark.parametrize("status_code", [201, 202, 400, 401, 429, 503])
def test_any_non_200_status_is_rejected(dispatcher, stub_transport, status_code):
    stub_transport.status_code = status_code
    result = dispatcher.submit(make_request()).result(timeout=5)
    assert result == Rejected(label=DocumentLabel("doc-1"), status_code=status_code,
                              response_body="{}", latency_ms=result.latency_ms)


@pytest.mark.parametrize("error", [
    httpx.ConnectError("connection refused"),
    httpx.ReadTimeout("timed out"),
    OSError("network unreachable"),
])
def test_exception_before_response_is_transport_failure(dispatcher, stub_transport, error):
    stub_transport.error = error
    result = dispatcher.submit(make_request()).result(timeout=5)

    assert isinstance(result, TransportFailure)
    assert result.cause is error
    assert result.state is SubmissionState.TRANSPORT_FAILURE


def test_sink_called_exactly_once_per_request(dispatcher):
    sink = MagicMock()
    futures = [dispatcher.submit(make_request(f"doc-{i}"), sink) for i in range(10)]
    results = [f.result(timeout=5) for f in futures]

    assert sink.call_count == 10
    delivered = [c.args[0] for c in sink.call_args_list]
    assert sorted(r.label for r in delivered) == sorted(r.label for r in results)


def test_failing_sink_does_not_change_the_outcome(dispatcher):
    sink = MagicMock(side_effect=RuntimeError("sink exploded"))
    result = dispatcher.submit(make_request(), sink).result(timeout=5)

    assert isinstance(result, Accepted)
    sink.assert_called_once_with(result)


def test_submit_returns_without_waiting_for_the_call():
    transport = StubTransport(delay=0.5)
    with Dispatcher(transport=transport, endpoint_url=ENDPOINT) as dispatcher:
        started = time.monotonic()
        future = dispatcher.submit(make_request())
        assert time.monotonic() - started < 0.2
        assert not future.done()
        assert isinstance(future.result(timeout=5), Accepted)


def test_sink_runs_on_worker_thread(dispatcher):
    threads = []
    dispatcher.submit(make_request(), lambda result: threads.append(threading.current_thread())).result(timeout=5)
    assert threads[0] is not threading.current_thread()
    assert threads[0].name.startswith("crptapi-dispatch")


def test_requests_run_concurrently():
    transport = StubTransport(delay=0.3)
    with Dispatcher(transport=transport, endpoint_url=ENDPOINT, max_workers=5) as dispatcher:
        started = time.monotonic()
        futures = [dispatcher.submit(make_request(f"doc-{i}")) for i in range(5)]
        for f in futures:
            f.result(timeout=5)
        assert time.monotonic() - started < 1.0


def test_request_is_not_modified(dispatcher):
    request = make_request()
    snapshot = (request.payload, request.label, request.submitted_at)
    dispatcher.submit(request).result(timeout=5)
    assert (request.payload, request.label, request.submitted_at) == snapshot


def test_submit_after_shutdown_raises(stub_transport):
    dispatcher = Dispatcher(transport=stub_transport, endpoint_url=ENDPOINT)
    dispatcher.shutdown()
    with pytest.raises(RuntimeError):
        dispatcher.submit(make_request())
    assert stub_transport.calls == []
