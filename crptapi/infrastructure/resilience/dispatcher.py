"""Non-blocking dispatch of admitted requests to the create endpoint.

Each submitted request runs on a worker thread and resolves to exactly one
CompletionResult, which is delivered to the optional completion sink and
set as the result of the returned future. Requests are independent: no
retries, no ordering between them.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from crptapi.domain.interfaces.transport import DocumentTransport
from crptapi.domain.models.common import SUCCESS_STATUS_CODE, EndpointUrl
from crptapi.domain.models.submission import (
    Accepted,
    CompletionResult,
    CompletionSink,
    PendingRequest,
    Rejected,
    SubmissionState,
    TransportFailure,
)

logger = logging.getLogger(__name__)


class Dispatcher:
    """Turns admitted requests into asynchronous outbound calls."""

    def __init__(
        self,
        transport: DocumentTransport,
        endpoint_url: EndpointUrl,
        max_workers: Optional[int] = None,
    ):
        """Initializes the Dispatcher.

        Args:
            transport: Thread-safe transport used for the outbound POST.
            endpoint_url: Absolute URL of the document creation endpoint.
            max_workers: Size of the worker pool (executor default if None).
        """
        self.transport = transport
        self.endpoint_url = endpoint_url
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="crptapi-dispatch")
        logger.info(f"Dispatcher initialized for {endpoint_url} (max_workers={max_workers or 'default'}).")

    def submit(self, request: PendingRequest, sink: Optional[CompletionSink] = None) -> "Future[CompletionResult]":
        """Schedules the outbound call and returns immediately.

        The caller must already hold a permit from the rate gate.

        Args:
            request: The admitted request. It is never modified.
            sink: Optional handler called once with the outcome, on the worker thread.

        Returns:
            A future resolving to the request's CompletionResult.
        """
        logger.debug(f"[{request.label}] {SubmissionState.PENDING.value} -> submitted to worker pool.")
        return self._executor.submit(self._execute, request, sink)

    def _execute(self, request: PendingRequest, sink: Optional[CompletionSink]) -> CompletionResult:
        result = self._call_remote(request)
        logger.debug(f"[{request.label}] {SubmissionState.IN_FLIGHT.value} -> {result.state.value}.")
        if sink is not None:
            try:
                sink(result)
            except Exception as e:
                # Outcome already decided; a failing sink must not produce a second one
                logger.error(f"[{request.label}] Completion sink raised: {e}", exc_info=True)
        return result

    def _call_remote(self, request: PendingRequest) -> CompletionResult:
        """Performs the POST and maps the response to a terminal outcome."""
        start_time = time.perf_counter()
        try:
            response = self.transport.send(self.endpoint_url, request.payload)
        except Exception as e:
            latency_ms = (time.perf_counter() - start_time) * 1000
            logger.warning(f"[{request.label}] Transport failure after {latency_ms:.2f}ms: {type(e).__name__}: {e}")
            return TransportFailure(label=request.label, cause=e, latency_ms=latency_ms)

        latency_ms = (time.perf_counter() - start_time) * 1000
        if response.status_code == SUCCESS_STATUS_CODE:
            logger.info(f"[{request.label}] Document created ({latency_ms:.2f}ms).")
            return Accepted(
                label=request.label,
                status_code=response.status_code,
                response_body=response.body,
                latency_ms=latency_ms,
            )

        logger.warning(f"[{request.label}] Document not created: status {response.status_code}.")
        return Rejected(
            label=request.label,
            status_code=response.status_code,
            response_body=response.body,
            latency_ms=latency_ms,
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stops accepting work; optionally waits for in-flight calls to finish."""
        self._executor.shutdown(wait=wait)
        logger.debug("Dispatcher worker pool shut down.")

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown(wait=True)
