import os
import threading
import time
from typing import List, Optional

import pytest
from typer.testing import CliRunner

from crptapi.domain.interfaces.transport import DocumentTransport, TransportResponse
from crptapi.domain.models.common import EndpointUrl, Payload
from crptapi.infrastructure.cli.display import ConsoleDisplay
from crptapi.infrastructure.config import settings


class StubTransport(DocumentTransport):
    """In-memory transport that records every call.

    Returns `status_code` for each call, or raises `error` when set.
    """

    def __init__(self, status_code: int = 200, error: Optional[Exception] = None, delay: float = 0.0):
        self.status_code = status_code
        self.error = error
        self.delay = delay
        self.calls: List[tuple] = []
        self.closed = False
        self._lock = threading.Lock()

    def send(self, url: EndpointUrl, body: Payload) -> TransportResponse:
        with self._lock:
            self.calls.append((url, body, threading.current_thread().name))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return TransportResponse(status_code=self.status_code, body="{}")

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keeps tests independent of the developer's environment and config files."""
    for key in list(os.environ):
        if key.startswith("CRPTAPI_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings, "DEFAULT_CONFIG_FILE", tmp_path / "config.yaml")
    settings.reset_configuration()
    settings.clear_test_config()
    yield
    settings.clear_test_config()
    settings.reset_configuration()


@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay where main.py builds it."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('crptapi.main.ConsoleDisplay', return_value=mock)
    return mock


@pytest.fixture
def patched_transport(mocker):
    """Replaces HttpxTransport in the composition root with a StubTransport."""
    transport = StubTransport()
    mocker.patch('crptapi.main.HttpxTransport', return_value=transport)
    return transport
