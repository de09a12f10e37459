"""Document Client: the caller-facing façade of the registration client.

Composes the serializer, the rate gate and the dispatcher. A document is
encoded first, then a permit is acquired (this is the only step that may
block), then the request is handed to the dispatcher and a future is
returned. Encoding failures never consume a permit.
"""

import logging
import threading
from concurrent.futures import Future
from typing import Any, Optional

from crptapi.domain.errors import GateClosedError, SerializationError
from crptapi.domain.interfaces.serializer import DocumentSerializer
from crptapi.domain.interfaces.transport import DocumentTransport
from crptapi.domain.models.common import (
    CREATE_DOCUMENT_PATH,
    DEFAULT_BASE_URL,
    DocumentLabel,
    Payload,
    build_endpoint_url,
)
from crptapi.domain.models.submission import (
    CompletionResult,
    CompletionSink,
    PendingRequest,
    SerializationFailed,
)
from crptapi.infrastructure.resilience.dispatcher import Dispatcher
from crptapi.infrastructure.resilience.rate_gate import RateGate
from crptapi.infrastructure.serialization.json_serializer import JsonDocumentSerializer

logger = logging.getLogger(__name__)


class DocumentClient:
    """Rate-limited, non-blocking client for the document creation endpoint."""

    def __init__(
        self,
        gate: RateGate,
        dispatcher: Dispatcher,
        serializer: Optional[DocumentSerializer] = None,
    ):
        """Initializes the DocumentClient with already-built collaborators.

        Args:
            gate: Rate gate shared by every submission of this client.
            dispatcher: Dispatcher that performs the outbound calls.
            serializer: Document encoder (JSON by default).
        """
        self.gate = gate
        self.dispatcher = dispatcher
        self.serializer = serializer or JsonDocumentSerializer()
        self._closed = False
        self._close_lock = threading.Lock()

    @classmethod
    def configure(
        cls,
        limit: int,
        window: float,
        transport: DocumentTransport,
        serializer: Optional[DocumentSerializer] = None,
        base_url: str = DEFAULT_BASE_URL,
        create_path: str = CREATE_DOCUMENT_PATH,
        max_workers: Optional[int] = None,
    ) -> "DocumentClient":
        """Builds the gate/dispatcher pair for `limit` requests per `window` seconds.

        Raises:
            ConfigurationError: If limit or window is not positive.
        """
        gate = RateGate(limit=limit, window=window)
        dispatcher = Dispatcher(
            transport=transport,
            endpoint_url=build_endpoint_url(base_url, create_path),
            max_workers=max_workers,
        )
        return cls(gate=gate, dispatcher=dispatcher, serializer=serializer)

    def submit_document(
        self,
        document: Any,
        label: DocumentLabel,
        sink: Optional[CompletionSink] = None,
    ) -> "Future[CompletionResult]":
        """Encodes and submits a document, blocking only while waiting for a permit.

        Args:
            document: The document to register.
            label: Identifier used in reports.
            sink: Optional handler called exactly once with the outcome.

        Returns:
            A future resolving to the CompletionResult. If encoding fails the future
            is already resolved with SerializationFailed. If the client is closed
            while waiting for a permit the future is cancelled.
        """
        try:
            payload = self.serializer.serialize(document)
        except SerializationError as e:
            logger.error(f"[{label}] Document could not be serialized, not sent: {e}")
            result = SerializationFailed(label=label, cause=e)
            if sink is not None:
                try:
                    sink(result)
                except Exception as sink_error:
                    logger.error(f"[{label}] Completion sink raised: {sink_error}", exc_info=True)
            future: "Future[CompletionResult]" = Future()
            future.set_result(result)
            return future

        return self.submit_payload(payload, label, sink)

    def submit_payload(
        self,
        payload: Payload,
        label: DocumentLabel,
        sink: Optional[CompletionSink] = None,
    ) -> "Future[CompletionResult]":
        """Submits an already-encoded body. See submit_document()."""
        try:
            waited = self.gate.acquire()
        except GateClosedError:
            logger.warning(f"[{label}] Client closed while waiting for a permit; request not sent.")
            return _cancelled_future()

        if waited > 0:
            logger.debug(f"[{label}] Waited {waited:.3f}s for a permit.")
        try:
            future = self.dispatcher.submit(PendingRequest(payload=payload, label=label), sink)
        except RuntimeError as e:
            # Dispatcher shut down between the permit grant and the submit
            logger.warning(f"[{label}] Dispatcher unavailable, request not sent: {e}")
            return _cancelled_future()
        logger.info(f"[{label}] Document creation request sent.")
        return future

    def close(self, wait: bool = True) -> None:
        """Releases blocked callers, stops the dispatcher and closes the transport.

        Args:
            wait: Whether to wait for in-flight requests to resolve first.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self.gate.close()
        self.dispatcher.shutdown(wait=wait)
        self.dispatcher.transport.close()
        logger.info("DocumentClient closed.")

    def __enter__(self) -> "DocumentClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _cancelled_future() -> "Future[CompletionResult]":
    future: "Future[CompletionResult]" = Future()
    future.cancel()
    return future
