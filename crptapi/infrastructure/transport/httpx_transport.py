"""Concrete implementation of the DocumentTransport interface using httpx.

Hides the specifics of the HTTP client library: connection pooling, TLS,
timeouts and request headers live here, the dispatcher only sees status
codes and bodies.
"""

import logging
from typing import Dict, Optional

import httpx

from crptapi.domain.interfaces.transport import DocumentTransport, TransportResponse
from crptapi.domain.models.common import EndpointUrl, Payload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
JSON_CONTENT_TYPE = "application/json"


class HttpxTransport(DocumentTransport):
    """httpx implementation of the DocumentTransport interface."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        api_token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        """Initializes the transport.

        Args:
            timeout: Per-request timeout in seconds.
            api_token: Optional bearer token sent with every request.
            client: Pre-built httpx.Client (tests, custom TLS); one is created if None.
        """
        self.timeout = timeout
        self._headers: Dict[str, str] = {"Content-Type": JSON_CONTENT_TYPE}
        if api_token:
            self._headers["Authorization"] = f"Bearer {api_token}"
        # httpx.Client is thread-safe; dispatcher workers share its pool
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None
        logger.info(f"HttpxTransport initialized (timeout={timeout}s, auth={'yes' if api_token else 'no'}).")

    def send(self, url: EndpointUrl, body: Payload) -> TransportResponse:
        """POSTs the encoded document and returns the remote status and body."""
        logger.debug(f"POST {url} ({len(body)} bytes)")
        try:
            response = self._client.post(url, content=body, headers=self._headers, timeout=self.timeout)
        except httpx.TimeoutException as e:
            logger.warning(f"Request to {url} timed out: {e}")
            raise
        except httpx.HTTPError as e:
            logger.warning(f"HTTP error calling {url}: {type(e).__name__} - {e}")
            raise
        logger.debug(f"POST {url} -> {response.status_code}")
        return TransportResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        """Closes the underlying client if this transport created it."""
        if self._owns_client:
            self._client.close()
            logger.debug("HttpxTransport client closed.")
