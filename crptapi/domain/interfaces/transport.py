"""Interface for the outbound transport used by the dispatcher.

Hides the HTTP library behind the minimal shape the dispatcher relies on:
POST a body to a URL and get back a status code and a response body.
Connection pooling, TLS, headers and authentication are the transport's
concern.
"""

import abc
from dataclasses import dataclass

from ..models.common import EndpointUrl, Payload


@dataclass(frozen=True)
class TransportResponse:
    """Status code and decoded body returned by the remote endpoint."""
    status_code: int
    body: str = ""


class DocumentTransport(abc.ABC):
    """Abstract Base Class for sending encoded documents to the remote API."""

    @abc.abstractmethod
    def send(self, url: EndpointUrl, body: Payload) -> TransportResponse:
        """POSTs the body to the URL and waits for the response.

        Implementations must be safe to call from several threads at once.

        Args:
            url: Absolute endpoint URL.
            body: Encoded request body.

        Returns:
            The remote status code and response body.

        Raises:
            Exception: Any failure that happens before a response is received.
        """
        pass

    def close(self) -> None:
        """Releases pooled connections. No-op by default."""
