"""Rate-limited client for the document registration API."""

from crptapi.core.document_client import DocumentClient
from crptapi.domain.models.submission import (
    Accepted,
    CompletionResult,
    Rejected,
    SerializationFailed,
    TransportFailure,
)

__version__ = "1.0.0"

__all__ = [
    "DocumentClient",
    "CompletionResult",
    "Accepted",
    "Rejected",
    "TransportFailure",
    "SerializationFailed",
]
