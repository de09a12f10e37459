"""Domain-level exceptions for the document registration client.

Configuration problems abort startup; everything else is scoped to a single
request and is reported as that request's outcome.
"""


class CrptApiError(Exception):
    """Base class for all errors raised by crptapi."""


class ConfigurationError(CrptApiError):
    """Raised for invalid limits, windows or settings values."""


class SerializationError(CrptApiError):
    """Raised when a document cannot be encoded into a request body."""

    def __init__(self, message: str, document: object = None):
        self.document = document
        super().__init__(message)


class GateClosedError(CrptApiError):
    """Raised by RateGate.acquire() once the gate has been closed."""
