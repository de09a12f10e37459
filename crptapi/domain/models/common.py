"""Defines common Value Objects used across the client.

Thin semantic aliases for the strings and bytes that travel between the
façade, the dispatcher and the transport.
"""

from typing import NewType

# === Request Context ===
DocumentLabel = NewType("DocumentLabel", str)   # Reporting-only identifier (the original "signature")
Payload = NewType("Payload", bytes)             # Encoded request body
EndpointUrl = NewType("EndpointUrl", str)       # Absolute URL of the create endpoint

# === Endpoint Constants ===
DEFAULT_BASE_URL = "https://ismp.crpt.ru/api/v3/"
CREATE_DOCUMENT_PATH = "lk/documents/create"

# Remote status treated as a successful registration
SUCCESS_STATUS_CODE = 200


def build_endpoint_url(base_url: str, path: str = CREATE_DOCUMENT_PATH) -> EndpointUrl:
    """Joins a base URL and a relative path with exactly one slash between them."""
    return EndpointUrl(base_url.rstrip("/") + "/" + path.lstrip("/"))
