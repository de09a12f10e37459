"""Domain models for the documents registered through the create endpoint.

Field names are already snake_case, which is the wire format the remote
API expects.
"""

from dataclasses import dataclass, field
from typing import List, Optional

# Document type used for goods introduction
LP_INTRODUCE_GOODS = "LP_INTRODUCE_GOODS"


@dataclass
class Description:
    """Participant block attached to a document."""
    participant_inn: Optional[str] = None


@dataclass
class Product:
    """A single product line of a document."""
    certificate_document: Optional[str] = None
    certificate_document_date: Optional[str] = None
    certificate_document_number: Optional[str] = None
    owner_inn: Optional[str] = None
    producer_inn: Optional[str] = None
    production_date: Optional[str] = None
    tnved_code: Optional[str] = None
    uit_code: Optional[str] = None
    uitu_code: Optional[str] = None


@dataclass
class Document:
    """Entity representing a document submitted for registration."""
    description: Optional[Description] = None
    doc_id: Optional[str] = None
    doc_status: Optional[str] = None
    doc_type: str = LP_INTRODUCE_GOODS
    import_request: bool = False
    owner_inn: Optional[str] = None
    participant_inn: Optional[str] = None
    producer_inn: Optional[str] = None
    production_date: Optional[str] = None
    production_type: Optional[str] = None
    products: List[Product] = field(default_factory=list)
    reg_date: Optional[str] = None
    reg_number: Optional[str] = None
