"""JSON encoding and decoding of documents.

Documents are encoded as UTF-8 JSON with snake_case keys, the format the
create endpoint accepts. The same module loads documents back from JSON
files for the `submit` command.
"""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from crptapi.domain.errors import SerializationError
from crptapi.domain.interfaces.serializer import DocumentSerializer
from crptapi.domain.models.common import Payload
from crptapi.domain.models.document import Description, Document, Product

logger = logging.getLogger(__name__)


class JsonDocumentSerializer(DocumentSerializer):
    """Encodes dataclass documents (or plain dicts) as JSON bytes."""

    def __init__(self, ensure_ascii: bool = False):
        self.ensure_ascii = ensure_ascii

    def serialize(self, document: Any) -> Payload:
        try:
            if dataclasses.is_dataclass(document) and not isinstance(document, type):
                data = dataclasses.asdict(document)
            elif isinstance(document, dict):
                data = document
            else:
                raise TypeError(f"Unsupported document type: {type(document).__name__}")
            encoded = json.dumps(data, ensure_ascii=self.ensure_ascii, allow_nan=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to convert document to JSON: {e}")
            raise SerializationError(f"Failed to convert document to JSON: {e}", document=document) from e
        return Payload(encoded.encode("utf-8"))


def document_from_dict(data: Dict[str, Any]) -> Document:
    """Builds a Document from its JSON representation.

    Unknown keys are ignored so that payloads exported from the remote system
    can be re-submitted as-is.

    Raises:
        SerializationError: If the data is not a JSON object or has malformed nested blocks.
    """
    if not isinstance(data, dict):
        raise SerializationError(f"Document must be a JSON object, got {type(data).__name__}.", document=data)

    known = {f.name for f in dataclasses.fields(Document)}
    fields = {key: value for key, value in data.items() if key in known}

    try:
        description = fields.get("description")
        if isinstance(description, dict):
            fields["description"] = Description(**_known_keys(Description, description))
        products = fields.get("products") or []
        fields["products"] = [Product(**_known_keys(Product, product)) for product in products]
    except (TypeError, AttributeError) as e:
        raise SerializationError(f"Malformed document: {e}", document=data) from e

    return Document(**fields)


def _known_keys(cls: type, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in dataclasses.fields(cls)}
    return {key: value for key, value in data.items() if key in names}


def load_documents(path: Path) -> List[Document]:
    """Reads one document or a list of documents from a JSON file.

    Raises:
        SerializationError: If the file is not UTF-8 JSON or holds malformed documents.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise SerializationError(f"{path} is not UTF-8 encoded: {e}") from e
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON in {path}: {e}") from e

    items = raw if isinstance(raw, list) else [raw]
    documents = [document_from_dict(item) for item in items]
    logger.debug(f"Loaded {len(documents)} document(s) from {path}")
    return documents
