import json
from dataclasses import dataclass

import pytest

from crptapi.domain.errors import SerializationError
from crptapi.domain.models.document import Description, Document, Product
from crptapi.infrastructure.serialization.json_serializer import (
    JsonDocumentSerializer,
    document_from_dict,
    load_documents,
)


@pytest.fixture
def document():
    return Document(
        description=Description(participant_inn="7700000000"),
        doc_id="doc-42",
        doc_type="LP_INTRODUCE_GOODS",
        import_request=True,
        products=[Product(tnved_code="6401", uit_code="010461")],
        reg_date="2020-01-23",
    )


def test_serialize_uses_snake_case_keys(document):
    payload = JsonDocumentSerializer().serialize(document)
    data = json.loads(payload.decode("utf-8"))

    assert data["doc_id"] == "doc-42"
    assert data["import_request"] is True
    assert data["description"] == {"participant_inn": "7700000000"}
    assert data["products"][0]["tnved_code"] == "6401"
    assert "certificate_document_date" in data["products"][0]


def test_serialize_keeps_non_ascii_text():
    payload = JsonDocumentSerializer().serialize({"doc_status": "Черновик"})
    assert "Черновик".encode("utf-8") in payload


def test_serialize_rejects_unencodable_values():
    @dataclass
    class Broken:
        tags: set

    with pytest.raises(SerializationError):
        JsonDocumentSerializer().serialize(Broken(tags={"a"}))


@pytest.mark.parametrize("value", [object(), "plain string", 42])
def test_serialize_rejects_unsupported_types(value):
    with pytest.raises(SerializationError, match="Unsupported document type"):
        JsonDocumentSerializer().serialize(value)


def test_serialize_rejects_nan():
    with pytest.raises(SerializationError):
        JsonDocumentSerializer().serialize({"weight": float("nan")})


def test_document_from_dict_builds_nested_models():
    doc = document_from_dict({
        "doc_id": "x1",
        "description": {"participant_inn": "123", "unknown": "ignored"},
        "products": [{"uit_code": "u1"}, {"uit_code": "u2"}],
        "extra_field": "ignored",
    })

    assert doc.doc_id == "x1"
    assert doc.description == Description(participant_inn="123")
    assert [p.uit_code for p in doc.products] == ["u1", "u2"]


def test_document_from_dict_rejects_non_objects():
    with pytest.raises(SerializationError):
        document_from_dict(["not", "a", "dict"])


def test_load_documents_accepts_single_object_and_list(tmp_path):
    single = tmp_path / "single.json"
    single.write_text(json.dumps({"doc_id": "a"}), encoding="utf-8")
    many = tmp_path / "many.json"
    many.write_text(json.dumps([{"doc_id": "b"}, {"doc_id": "c"}]), encoding="utf-8")

    assert [d.doc_id for d in load_documents(single)] == ["a"]
    assert [d.doc_id for d in load_documents(many)] == ["b", "c"]


def test_load_documents_rejects_invalid_json(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(SerializationError, match="Invalid JSON"):
        load_documents(broken)


def test_load_documents_rejects_non_utf8_files(tmp_path):
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"doc_id": "\xff\xfe"}')
    with pytest.raises(SerializationError, match="not UTF-8"):
        load_documents(path)
