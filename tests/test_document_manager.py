from __future__ import annotations

import pytest

from dispute_intake.documents import DocumentManager, document_metadata, new_document
from dispute_intake.errors import AlreadyExistsError, NotFoundError
from dispute_intake.repositories.documents import InMemoryDocumentsRepository


def _manager() -> DocumentManager:
    return DocumentManager(InMemoryDocumentsRepository())


def test_new_document_derives_type_and_size():
    doc = new_document(case_id="case_1", file_name="evidence.pdf", content=b"%PDF-1.4 data")

    assert doc["id"]
    assert doc["fileType"] == ".pdf"
    assert doc["fileSize"] == len(b"%PDF-1.4 data")
    assert doc["contentType"] == "application/pdf"
    assert doc["uploadedAt"]


def test_new_document_without_extension():
    doc = new_document(case_id="case_1", file_name="README", content=b"")

    assert doc["fileType"] == ""
    assert doc["fileSize"] == 0
    assert doc["contentType"] == "application/octet-stream"


def test_upload_then_get_round_trip():
    manager = _manager()
    content = bytes(range(256))
    doc = new_document(
        case_id="case_1",
        file_name="receipt.png",
        content=content,
        uploaded_by="analyst",
        description="customer receipt",
    )
    manager.upload_document(doc)

    loaded = manager.get_document(doc["id"])

    assert loaded["fileName"] == "receipt.png"
    assert loaded["fileType"] == ".png"
    assert loaded["fileSize"] == 256
    assert loaded["content"] == content
    assert loaded["uploadedBy"] == "analyst"
    assert loaded["description"] == "customer receipt"


def test_upload_duplicate_id_raises_already_exists():
    manager = _manager()
    doc = new_document(case_id="case_1", file_name="a.txt", content=b"a")
    manager.upload_document(doc)

    with pytest.raises(AlreadyExistsError):
        manager.upload_document(doc)


def test_get_and_delete_missing_raise_not_found():
    manager = _manager()

    with pytest.raises(NotFoundError):
        manager.get_document("missing")
    with pytest.raises(NotFoundError):
        manager.delete_document("missing")


def test_delete_document():
    manager = _manager()
    doc = manager.upload_document(new_document(case_id="case_1", file_name="a.txt", content=b"a"))
    manager.delete_document(doc["id"])

    with pytest.raises(NotFoundError):
        manager.get_document(doc["id"])


def test_list_by_case_filters_and_tolerates_unknown_case():
    manager = _manager()
    manager.upload_document(new_document(case_id="case_1", file_name="a.txt", content=b"a"))
    manager.upload_document(new_document(case_id="case_1", file_name="b.txt", content=b"b"))
    manager.upload_document(new_document(case_id="case_2", file_name="c.txt", content=b"c"))

    assert sorted(x["fileName"] for x in manager.list_by_case("case_1")) == ["a.txt", "b.txt"]
    assert manager.list_by_case("case_404") == []


def test_document_metadata_drops_content():
    doc = new_document(case_id="case_1", file_name="a.txt", content=b"secret")

    meta = document_metadata(doc)

    assert "content" not in meta
    assert meta["fileSize"] == 6
