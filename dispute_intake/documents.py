from __future__ import annotations

import logging
import mimetypes
import os
import uuid
from datetime import UTC, datetime
from typing import Any

from dispute_intake.repositories.documents import InMemoryDocumentsRepository

logger = logging.getLogger(__name__)


def new_document(
    *,
    case_id: str,
    file_name: str,
    content: bytes,
    uploaded_by: str = "",
    description: str = "",
    content_type: str | None = None,
) -> dict[str, Any]:
    file_type = os.path.splitext(file_name)[1]
    return {
        "id": str(uuid.uuid4()),
        "caseId": case_id,
        "fileName": file_name,
        "fileType": file_type,
        "fileSize": len(content),
        "content": bytes(content),
        "contentType": content_type or mimetypes.guess_type(file_name)[0] or "application/octet-stream",
        "uploadedBy": uploaded_by,
        "uploadedAt": datetime.now(UTC).isoformat(),
        "description": description,
    }


def document_metadata(document: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in document.items() if key != "content"}


class DocumentManager:
    def __init__(self, repository: InMemoryDocumentsRepository) -> None:
        self._repository = repository

    def upload_document(self, document: dict[str, Any]) -> dict[str, Any]:
        stored = self._repository.create(entity=document)
        logger.info(
            "document uploaded",
            extra={"documentId": stored["id"], "caseId": stored["caseId"], "fileSize": stored["fileSize"]},
        )
        return stored

    def get_document(self, document_id: str) -> dict[str, Any]:
        return self._repository.get(entity_id=document_id)

    def delete_document(self, document_id: str) -> None:
        self._repository.delete(entity_id=document_id)
        logger.info("document deleted", extra={"documentId": document_id})

    def list_by_case(self, case_id: str) -> list[dict[str, Any]]:
        rows = self._repository.list_by_case(case_id=case_id)
        rows.sort(key=lambda x: (str(x.get("uploadedAt", "")), str(x.get("id", ""))))
        return rows
