from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from dispute_intake.repositories.cases import InMemoryCasesRepository
from dispute_intake.schemas import CreateCaseRequest, UpdateCaseRequest

logger = logging.getLogger(__name__)


class CaseStatus(str, Enum):
    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"


def _utcnow_iso() -> str:
    return datetime.now(UTC).isoformat()


def _request_fields(request: CreateCaseRequest) -> dict[str, Any]:
    fields = request.model_dump(mode="json", by_alias=True)
    fields.pop("status", None)
    return fields


def new_case(request: CreateCaseRequest) -> dict[str, Any]:
    now = _utcnow_iso()
    return {
        "id": str(uuid.uuid4()),
        **_request_fields(request),
        "caseTypeDescription": "",
        "reasonDescription": "",
        "status": CaseStatus.PENDING.value,
        "createdAt": now,
        "updatedAt": now,
    }


def case_from_update(case_id: str, request: UpdateCaseRequest, *, current: dict[str, Any]) -> dict[str, Any]:
    """Merge a full update payload over the stored case, keeping server fields."""
    item = dict(current)
    item.update(_request_fields(request))
    item["id"] = case_id
    if request.status is not None:
        item["status"] = request.status
    return item


@dataclass
class CasePage:
    items: list[dict[str, Any]]
    total: int
    page: int
    limit: int

    def to_dict(self) -> dict[str, Any]:
        return {"cases": self.items, "total": self.total, "page": self.page, "limit": self.limit}


class CaseManager:
    def __init__(self, repository: InMemoryCasesRepository) -> None:
        self._repository = repository

    def create_case(self, request: CreateCaseRequest) -> dict[str, Any]:
        case = self._repository.create(entity=new_case(request))
        logger.info("case created", extra={"caseId": case["id"], "caseType": case["caseType"]})
        return case

    def get_case(self, case_id: str) -> dict[str, Any]:
        return self._repository.get(entity_id=case_id)

    def get_case_with_documents(self, case_id: str, documents: list[dict[str, Any]]) -> dict[str, Any]:
        case = self.get_case(case_id)
        case["documents"] = documents
        return case

    def list_cases(self, *, page: int, limit: int, status: str = "") -> CasePage:
        rows = self._repository.list_by_status(status=status)
        rows.sort(key=lambda x: (str(x.get("createdAt", "")), str(x.get("id", ""))))
        total = len(rows)
        # page < 1 reads as the first page; limit < 1 returns no rows.
        page = max(1, page)
        if limit < 1:
            return CasePage(items=[], total=total, page=page, limit=limit)
        start = min((page - 1) * limit, total)
        end = min(start + limit, total)
        return CasePage(items=rows[start:end], total=total, page=page, limit=limit)

    def update_case(self, case: dict[str, Any]) -> dict[str, Any]:
        current = self._repository.get(entity_id=str(case["id"]))
        item = dict(case)
        item["createdAt"] = current.get("createdAt", item.get("createdAt"))
        item["updatedAt"] = _utcnow_iso()
        updated = self._repository.update(entity=item)
        logger.info("case updated", extra={"caseId": updated["id"], "status": updated.get("status")})
        return updated

    def delete_case(self, case_id: str) -> None:
        self._repository.delete(entity_id=case_id)
        logger.info("case deleted", extra={"caseId": case_id})
