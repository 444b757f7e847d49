from __future__ import annotations

from typing import Any

from dispute_intake.repositories.base import InMemoryKeyedRepository


class InMemoryDocumentsRepository(InMemoryKeyedRepository):
    entity_name = "document"

    def list_by_case(self, *, case_id: str) -> list[dict[str, Any]]:
        return self.list(predicate=lambda row: row.get("caseId") == case_id)
