from __future__ import annotations

from typing import Any

from dispute_intake.repositories.base import InMemoryKeyedRepository


class InMemoryCasesRepository(InMemoryKeyedRepository):
    entity_name = "case"

    def list_by_status(self, *, status: str = "") -> list[dict[str, Any]]:
        if not status:
            return self.list()
        return self.list(predicate=lambda row: row.get("status") == status)
