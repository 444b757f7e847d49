from __future__ import annotations

import threading

import pytest

from dispute_intake.errors import AlreadyExistsError, NotFoundError
from dispute_intake.repositories import InMemoryCasesRepository, InMemoryDocumentsRepository, ReadWriteLock
from dispute_intake.repositories.base import InMemoryKeyedRepository


def test_create_then_get_returns_copy():
    repo = InMemoryKeyedRepository()
    repo.create(entity={"id": "e1", "name": "first"})

    loaded = repo.get(entity_id="e1")
    loaded["name"] = "mutated"

    assert repo.get(entity_id="e1")["name"] == "first"


def test_nested_values_are_not_shared_with_callers():
    repo = InMemoryKeyedRepository()
    tags = ["a"]
    created = repo.create(entity={"id": "e1", "tags": tags})
    tags.append("mutated-after-create")
    created["tags"].append("mutated-return-value")

    loaded = repo.get(entity_id="e1")
    loaded["tags"].append("mutated-after-get")
    repo.list()[0]["tags"].append("mutated-after-list")

    assert repo.get(entity_id="e1")["tags"] == ["a"]


def test_update_stores_independent_copy():
    repo = InMemoryKeyedRepository()
    repo.create(entity={"id": "e1", "tags": []})
    row = {"id": "e1", "tags": ["x"]}
    repo.update(entity=row)
    row["tags"].append("y")

    assert repo.get(entity_id="e1")["tags"] == ["x"]


def test_create_rejects_duplicate_id():
    repo = InMemoryCasesRepository()
    repo.create(entity={"id": "c1"})

    with pytest.raises(AlreadyExistsError) as exc_info:
        repo.create(entity={"id": "c1"})
    assert exc_info.value.entity == "case"
    assert exc_info.value.entity_id == "c1"


def test_get_update_delete_missing_id_raise_not_found():
    repo = InMemoryDocumentsRepository()

    with pytest.raises(NotFoundError):
        repo.get(entity_id="missing")
    with pytest.raises(NotFoundError):
        repo.update(entity={"id": "missing"})
    with pytest.raises(NotFoundError):
        repo.delete(entity_id="missing")


def test_update_replaces_row_wholesale():
    repo = InMemoryKeyedRepository()
    repo.create(entity={"id": "e1", "a": 1, "b": 2})
    repo.update(entity={"id": "e1", "a": 3})

    assert repo.get(entity_id="e1") == {"id": "e1", "a": 3}


def test_delete_removes_row():
    repo = InMemoryKeyedRepository()
    repo.create(entity={"id": "e1"})
    repo.delete(entity_id="e1")

    assert repo.count() == 0
    with pytest.raises(NotFoundError):
        repo.get(entity_id="e1")


def test_list_applies_predicate():
    repo = InMemoryCasesRepository()
    repo.create(entity={"id": "c1", "status": "PENDING"})
    repo.create(entity={"id": "c2", "status": "RESOLVED"})
    repo.create(entity={"id": "c3", "status": "PENDING"})

    assert len(repo.list()) == 3
    assert sorted(x["id"] for x in repo.list_by_status(status="PENDING")) == ["c1", "c3"]
    assert [x["id"] for x in repo.list_by_status(status="RESOLVED")] == ["c2"]
    assert len(repo.list_by_status(status="")) == 3


def test_documents_repository_lists_by_case():
    repo = InMemoryDocumentsRepository()
    repo.create(entity={"id": "d1", "caseId": "c1"})
    repo.create(entity={"id": "d2", "caseId": "c2"})

    assert [x["id"] for x in repo.list_by_case(case_id="c1")] == ["d1"]
    assert repo.list_by_case(case_id="unknown") == []


def test_custom_id_field():
    repo = InMemoryKeyedRepository(id_field="alertId")
    repo.create(entity={"alertId": "x1"})

    assert repo.get(entity_id="x1") == {"alertId": "x1"}


def test_concurrent_creates_keep_every_row():
    repo = InMemoryKeyedRepository()

    def _worker(offset: int) -> None:
        for i in range(50):
            repo.create(entity={"id": f"e_{offset}_{i}"})
            repo.list()

    threads = [threading.Thread(target=_worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert repo.count() == 400


def test_read_write_lock_allows_shared_readers():
    lock = ReadWriteLock()
    inside = threading.Barrier(2, timeout=2)

    def _reader() -> None:
        with lock.read():
            inside.wait()

    threads = [threading.Thread(target=_reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=3)

    assert not any(t.is_alive() for t in threads)
    with lock.write():
        pass
