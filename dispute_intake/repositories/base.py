from __future__ import annotations

import copy
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from dispute_intake.errors import AlreadyExistsError, NotFoundError


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve an update.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryKeyedRepository:
    entity_name = "entity"

    def __init__(self, rows: dict[str, dict[str, Any]] | None = None, *, id_field: str = "id") -> None:
        self._rows = rows if rows is not None else {}
        self._id_field = id_field
        self._lock = ReadWriteLock()

    def _key(self, entity: dict[str, Any]) -> str:
        return str(entity[self._id_field])

    def create(self, *, entity: dict[str, Any]) -> dict[str, Any]:
        item = copy.deepcopy(entity)
        key = self._key(item)
        with self._lock.write():
            if key in self._rows:
                raise AlreadyExistsError(entity=self.entity_name, entity_id=key)
            self._rows[key] = item
        return copy.deepcopy(item)

    def get(self, *, entity_id: str) -> dict[str, Any]:
        with self._lock.read():
            row = self._rows.get(entity_id)
        if row is None:
            raise NotFoundError(entity=self.entity_name, entity_id=entity_id)
        return copy.deepcopy(row)

    def list(self, *, predicate: Callable[[dict[str, Any]], bool] | None = None) -> list[dict[str, Any]]:
        with self._lock.read():
            rows = list(self._rows.values())
        return [copy.deepcopy(x) for x in rows if predicate is None or predicate(x)]

    def update(self, *, entity: dict[str, Any]) -> dict[str, Any]:
        item = copy.deepcopy(entity)
        key = self._key(item)
        with self._lock.write():
            if key not in self._rows:
                raise NotFoundError(entity=self.entity_name, entity_id=key)
            self._rows[key] = item
        return copy.deepcopy(item)

    def delete(self, *, entity_id: str) -> None:
        with self._lock.write():
            if entity_id not in self._rows:
                raise NotFoundError(entity=self.entity_name, entity_id=entity_id)
            del self._rows[entity_id]

    def count(self) -> int:
        with self._lock.read():
            return len(self._rows)

    def reset(self) -> None:
        with self._lock.write():
            self._rows.clear()
