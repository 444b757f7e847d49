from dispute_intake.repositories.base import InMemoryKeyedRepository, ReadWriteLock
from dispute_intake.repositories.cases import InMemoryCasesRepository
from dispute_intake.repositories.documents import InMemoryDocumentsRepository

__all__ = [
    "InMemoryKeyedRepository",
    "ReadWriteLock",
    "InMemoryCasesRepository",
    "InMemoryDocumentsRepository",
]
