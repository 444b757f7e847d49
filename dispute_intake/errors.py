from __future__ import annotations


class ApiError(Exception):
    def __init__(
        self,
        *,
        code: str,
        message: str,
        error_class: str,
        retryable: bool,
        http_status: int,
        details: dict[str, object] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.error_class = error_class
        self.retryable = retryable
        self.http_status = http_status
        self.details = details


class EntityError(Exception):
    def __init__(self, *, entity: str, entity_id: str, message: str) -> None:
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class NotFoundError(EntityError):
    def __init__(self, *, entity: str, entity_id: str) -> None:
        super().__init__(entity=entity, entity_id=entity_id, message=f"{entity} not found: {entity_id}")


class AlreadyExistsError(EntityError):
    def __init__(self, *, entity: str, entity_id: str) -> None:
        super().__init__(entity=entity, entity_id=entity_id, message=f"{entity} already exists: {entity_id}")


class OutcomeValidationError(Exception):
    """A business invariant on a single alert outcome does not hold."""


class OutcomeProcessingError(Exception):
    """An outcome route failed to handle an otherwise valid outcome."""
