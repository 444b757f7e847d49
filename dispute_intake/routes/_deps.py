from __future__ import annotations

import uuid
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from dispute_intake.container import ServiceContainer
from dispute_intake.errors import AlreadyExistsError, ApiError, EntityError, NotFoundError
from dispute_intake.schemas import error_envelope


def trace_id_from_request(request: Request) -> str:
    trace_id = getattr(request.state, "trace_id", None)
    if trace_id:
        return trace_id
    return uuid.uuid4().hex


def request_id_from_request(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id
    return f"req_{uuid.uuid4().hex[:12]}"


def services_from_request(request: Request) -> ServiceContainer:
    return request.app.state.services


def error_response(
    request: Request,
    *,
    code: str,
    message: str,
    error_class: str,
    retryable: bool,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_envelope(
            code=code,
            message=message,
            error_class=error_class,
            retryable=retryable,
            trace_id=trace_id_from_request(request),
            details=details,
        ),
    )


def api_error_from_entity_error(exc: EntityError) -> ApiError:
    prefix = exc.entity.upper()
    if isinstance(exc, NotFoundError):
        return ApiError(
            code=f"{prefix}_NOT_FOUND",
            message=f"{exc.entity} not found",
            error_class="validation",
            retryable=False,
            http_status=404,
        )
    if isinstance(exc, AlreadyExistsError):
        return ApiError(
            code=f"{prefix}_ALREADY_EXISTS",
            message=f"{exc.entity} already exists",
            error_class="conflict",
            retryable=False,
            http_status=409,
        )
    return ApiError(
        code=f"{prefix}_ERROR",
        message=str(exc),
        error_class="internal",
        retryable=False,
        http_status=500,
    )
