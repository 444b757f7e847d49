from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from dispute_intake.container import ServiceContainer
from dispute_intake.errors import ApiError, EntityError
from dispute_intake.logging_config import setup_logging
from dispute_intake.routes import cases as cases_routes
from dispute_intake.routes import documents as documents_routes
from dispute_intake.routes._deps import (
    api_error_from_entity_error,
    error_response,
    request_id_from_request,
    trace_id_from_request,
)
from dispute_intake.routes.webhooks import build_webhook_router
from dispute_intake.schemas import success_envelope

logger = logging.getLogger(__name__)


def _validation_details(exc: RequestValidationError) -> dict[str, Any]:
    errors = []
    for err in exc.errors():
        errors.append(
            {
                "loc": [str(x) for x in err.get("loc", ())],
                "msg": str(err.get("msg", "")),
                "type": str(err.get("type", "")),
            }
        )
    return {"errors": errors}


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    services = services if services is not None else ServiceContainer.build()
    app_cfg = services.app_config
    setup_logging(app_cfg.log_level)

    app = FastAPI(
        title="Dispute Intake Service API",
        version=app_cfg.service_version,
        debug=not app_cfg.is_production,
    )
    app.state.services = services

    if app_cfg.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=app_cfg.cors_allow_origins,
            allow_credentials="*" not in app_cfg.cors_allow_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def add_trace_id(request: Request, call_next):
        request.state.trace_id = request.headers.get("x-trace-id", "").strip() or uuid.uuid4().hex
        request.state.request_id = request.headers.get("x-request-id", "").strip() or str(uuid.uuid4())
        started = time.perf_counter()
        response = await call_next(request)
        response.headers["x-trace-id"] = trace_id_from_request(request)
        response.headers["x-request-id"] = request_id_from_request(request)
        logger.info(
            "http request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "latency_ms": round((time.perf_counter() - started) * 1000.0, 3),
                "client_ip": request.client.host if request.client else "",
                "trace_id": trace_id_from_request(request),
                "request_id": request_id_from_request(request),
            },
        )
        return response

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        logger.warning(
            "request rejected",
            extra={"code": exc.code, "path": request.url.path, "trace_id": trace_id_from_request(request)},
        )
        return error_response(
            request,
            code=exc.code,
            message=exc.message,
            error_class=exc.error_class,
            retryable=exc.retryable,
            status_code=exc.http_status,
            details=exc.details,
        )

    @app.exception_handler(EntityError)
    async def handle_entity_error(request: Request, exc: EntityError):
        return await handle_api_error(request, api_error_from_entity_error(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        if request.method == "POST" and request.url.path == "/api/v6/documents":
            for err in exc.errors():
                if "file" in tuple(err.get("loc", ())):
                    return error_response(
                        request,
                        code="FILE_REQUIRED",
                        message="No file uploaded",
                        error_class="validation",
                        retryable=False,
                        status_code=400,
                    )
        return error_response(
            request,
            code="REQ_VALIDATION_FAILED",
            message="invalid payload",
            error_class="validation",
            retryable=False,
            status_code=400,
            details=_validation_details(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(
                request,
                code="REQ_NOT_FOUND",
                message="resource not found",
                error_class="validation",
                retryable=False,
                status_code=404,
            )
        if exc.status_code == 405:
            return error_response(
                request,
                code="METHOD_NOT_ALLOWED",
                message="method not allowed",
                error_class="validation",
                retryable=False,
                status_code=405,
            )
        return error_response(
            request,
            code="REQ_HTTP_ERROR",
            message=str(exc.detail),
            error_class="validation",
            retryable=False,
            status_code=exc.status_code,
        )

    @app.get("/__ops/ping", response_class=PlainTextResponse)
    def ping() -> str:
        return "pong"

    @app.get("/health")
    def health(request: Request) -> dict[str, object]:
        data = {
            "status": "ok",
            "service": app_cfg.service_name,
            "version": app_cfg.service_version,
            "environment": app_cfg.environment,
        }
        return success_envelope(data, trace_id_from_request(request))

    app.include_router(cases_routes.router)
    app.include_router(documents_routes.router)
    app.include_router(build_webhook_router(services.webhook_config))
    return app
