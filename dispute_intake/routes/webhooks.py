from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime

from fastapi import APIRouter, Query, Request
from pydantic import ValidationError

from dispute_intake.config import WebhookConfig
from dispute_intake.errors import ApiError
from dispute_intake.ethoca_webhook import EVENT_LOG_LIMIT
from dispute_intake.routes._deps import services_from_request, trace_id_from_request
from dispute_intake.schemas import EthocaWebhook, success_envelope

logger = logging.getLogger(__name__)


def _require_json_content_type(request: Request) -> None:
    content_type = request.headers.get("content-type", "")
    if content_type.split(";", maxsplit=1)[0].strip().lower() != "application/json":
        raise ApiError(
            code="INVALID_CONTENT_TYPE",
            message="Invalid content type. Expected application/json",
            error_class="validation",
            retryable=False,
            http_status=400,
            details={"contentType": content_type},
        )


def _parse_webhook(body: bytes) -> EthocaWebhook:
    try:
        return EthocaWebhook.model_validate_json(body)
    except ValidationError as exc:
        raise ApiError(
            code="INVALID_JSON",
            message="Invalid JSON payload",
            error_class="validation",
            retryable=False,
            http_status=400,
            details={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
        ) from exc


def _check_batch_size(webhook: EthocaWebhook, *, batch_size: int) -> None:
    count = len(webhook.outcomes)
    if count == 0:
        raise ApiError(
            code="NO_OUTCOMES",
            message="No outcomes provided in webhook payload",
            error_class="validation",
            retryable=False,
            http_status=400,
        )
    if count > batch_size:
        raise ApiError(
            code="TOO_MANY_OUTCOMES",
            message=f"Maximum of {batch_size} outcomes allowed per webhook",
            error_class="validation",
            retryable=False,
            http_status=400,
            details={"outcomeCount": count, "limit": batch_size},
        )


def build_webhook_router(config: WebhookConfig) -> APIRouter:
    router = APIRouter(prefix=config.endpoint, tags=["webhooks"])

    @router.post("")
    async def handle_ethoca_webhook(request: Request):
        request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
        logger.info(
            "received ethoca webhook",
            extra={
                "requestId": request_id,
                "path": request.url.path,
                "userAgent": request.headers.get("user-agent", ""),
                "remoteIp": request.client.host if request.client else "",
            },
        )
        _require_json_content_type(request)
        webhook = _parse_webhook(await request.body())
        services = services_from_request(request)
        _check_batch_size(webhook, batch_size=services.webhook_config.batch_size)

        acknowledgement = services.webhook.process_webhook(webhook.outcomes, request_id=request_id)
        data = {
            "status": "SUCCESS",
            "outcomes": [
                x.model_dump(mode="json", by_alias=True, exclude_none=True)
                for x in acknowledgement.outcome_responses
            ],
            "requestId": request_id,
        }
        return success_envelope(data, trace_id_from_request(request))

    @router.get("/health")
    def webhook_health(request: Request):
        services = services_from_request(request)
        data = {
            "status": "healthy",
            "service": "ethoca-webhook",
            **services.webhook_config.public_view(),
            "routes": services.webhook.routes.kinds(),
            "timestamp": datetime.now(UTC).isoformat(),
        }
        return success_envelope(data, trace_id_from_request(request))

    @router.get("/stats")
    def webhook_stats(request: Request):
        data = {
            "status": "ok",
            "stats": services_from_request(request).webhook.stats(),
            "timestamp": datetime.now(UTC).isoformat(),
        }
        return success_envelope(data, trace_id_from_request(request))

    @router.get("/events")
    def webhook_events(request: Request, limit: int = Query(default=50, ge=1, le=EVENT_LOG_LIMIT)):
        events = services_from_request(request).webhook.recent_events(limit)
        return success_envelope({"events": events, "total": len(events)}, trace_id_from_request(request))

    return router
