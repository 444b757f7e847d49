from __future__ import annotations

import logging
import threading
import time
import uuid
from collections import deque
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from dispute_intake.config import WebhookConfig
from dispute_intake.errors import OutcomeValidationError
from dispute_intake.outcome_routes import OutcomeRouteRegistry, build_default_route_registry
from dispute_intake.schemas import (
    AlertOutcome,
    OutcomeAcknowledgement,
    OutcomeError,
    OutcomeErrors,
    StatusUpdate,
)

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "SUCCESS"
STATUS_FAILURE = "FAILURE"

REASON_VALIDATION_ERROR = "VALIDATION_ERROR"
REASON_PROCESSING_ERROR = "PROCESSING_ERROR"

EVENT_LOG_LIMIT = 1000


def validate_outcome(outcome: AlertOutcome) -> None:
    if outcome.refund_status == "REFUNDED" and outcome.refund.amount.value <= 0:
        raise OutcomeValidationError("refund amount must be greater than 0 when refund status is REFUNDED")
    if outcome.outcome == "STOPPED" and outcome.amount_stopped.value <= 0:
        raise OutcomeValidationError("amount stopped must be greater than 0 when outcome is STOPPED")


def _failure(alert_id: str, *, reason_code: str, description: str, recoverable: bool, details: str) -> StatusUpdate:
    return StatusUpdate(
        alert_id=alert_id,
        status=STATUS_FAILURE,
        errors=OutcomeErrors(
            error=[
                OutcomeError(
                    source="Service",
                    reason_code=reason_code,
                    description=description,
                    recoverable=recoverable,
                    details=details[:1000],
                )
            ]
        ),
    )


class EthocaWebhookProcessor:
    """Turns a batch of alert outcomes into a per-outcome acknowledgment.

    Each outcome is validated and routed on its own. A bad outcome becomes a
    FAILURE entry in the acknowledgment; the batch itself never fails.
    """

    def __init__(
        self,
        *,
        config: WebhookConfig,
        routes: OutcomeRouteRegistry | None = None,
        event_log_limit: int = EVENT_LOG_LIMIT,
    ) -> None:
        self.config = config
        self.routes = routes if routes is not None else build_default_route_registry()
        self._events_lock = threading.Lock()
        self._events: deque[dict[str, Any]] = deque(maxlen=max(1, event_log_limit))
        self._webhook_count = 0
        self._outcome_count = 0
        self._failed_count = 0
        self._processing_ms_total = 0.0

    def process_webhook(
        self,
        outcomes: Sequence[AlertOutcome],
        *,
        request_id: str | None = None,
    ) -> OutcomeAcknowledgement:
        started = time.perf_counter()
        logger.info(
            "processing ethoca webhook",
            extra={"outcomeCount": len(outcomes), "requestId": request_id},
        )
        responses = [self._process_outcome(outcome) for outcome in outcomes]
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        with self._events_lock:
            self._webhook_count += 1
            self._processing_ms_total += elapsed_ms
        logger.info(
            "ethoca webhook processed",
            extra={
                "processedCount": len(responses),
                "failedCount": sum(1 for x in responses if x.status == STATUS_FAILURE),
                "requestId": request_id,
                "processingTimeMs": round(elapsed_ms, 3),
            },
        )
        return OutcomeAcknowledgement(outcome_responses=responses)

    def _process_outcome(self, outcome: AlertOutcome) -> StatusUpdate:
        event = {
            "id": str(uuid.uuid4()),
            "alertId": outcome.alert_id,
            "outcome": outcome.outcome,
            "refundStatus": outcome.refund_status,
            "amount": outcome.refund.amount.value,
            "currency": outcome.refund.amount.currency_code,
            "comments": outcome.comments,
            "processedAt": datetime.now(UTC).isoformat(),
            "status": "PROCESSING",
            "errorMessage": None,
        }
        try:
            validate_outcome(outcome)
        except OutcomeValidationError as exc:
            logger.warning(
                "outcome validation failed",
                extra={"alertId": outcome.alert_id, "error": str(exc)},
            )
            self._record(event, status="FAILED", error=str(exc))
            return _failure(
                outcome.alert_id,
                reason_code=REASON_VALIDATION_ERROR,
                description="Outcome validation failed",
                recoverable=False,
                details=str(exc),
            )

        route = self.routes.select(outcome.outcome)
        try:
            route.handle(outcome)
        except Exception as exc:
            logger.error(
                "outcome processing failed",
                extra={"alertId": outcome.alert_id, "route": route.name, "error": str(exc)},
            )
            self._record(event, status="FAILED", error=str(exc))
            return _failure(
                outcome.alert_id,
                reason_code=REASON_PROCESSING_ERROR,
                description="Failed to process outcome",
                recoverable=True,
                details=str(exc) or type(exc).__name__,
            )

        self._record(event, status="SUCCESS", error=None)
        logger.info(
            "outcome processed",
            extra={"alertId": outcome.alert_id, "route": route.name, "eventId": event["id"]},
        )
        return StatusUpdate(alert_id=outcome.alert_id, status=STATUS_SUCCESS)

    def _record(self, event: dict[str, Any], *, status: str, error: str | None) -> None:
        event["status"] = status
        event["errorMessage"] = error
        with self._events_lock:
            self._events.append(event)
            self._outcome_count += 1
            if status != "SUCCESS":
                self._failed_count += 1

    def recent_events(self, limit: int = 50) -> list[dict[str, Any]]:
        with self._events_lock:
            events = list(self._events)
        if limit < 1:
            return []
        return [dict(x) for x in events[-limit:]]

    def stats(self) -> dict[str, Any]:
        with self._events_lock:
            last_event = self._events[-1] if self._events else None
            webhook_count = self._webhook_count
            outcome_count = self._outcome_count
            failed_count = self._failed_count
            processing_ms_total = self._processing_ms_total
        return {
            "totalWebhooks": webhook_count,
            "totalOutcomes": outcome_count,
            "successfulOutcomes": outcome_count - failed_count,
            "failedOutcomes": failed_count,
            "averageProcessingTimeMs": round(processing_ms_total / webhook_count, 3) if webhook_count else 0.0,
            "lastProcessedAt": last_event["processedAt"] if last_event is not None else None,
        }

    def reset(self) -> None:
        with self._events_lock:
            self._events.clear()
            self._webhook_count = 0
            self._outcome_count = 0
            self._failed_count = 0
            self._processing_ms_total = 0.0
