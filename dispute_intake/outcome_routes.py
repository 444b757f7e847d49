from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from dispute_intake.schemas import AlertOutcome

logger = logging.getLogger(__name__)

FRAUD_OUTCOMES = ("STOPPED", "PARTIALLY_STOPPED")
DISPUTE_OUTCOMES = ("RESOLVED", "RESOLVED_PREVIOUSLY_REFUNDED")


class OutcomeRoute(Protocol):
    name: str

    def handle(self, outcome: AlertOutcome) -> None: ...


class FraudOutcomeRoute:
    name = "fraud"

    def handle(self, outcome: AlertOutcome) -> None:
        logger.info(
            "processing fraud outcome",
            extra={
                "alertId": outcome.alert_id,
                "outcome": outcome.outcome,
                "amountStopped": outcome.amount_stopped.value,
                "currency": outcome.amount_stopped.currency_code,
            },
        )


class DisputeOutcomeRoute:
    name = "dispute"

    def handle(self, outcome: AlertOutcome) -> None:
        logger.info(
            "processing dispute outcome",
            extra={
                "alertId": outcome.alert_id,
                "outcome": outcome.outcome,
                "refundAmount": outcome.refund.amount.value,
                "currency": outcome.refund.amount.currency_code,
            },
        )


class OtherOutcomeRoute:
    name = "other"

    def handle(self, outcome: AlertOutcome) -> None:
        logger.info(
            "processing other outcome",
            extra={"alertId": outcome.alert_id, "outcome": outcome.outcome},
        )


class OutcomeRouteRegistry:
    """Maps an outcome kind to the route that handles it.

    Kinds without an explicit registration go to the fallback route.
    """

    def __init__(self, *, fallback: OutcomeRoute) -> None:
        self._routes: dict[str, OutcomeRoute] = {}
        self._fallback = fallback

    def register(self, route: OutcomeRoute, *, kinds: Iterable[str]) -> None:
        for kind in kinds:
            self._routes[kind] = route

    def set_fallback(self, route: OutcomeRoute) -> None:
        self._fallback = route

    def select(self, outcome_kind: str) -> OutcomeRoute:
        return self._routes.get(outcome_kind, self._fallback)

    def kinds(self) -> dict[str, str]:
        return {kind: route.name for kind, route in sorted(self._routes.items())}


def build_default_route_registry() -> OutcomeRouteRegistry:
    registry = OutcomeRouteRegistry(fallback=OtherOutcomeRoute())
    registry.register(FraudOutcomeRoute(), kinds=FRAUD_OUTCOMES)
    registry.register(DisputeOutcomeRoute(), kinds=DISPUTE_OUTCOMES)
    return registry
