from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateCaseRequest(CamelModel):
    case_type: str = Field(min_length=1)
    primary_account_number: str = Field(min_length=1)
    transaction_amount: float = Field(gt=0)
    transaction_currency: str = Field(min_length=1)
    transaction_date: datetime
    transaction_id: str = Field(min_length=1)
    merchant_name: str = ""
    merchant_category_code: str = ""
    reason_code: str = Field(min_length=1)
    dispute_amount: float = Field(default=0, ge=0)
    dispute_currency: str = ""
    filing_as: str = Field(min_length=1)
    filing_ica: str = Field(min_length=1)
    filed_against_ica: str = Field(min_length=1)
    filed_by: str = ""
    filed_by_contact_name: str = ""
    filed_by_contact_phone: str = ""
    filed_by_contact_email: str = ""


class UpdateCaseRequest(CreateCaseRequest):
    status: str | None = Field(default=None, min_length=1, max_length=32)


# Ethoca alert outcome webhook. Amount lower bounds stay at 0 here; the
# conditional "> 0" rules are enforced per outcome by EthocaWebhookProcessor.


class RefundAmount(CamelModel):
    value: float = Field(ge=0, le=999999, strict=True)
    currency_code: str = Field(min_length=3, max_length=3)


class Refund(CamelModel):
    amount: RefundAmount
    type: str | None = Field(default=None, min_length=6, max_length=9)
    timestamp: str = Field(min_length=10, max_length=25)
    transaction_id: str | None = Field(default=None, min_length=1, max_length=64)
    acquirer_reference_number: str | None = Field(default=None, min_length=1, max_length=24)


class AmountStopped(CamelModel):
    value: float = Field(ge=0, le=999999, strict=True)
    currency_code: str = Field(min_length=3, max_length=3)


class AlertOutcome(CamelModel):
    alert_id: str = Field(min_length=25, max_length=25)
    outcome: str = Field(min_length=5, max_length=30)
    refund_status: str = Field(min_length=8, max_length=12)
    refund: Refund
    amount_stopped: AmountStopped
    comments: str | None = Field(default=None, min_length=1, max_length=1024)
    action_timestamp: str | None = Field(default=None, min_length=10, max_length=25)


class EthocaWebhook(CamelModel):
    outcomes: list[AlertOutcome]


class OutcomeError(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: str | None = Field(default=None, alias="Source", max_length=100)
    reason_code: str | None = Field(default=None, alias="ReasonCode", max_length=100)
    description: str | None = Field(default=None, alias="Description", max_length=1000)
    recoverable: bool | None = Field(default=None, alias="Recoverable")
    details: str | None = Field(default=None, alias="Details", max_length=1000)


class OutcomeErrors(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: list[OutcomeError] = Field(alias="Error")


class StatusUpdate(CamelModel):
    alert_id: str
    status: Literal["SUCCESS", "FAILURE"]
    errors: OutcomeErrors | None = None


class OutcomeAcknowledgement(CamelModel):
    outcome_responses: list[StatusUpdate] = Field(default_factory=list)


def success_envelope(data: Any, trace_id: str, message: str = "ok") -> dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "message": message,
        "meta": {
            "trace_id": trace_id,
        },
    }


def error_envelope(
    *,
    code: str,
    message: str,
    error_class: str,
    retryable: bool,
    trace_id: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {
        "code": code,
        "message": message,
        "retryable": retryable,
        "class": error_class,
    }
    if details is not None:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "meta": {
            "trace_id": trace_id,
        },
    }
