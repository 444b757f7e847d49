#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import random
import string
import sys
from typing import Any
from urllib import request
from urllib.error import HTTPError, URLError


def _alert_id() -> str:
    return "".join(random.choices(string.ascii_uppercase + string.digits, k=25))


def _outcome(*, outcome: str, refund_status: str, refund_value: float, stopped_value: float) -> dict[str, Any]:
    return {
        "alertId": _alert_id(),
        "outcome": outcome,
        "refundStatus": refund_status,
        "refund": {
            "amount": {"value": refund_value, "currencyCode": "USD"},
            "timestamp": "2024-01-15T10:30:00Z",
        },
        "amountStopped": {"value": stopped_value, "currencyCode": "USD"},
        "comments": "sample outcome",
    }


def build_sample_batch(*, include_failures: bool) -> dict[str, Any]:
    outcomes = [
        _outcome(outcome="STOPPED", refund_status="NOT_REFUNDED", refund_value=0, stopped_value=100),
        _outcome(outcome="RESOLVED", refund_status="REFUNDED", refund_value=50, stopped_value=0),
        _outcome(outcome="OTHER", refund_status="NOT_REFUNDED", refund_value=0, stopped_value=0),
    ]
    if include_failures:
        outcomes.append(_outcome(outcome="RESOLVED", refund_status="REFUNDED", refund_value=0, stopped_value=0))
        outcomes.append(_outcome(outcome="STOPPED", refund_status="NOT_REFUNDED", refund_value=0, stopped_value=0))
    return {"outcomes": outcomes}


def main() -> int:
    parser = argparse.ArgumentParser(description="Send a sample Ethoca outcome batch to a running service.")
    parser.add_argument("--url", default="http://127.0.0.1:8080/api/v6/webhooks/ethoca", help="webhook URL")
    parser.add_argument("--timeout-s", type=float, default=5.0, help="HTTP timeout in seconds")
    parser.add_argument("--with-failures", action="store_true", help="add outcomes that violate business rules")
    args = parser.parse_args()

    body = json.dumps(build_sample_batch(include_failures=args.with_failures)).encode("utf-8")
    req = request.Request(
        url=args.url,
        method="POST",
        data=body,
        headers={"Content-Type": "application/json"},
    )
    try:
        with request.urlopen(req, timeout=args.timeout_s) as resp:
            status = int(resp.getcode())
            payload = json.loads(resp.read().decode("utf-8"))
    except HTTPError as exc:
        status = int(exc.code)
        payload = json.loads(exc.read().decode("utf-8") or "{}")
    except URLError as exc:
        print(f"request failed: {exc.reason}", file=sys.stderr)
        return 2

    print(json.dumps({"status_code": status, "body": payload}, ensure_ascii=False, indent=2))
    return 0 if status == 200 else 1


if __name__ == "__main__":
    raise SystemExit(main())
