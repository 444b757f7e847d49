from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

MAX_WEBHOOK_BATCH_SIZE = 25


def _env_int(env: Mapping[str, str], name: str, default: int, *, minimum: int = 0) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, value)


def _split_csv(raw: str) -> list[str]:
    return [x.strip() for x in raw.split(",") if x.strip()]


@dataclass(frozen=True)
class AppConfig:
    environment: str
    host: str
    port: int
    log_level: str
    service_name: str
    service_version: str
    cors_allow_origins: list[str]
    shutdown_timeout_s: int

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        return cls(
            environment=env.get("ENVIRONMENT", "development").strip() or "development",
            host=env.get("HOST", "0.0.0.0").strip() or "0.0.0.0",
            port=_env_int(env, "PORT", 8080, minimum=1),
            log_level=env.get("LOG_LEVEL", "info").strip().lower() or "info",
            service_name=env.get("SERVICE_NAME", "dispute-intake").strip() or "dispute-intake",
            service_version=env.get("SERVICE_VERSION", "1.0.0").strip() or "1.0.0",
            cors_allow_origins=_split_csv(env.get("CORS_ALLOW_ORIGINS", "*")),
            shutdown_timeout_s=_env_int(env, "SHUTDOWN_TIMEOUT_S", 30, minimum=1),
        )


@dataclass(frozen=True)
class WebhookConfig:
    """Ethoca webhook settings.

    ``secret_key``, ``timeout_s`` and ``max_retries`` are carried for the
    health endpoint only; signature checks and retries are not implemented.
    """

    endpoint: str
    secret_key: str
    timeout_s: int
    max_retries: int
    batch_size: int

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "WebhookConfig":
        env = os.environ if environ is None else environ
        endpoint = env.get("ETHOCA_WEBHOOK_ENDPOINT", "").strip() or "/api/v6/webhooks/ethoca"
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        batch_size = _env_int(env, "ETHOCA_WEBHOOK_BATCH_SIZE", MAX_WEBHOOK_BATCH_SIZE, minimum=1)
        return cls(
            endpoint=endpoint.rstrip("/") or "/",
            secret_key=env.get("ETHOCA_WEBHOOK_SECRET_KEY", "").strip(),
            timeout_s=_env_int(env, "ETHOCA_WEBHOOK_TIMEOUT", 30, minimum=1),
            max_retries=_env_int(env, "ETHOCA_WEBHOOK_MAX_RETRIES", 3),
            batch_size=min(batch_size, MAX_WEBHOOK_BATCH_SIZE),
        )

    def public_view(self) -> dict[str, object]:
        return {
            "endpoint": self.endpoint,
            "timeout": self.timeout_s,
            "maxRetries": self.max_retries,
            "batchSize": self.batch_size,
            "signatureConfigured": bool(self.secret_key),
        }
