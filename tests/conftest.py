import pathlib
import sys

import pytest
from fastapi.testclient import TestClient

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dispute_intake.container import ServiceContainer
from dispute_intake.main import create_app

_ENV_KEYS = (
    "ENVIRONMENT",
    "PORT",
    "LOG_LEVEL",
    "CORS_ALLOW_ORIGINS",
    "ETHOCA_WEBHOOK_ENDPOINT",
    "ETHOCA_WEBHOOK_SECRET_KEY",
    "ETHOCA_WEBHOOK_TIMEOUT",
    "ETHOCA_WEBHOOK_MAX_RETRIES",
    "ETHOCA_WEBHOOK_BATCH_SIZE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def services() -> ServiceContainer:
    return ServiceContainer.build(environ={})


@pytest.fixture
def client(services: ServiceContainer) -> TestClient:
    return TestClient(create_app(services))
