from __future__ import annotations

from dispute_intake.config import MAX_WEBHOOK_BATCH_SIZE, AppConfig, WebhookConfig


def test_app_config_defaults():
    cfg = AppConfig.from_env({})

    assert cfg.environment == "development"
    assert cfg.port == 8080
    assert cfg.log_level == "info"
    assert cfg.cors_allow_origins == ["*"]
    assert cfg.is_production is False


def test_app_config_reads_environment():
    cfg = AppConfig.from_env(
        {
            "ENVIRONMENT": "production",
            "PORT": "9090",
            "LOG_LEVEL": "DEBUG",
            "CORS_ALLOW_ORIGINS": "https://a.example, https://b.example",
        }
    )

    assert cfg.is_production is True
    assert cfg.port == 9090
    assert cfg.log_level == "debug"
    assert cfg.cors_allow_origins == ["https://a.example", "https://b.example"]


def test_webhook_config_defaults():
    cfg = WebhookConfig.from_env({})

    assert cfg.endpoint == "/api/v6/webhooks/ethoca"
    assert cfg.secret_key == ""
    assert cfg.timeout_s == 30
    assert cfg.max_retries == 3
    assert cfg.batch_size == MAX_WEBHOOK_BATCH_SIZE


def test_webhook_config_invalid_integers_fall_back_to_defaults():
    cfg = WebhookConfig.from_env(
        {
            "ETHOCA_WEBHOOK_TIMEOUT": "soon",
            "ETHOCA_WEBHOOK_MAX_RETRIES": "-2",
            "ETHOCA_WEBHOOK_BATCH_SIZE": "many",
        }
    )

    assert cfg.timeout_s == 30
    assert cfg.max_retries == 0
    assert cfg.batch_size == 25


def test_webhook_config_caps_batch_size_and_normalizes_endpoint():
    cfg = WebhookConfig.from_env({"ETHOCA_WEBHOOK_BATCH_SIZE": "100", "ETHOCA_WEBHOOK_ENDPOINT": "hooks/ethoca/"})

    assert cfg.batch_size == 25
    assert cfg.endpoint == "/hooks/ethoca"


def test_webhook_public_view_hides_secret():
    cfg = WebhookConfig.from_env({"ETHOCA_WEBHOOK_SECRET_KEY": "s3cr3t"})

    view = cfg.public_view()

    assert "s3cr3t" not in str(view)
    assert view["signatureConfigured"] is True
