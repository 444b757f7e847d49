from __future__ import annotations

import logging

import uvicorn

from dispute_intake.config import AppConfig
from dispute_intake.main import create_app

logger = logging.getLogger("dispute_intake.server")


def main() -> None:
    cfg = AppConfig.from_env()
    app = create_app()
    logger.info(
        "starting dispute intake service",
        extra={"port": cfg.port, "environment": cfg.environment, "service": cfg.service_name},
    )
    uvicorn.run(
        app,
        host=cfg.host,
        port=cfg.port,
        log_level=cfg.log_level if cfg.log_level != "warn" else "warning",
        access_log=False,
        timeout_graceful_shutdown=cfg.shutdown_timeout_s,
    )
    logger.info("server exited")


if __name__ == "__main__":
    main()
