import logging
from flask import Flask


def configure_logging(app: Flask) -> None:
    """Prosta konfiguracja logowania (poziom z LOG_LEVEL)."""
    log_level_name = app.config.get("LOG_LEVEL", "INFO")
    log_level = getattr(logging, str(log_level_name).upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # requests/urllib3 potrafią mocno spamować na DEBUG
    logging.getLogger("urllib3").setLevel(max(log_level, logging.INFO))

    app.logger.setLevel(log_level)
    app.logger.info("Logging configured, level=%s", log_level_name)
