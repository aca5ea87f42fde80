"""
Flask Application Factory.

Creates and configures the Flask application for Cloud Run.
"""

import signal
import sys
from typing import Optional

from flask import Flask

from sheet_forwarder.api import api_bp
from sheet_forwarder.config import settings
from sheet_forwarder.infrastructure.logging import log_request_context, logger
from sheet_forwarder.infrastructure.metrics import setup_metrics_middleware


def _handle_sigterm(signum: int, frame) -> None:
    """Cloud Run sends SIGTERM before stopping the container."""
    logger.info(
        "Received SIGTERM, shutting down gracefully",
        extra={"extra_fields": {"signal": signum}}
    )
    sys.exit(0)


def create_app(config: Optional[dict] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config: Optional configuration dictionary.

    Returns:
        Configured Flask application.
    """
    app = Flask(__name__)

    app.json.sort_keys = False

    if config:
        app.config.update(config)

    log_request_context(app)
    setup_metrics_middleware(app)

    app.register_blueprint(api_bp)

    logger.info(
        "Application initialized",
        extra={"extra_fields": {
            "environment": settings.environment,
            "sheet_configured": settings.sheet.is_configured,
        }}
    )

    return app


app = create_app()


if __name__ == "__main__":
    signal.signal(signal.SIGTERM, _handle_sigterm)
    app.run(
        host="0.0.0.0",
        port=settings.port,
        debug=settings.debug,
    )
