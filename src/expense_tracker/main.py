"""Command-line entrypoint that runs the web server."""

import logging

import uvicorn

from expense_tracker.api.app import create_app
from expense_tracker.app_logging import configure_logging
from expense_tracker.config import load_settings
from expense_tracker.containers import build_container
from expense_tracker.domain.errors import ConfigurationError, DatabaseConnectionError

logger = logging.getLogger(__name__)


def main() -> None:
    """Validate configuration and the database, then serve the app.

    Exits with status 1 when configuration is missing or the database
    cannot be reached.
    """
    configure_logging()
    try:
        settings = load_settings()
        container = build_container(settings)
        container.check_connection()
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(1) from exc
    except DatabaseConnectionError as exc:
        logger.error("Database connection error: %s", exc)
        raise SystemExit(1) from exc

    logger.info(
        "Starting server",
        extra={"port": settings.port, "environment": settings.environment},
    )
    uvicorn.run(create_app(container), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
