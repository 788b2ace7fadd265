"""structlog setup shared by the API server."""

import logging

import structlog


def configure_logging(level: str | int = "INFO") -> None:
    """Configure structlog with level filtering and console rendering.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric logging level

    Raises:
        ValueError: If the level name is unknown
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
