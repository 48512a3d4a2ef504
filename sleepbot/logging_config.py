"""Centralized logging configuration for the sleep survey bot."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.types import Processor

from sleepbot.config import settings

# Define the project root to calculate the log file path
project_root = Path(__file__).parent.parent
log_file_path = project_root / "logs/bot_interactions.log"

INTERACTION_LOGGER_PREFIX = "bot.interactions"

_logging_configured = False


# Context keys printed first, in this order, in the interaction log
INTERACTION_KEYS = ("chat_id", "user_id", "handler", "text", "data", "status", "duration_ms")


def _interaction_renderer(
    _: logging.Logger,
    __: str,
    event_dict: dict[str, Any],
) -> str:
    """Render an interaction event as ``time | LEVEL | event | key=value ...``."""

    head = [
        str(event_dict.pop("timestamp", "")),
        str(event_dict.pop("level", "")).upper(),
        str(event_dict.pop("event", "")),
    ]
    event_dict.pop("logger", None)

    ordered = [(key, event_dict.pop(key, None)) for key in INTERACTION_KEYS]
    details = [
        f"{key}={value}"
        for key, value in [*ordered, *event_dict.items()]
        if value not in (None, "")
    ]

    return " | ".join(part for part in [*head, " ".join(details)] if part)


def setup_logging() -> None:
    """
    Configure structured logging for the entire application.

    Verbose diagnostics go to stdout, while only the user interaction logs are
    persisted in ``logs/bot_interactions.log``.
    """

    global _logging_configured

    if _logging_configured:
        return

    log_level = settings.log_level.upper()

    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=True),
        foreign_pre_chain=shared_processors,
    )

    file_formatter = structlog.stdlib.ProcessorFormatter(
        processor=_interaction_renderer,
        foreign_pre_chain=shared_processors,
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)

    file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
    file_handler.setFormatter(file_formatter)
    file_handler.addFilter(logging.Filter(INTERACTION_LOGGER_PREFIX))

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(log_level)

    # Third-party chatter stays out of the interaction log
    for noisy_logger in ("aiogram", "httpx", "httpcore", "asyncio", "uvicorn.access"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    logger = structlog.get_logger("logging_setup")
    logger.info(
        "Logging configured",
        level=log_level,
        file_path=str(log_file_path),
    )

    _logging_configured = True
