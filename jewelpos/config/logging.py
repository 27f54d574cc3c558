"""
Structured logging for the POS, using structlog.

Every event carries the shop and deployment it came from. Request handlers
additionally bind ``request_id`` and ``actor_id`` through contextvars (see
``jewelpos.api.middleware.logging``), so sale and memo events can be traced
back to the staff member who caused them. Development gets colored console
output, everything else JSON lines.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from jewelpos.config.settings import get_settings

# Event keys that may carry Decimal money values
DECIMAL_FIELDS = frozenset({"total", "total_amount", "subtotal", "amount"})


def add_shop_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp the shop, service version and environment on every event."""
    settings = get_settings()
    event_dict.setdefault("shop", settings.notifications.shop_name)
    event_dict["service"] = f"{settings.app_name}/{settings.app_version}"
    event_dict["environment"] = settings.environment
    return event_dict


def stringify_money(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Render Decimal amounts as strings so JSON output never turns them into floats."""
    for key in DECIMAL_FIELDS & event_dict.keys():
        value = event_dict[key]
        if value is not None and not isinstance(value, (str, int)):
            event_dict[key] = str(value)
    return event_dict


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_shop_context,
        stringify_money,
    ]

    if settings.environment == "development":
        renderer: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderer = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    # Webhook client and driver chatter
    for noisy in ("httpx", "httpcore", "aiosqlite", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
