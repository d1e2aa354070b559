# -*- coding: utf-8 -*-
"""Logging configuration for structlog + Logfire."""

from __future__ import annotations

import logging
import logfire
import structlog
from typing import Any
from structlog.types import EventDict, Processor
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from nft_sales_tracker.config import get_settings
from nft_sales_tracker.utils.validation import mask_address

LOG_LEVEL_TO_LOGFIRE: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}

# Third-party loggers that are chatty at DEBUG and carry no sale context.
_NOISY_LOGGERS = ("aiohttp", "asyncio", "urllib3")


def _add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Attach logger name, service identity and watched contract to every log event."""
    stdlib_logger = getattr(logger, "_logger", None)
    event_dict["logger"] = (
        getattr(stdlib_logger, "name", None) or getattr(logger, "name", "") or ""
    )
    settings = get_settings()
    app_settings = settings.app
    event_dict["app_name"] = app_settings.app_name
    if app_settings.service_name:
        event_dict["service_name"] = app_settings.service_name
    if app_settings.service_version:
        event_dict["service_version"] = app_settings.service_version
    event_dict["environment"] = app_settings.environment
    event_dict.setdefault("chain_id", settings.chain.chain_id)
    if settings.chain.contract_address:
        event_dict.setdefault(
            "contract_masked", mask_address(settings.chain.contract_address)
        )
    return event_dict


def _build_handlers() -> tuple[list[logging.Handler], list[int]]:
    """Build stdlib handlers for console and rotating file output."""
    logging_settings = get_settings().logging
    handlers: list[logging.Handler] = []
    enabled_levels: list[int] = []

    if logging_settings.log_to_console:
        console_level = getattr(
            logging, logging_settings.console_level.upper(), logging.INFO
        )
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)
        enabled_levels.append(console_level)

    if logging_settings.log_to_file:
        file_level = getattr(logging, logging_settings.file_level.upper(), logging.INFO)
        log_file_path = Path(logging_settings.log_file_path)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file_path,
            when=logging_settings.log_file_when,
            interval=logging_settings.log_file_interval,
            backupCount=logging_settings.log_file_backup_count,
            encoding="utf-8",
            utc=logging_settings.log_file_utc,
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)
        enabled_levels.append(file_level)

    return handlers, enabled_levels


def configure_logging() -> None:
    """Configure structlog + Logfire using settings.

    With app.debug_mode the root logger is opened to DEBUG so that per-event
    sale detection details reach every enabled handler.
    """
    settings = get_settings()
    app_settings = settings.app
    logging_settings = settings.logging

    handlers, enabled_levels = _build_handlers()
    if handlers:
        root_level = min(enabled_levels)
        if app_settings.debug_mode:
            root_level = logging.DEBUG
            for handler in handlers:
                handler.setLevel(logging.DEBUG)
        logging.basicConfig(level=root_level, handlers=handlers, force=True)
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(root_level, logging.INFO))

    if logging_settings.logfire_enabled:
        logfire_min_level = LOG_LEVEL_TO_LOGFIRE.get(
            logging_settings.logfire_level, "info"
        )
        logfire.configure(
            token=logging_settings.logfire_token,
            service_name=app_settings.service_name or app_settings.app_name,
            service_version=app_settings.service_version,
            min_level=logfire_min_level, # type: ignore[arg-type]
            environment=app_settings.environment
        )

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_context,
    ]

    if logging_settings.logfire_enabled:
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]

    # File output is always structured JSON; console uses json_format unless file is also enabled.
    if logging_settings.log_to_console or logging_settings.log_to_file:
        use_json = logging_settings.log_to_file or logging_settings.json_format
        renderer: Any = (
            structlog.processors.JSONRenderer()
            if use_json
            else structlog.dev.ConsoleRenderer()
        )
        processors.append(renderer)  # type: ignore[arg-type]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
