# logging.py

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler

import structlog
from structlog.contextvars import bound_contextvars, merge_contextvars

from Hookline.config import Settings

DEFAULT_LOG_PATH = "logs/hookline.jsonl"


def _json_formatter() -> structlog.stdlib.ProcessorFormatter:
    # Renders both structlog events and foreign stdlib records as JSON lines
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            merge_contextvars,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        foreign_pre_chain=[
            structlog.processors.add_log_level,
            merge_contextvars,
        ],
    )


def _enabled(level_name: str | None) -> bool:
    return (level_name or "").upper() != "NONE"


def _level(level_name: str, fallback: int) -> int:
    return getattr(logging, level_name.upper(), fallback)


def setup_logging(settings: Settings | None = None) -> None:
    """Initialize structlog + stdlib logging for the engine and the CLI.

    Per-handler levels come from the [logging] config; ``NONE`` turns a
    handler off. Without settings: INFO on the console, no file.
    """
    root_level = _level(settings.logging_level if settings else "INFO", logging.INFO)
    logging.captureWarnings(True)
    formatter = _json_formatter()

    handlers: list[logging.Handler] = []
    console = settings.logging_console if settings is not None else logging.getLevelName(root_level)
    if _enabled(console):
        ch = logging.StreamHandler()
        ch.setLevel(_level(console, root_level))
        ch.setFormatter(formatter)
        handlers.append(ch)

    file_level = settings.logging_file if settings is not None else "NONE"
    if _enabled(file_level):
        path = settings.logging_file_path or DEFAULT_LOG_PATH
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        fh = RotatingFileHandler(
            path,
            maxBytes=settings.logging_max_bytes,
            backupCount=settings.logging_backup_count,
        )
        fh.setLevel(_level(file_level, root_level))
        fh.setFormatter(formatter)
        handlers.append(fh)

    logging.basicConfig(level=root_level, handlers=handlers, force=True)

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@contextmanager
def bind_attack_context(attacker: str, defender: str, **extra: object) -> Iterator[None]:
    """Tag every event logged inside the block with the attack's participants.

    Keys with a ``None`` value are left out so unset details (e.g. a
    defender without a size profile) do not show up as nulls.
    """
    fields = {"attacker": attacker, "defender": defender}
    fields.update({k: v for k, v in extra.items() if v is not None})
    with bound_contextvars(**fields):
        yield
