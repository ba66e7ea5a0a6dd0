import logging
from pathlib import Path
from typing import Optional

import structlog

from config.settings import Settings

# The single activity-log handler on the root logger; replaced on reconfiguration.
_file_handler: Optional[logging.FileHandler] = None


def configure_logging(settings: Settings) -> None:
    """Configure structlog for structured JSON output to the activity log file.

    structlog renders through stdlib logging, so one file handler serves both
    structlog events and library logs (e.g. httpx). stdout stays reserved for
    the interactive session.
    """
    global _file_handler

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    log_path = Path(settings.activity_log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    if _file_handler is not None:
        root.removeHandler(_file_handler)
        _file_handler.close()
    _file_handler = logging.FileHandler(log_path, encoding="utf-8")
    _file_handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(_file_handler)
    root.setLevel(log_level)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.ExceptionRenderer(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.processors.JSONRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
