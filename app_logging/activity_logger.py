from __future__ import annotations

from typing import Any, Optional

import structlog


class ActivityLogger:
    """
    Structured activity logger on top of structlog.

    Output destination and level filtering come from configure_logging().
    Each record carries:
    {
        "timestamp": "2025-01-01T00:00:00+00:00",
        "level":     "info",
        "event":     "jira_issue_fetched",
        "component": "jira_client",
        "issue_key": "PROJ-123",  (optional)
        "message":   "...",
        ...extra_fields
    }
    """

    def __init__(self, component: str) -> None:
        self.component = component
        # Lazy proxy: resolves against whatever configuration is active at first use
        self._logger = structlog.get_logger()

    def _write(
        self,
        level: str,
        event: str,
        issue_key: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        if issue_key:
            kwargs["issue_key"] = issue_key
        getattr(self._logger, level)(
            event,
            component=self.component,
            message=message or event,
            **kwargs,
        )

    # ── Public interface ──────────────────────────────────────────────────────

    def info(self, event: str, **kwargs: Any) -> None:
        self._write("info", event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._write("warning", event, **kwargs)

    def error(
        self,
        event: str,
        exc: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        if exc:
            kwargs.setdefault("error_type", type(exc).__name__)
            kwargs.setdefault("error_message", str(exc))
        self._write("error", event, **kwargs)

    def debug(self, event: str, **kwargs: Any) -> None:
        self._write("debug", event, **kwargs)
