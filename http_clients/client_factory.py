from __future__ import annotations

from typing import Optional

import httpx

from app_logging.activity_logger import ActivityLogger
from config.settings import Settings

logger = ActivityLogger("http_client_factory")


def build_jira_http_client(
    settings: Settings,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    HTTP client for the Jira REST API.

    The only client that carries credentials: basic auth is sent preemptively
    on every request, and only ever to ``jira_host``.
    """
    logger.info("jira_http_client_initializing", base_url=settings.jira_host)
    return httpx.Client(
        base_url=settings.jira_host,
        auth=httpx.BasicAuth(settings.jira_user, settings.jira_password),
        headers={"Accept": "application/json"},
        timeout=settings.jira_timeout_seconds,
        transport=transport,
    )


def build_ollama_http_client(
    settings: Settings,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    HTTP client for the Ollama API. Built independently of the Jira client and
    never given an auth handler, so tracker credentials cannot leak into
    pull/generate requests.

    Usage:
        with build_ollama_http_client(settings) as client:
            client.post("/api/generate", json=body)
    """
    logger.info("ollama_http_client_initializing", base_url=settings.ollama_host)
    return httpx.Client(
        base_url=settings.ollama_host,
        headers={"Content-Type": "application/json"},
        timeout=settings.ollama_timeout_seconds,
        transport=transport,
    )
