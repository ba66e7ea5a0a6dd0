"""
UAC Analyzer — Entry Point

Usage:
    # Interactive session: pull the model, then analyse issue keys until 'exit'
    python main.py

    # Analyse a single ticket and exit
    python main.py --ticket PROJ-123

    # Skip the model pull (model already present on the Ollama instance)
    python main.py --skip-pull
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional


def run(ticket: Optional[str], skip_pull: bool) -> int:
    from config.settings import get_settings
    from schemas.errors import ConfigMissing, ProvisioningFailure

    try:
        settings = get_settings()
    except ConfigMissing as exc:
        print(str(exc))
        return 1

    from config.logging_config import configure_logging
    configure_logging(settings)

    from app_logging.activity_logger import ActivityLogger
    from cli.session_loop import SessionLoop
    from http_clients.client_factory import build_jira_http_client, build_ollama_http_client
    from llm.model_provisioner import ModelProvisioner
    from llm.ollama_client import OllamaClient
    from schemas.issue import parse_issue_key
    from schemas.result import Failure, Success
    from tracker.jira_client import JiraClient

    logger = ActivityLogger("main")
    logger.info("analyzer_started", model=settings.ollama_model, single_ticket=ticket)

    with build_jira_http_client(settings) as jira_http, build_ollama_http_client(settings) as ollama_http:
        if not skip_pull:
            try:
                ModelProvisioner(ollama_http).ensure_model_available(settings.ollama_model)
            except ProvisioningFailure as exc:
                print(str(exc))
                return 1

        session = SessionLoop(
            tracker=JiraClient(jira_http),
            inference=OllamaClient(ollama_http, settings.ollama_model),
        )

        if ticket is None:
            return session.run()

        # Per-issue failures are reported; only provisioning exits non-zero
        match parse_issue_key(ticket):
            case Failure(error=error):
                print(str(error))
            case Success(value=key):
                session.analyze(key)
        return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Check Jira tickets for user acceptance criteria with a local LLM"
    )
    parser.add_argument("--ticket", help="Analyse a single Jira issue key and exit")
    parser.add_argument(
        "--skip-pull",
        action="store_true",
        help="Do not pull the configured model before analysing",
    )

    args = parser.parse_args(argv)

    try:
        return run(args.ticket, args.skip_pull)
    except KeyboardInterrupt:
        print()
        return 0


if __name__ == "__main__":
    sys.exit(main())
