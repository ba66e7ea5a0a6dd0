from __future__ import annotations

import sys
from typing import Iterable, Optional, TextIO

import httpx

from app_logging.activity_logger import ActivityLogger
from schemas.errors import ProvisioningFailure
from schemas.provisioning import ProvisioningProgress, iter_progress

logger = ActivityLogger("model_provisioner")


def format_progress_line(progress: ProvisioningProgress) -> str:
    return (
        f"\r{progress.status} ({progress.percent:.2f}%) "
        f"[{progress.completed_mb} MB/{progress.total_mb} MB]"
    )


class ModelProvisioner:
    """
    Makes sure a model is present on the Ollama instance before inference.

    Pull progress is streamed as newline-delimited JSON and rendered to ``out``,
    one carriage-return-refreshed line per blob digest.
    """

    def __init__(self, http: httpx.Client, out: Optional[TextIO] = None) -> None:
        self._http = http
        self._out = out if out is not None else sys.stdout
        self._provisioned: set[str] = set()

    def ensure_model_available(self, model: str) -> None:
        if model in self._provisioned:
            return

        logger.info("model_pull_started", model=model)
        self._out.write(f"Pulling the selected model: {model}")
        self._out.flush()

        try:
            with self._http.stream(
                "POST", "/api/pull", json={"model": model, "stream": True}
            ) as response:
                if response.is_error:
                    response.read()
                    raise ProvisioningFailure(
                        model, f"HTTP {response.status_code}: {response.text}"
                    )
                self._render(model, iter_progress(response.iter_lines()))
        except ProvisioningFailure as exc:
            logger.error("model_pull_failed", exc=exc, model=model)
            raise
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("model_pull_failed", exc=exc, model=model)
            raise ProvisioningFailure(model, str(exc)) from exc

        self._out.write("\n\n")
        self._out.flush()
        self._provisioned.add(model)
        logger.info("model_pull_completed", model=model)

    def _render(self, model: str, records: Iterable[ProvisioningProgress]) -> None:
        current_digest = ""
        for progress in records:
            if progress.error:
                raise ProvisioningFailure(model, progress.error)
            if not progress.is_transfer:
                logger.debug("model_pull_status", model=model, status=progress.status)
                continue
            # New blob: keep the previous blob's final progress on its own line
            if progress.digest != current_digest:
                current_digest = progress.digest
                self._out.write("\n")
            self._out.write(format_progress_line(progress))
            self._out.flush()
