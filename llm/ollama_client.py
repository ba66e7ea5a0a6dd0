from __future__ import annotations

import time

import httpx

from app_logging.activity_logger import ActivityLogger
from schemas.errors import InferenceFailure
from schemas.result import Failure, Result, Success
from schemas.verdict import RESPONSE_SCHEMA, Verdict

logger = ActivityLogger("ollama_client")


def extract_verdict(response: httpx.Response) -> Verdict:
    """
    Return the ``response`` field of a generate reply.

    Schema-constrained output is best-effort, so when the body is not a JSON
    object or the field is absent/null the whole raw body is returned instead.
    """
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and payload.get("response") is not None:
        return str(payload["response"])
    return response.text


class OllamaClient:
    """Non-streaming text generation against one model on an Ollama instance."""

    def __init__(self, http: httpx.Client, model: str) -> None:
        self._http = http
        self.model = model

    def generate(self, prompt: str) -> Result[Verdict]:
        body = {
            "model": self.model,
            "stream": False,
            "prompt": prompt,
            "format": RESPONSE_SCHEMA,
        }
        start = time.monotonic()
        try:
            response = self._http.post("/api/generate", json=body)
        except httpx.HTTPError as exc:
            logger.error("llm_generate_failed", exc=exc, model=self.model)
            return Failure(InferenceFailure(str(exc)))

        latency_ms = round((time.monotonic() - start) * 1000, 1)

        if response.is_error:
            logger.error(
                "llm_generate_failed",
                model=self.model,
                status_code=response.status_code,
                latency_ms=latency_ms,
            )
            return Failure(InferenceFailure(f"HTTP {response.status_code}: {response.text}"))

        verdict = extract_verdict(response)
        logger.info(
            "llm_generate_completed",
            model=self.model,
            latency_ms=latency_ms,
            prompt_chars=len(prompt),
        )
        return Success(verdict)
