from __future__ import annotations

from typing import Any

# JSON schema passed as the ``format`` of every generate request.
# Ollama treats it as a best-effort constraint, so verdicts are not validated against it.
RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "contains_uac": {"type": "boolean"},
        "should_manually_review": {"type": "boolean"},
    },
}

Verdict = str
