from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    AWAITING_KEY = "awaiting_key"
    VALIDATING = "validating"
    FETCHING = "fetching"
    PROMPTING = "prompting"
    QUERYING = "querying"
    REPORTING = "reporting"
    EXIT = "exit"
