from __future__ import annotations

import json
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict

BYTES_PER_MB = 1024 * 1024


class ProvisioningProgress(BaseModel):
    """One newline-delimited JSON record from Ollama's ``/api/pull`` stream."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: str = ""
    digest: str = ""
    completed: Optional[int] = None
    total: Optional[int] = None
    error: Optional[str] = None

    @property
    def is_transfer(self) -> bool:
        return self.completed is not None and self.total is not None

    @property
    def percent(self) -> float:
        if not self.total:
            return 0.0
        return (self.completed or 0) / self.total * 100

    @property
    def completed_mb(self) -> int:
        return (self.completed or 0) // BYTES_PER_MB

    @property
    def total_mb(self) -> int:
        return (self.total or 0) // BYTES_PER_MB


def iter_progress(lines: Iterable[str]) -> Iterator[ProvisioningProgress]:
    """Lazily decode progress records; raises ValueError on an undecodable line."""
    for line in lines:
        if not line.strip():
            continue
        yield ProvisioningProgress.model_validate(json.loads(line))
