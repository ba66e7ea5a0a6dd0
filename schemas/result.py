from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from schemas.errors import AnalyzerError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    error: AnalyzerError


# Tagged outcome of a recoverable pipeline step; callers match on the variant.
Result = Union[Success[T], Failure]
