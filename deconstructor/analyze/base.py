"""Analyzer protocol: the boundary to the external generation service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from ..models import Definition


class AnalysisStatus(str, Enum):
    """Outcome class of an analysis request."""

    SUCCESS = "success"
    DEGRADED = "degraded"  # usable result, generator reported problems
    FAILURE = "failure"


@dataclass(frozen=True)
class AnalysisResult:
    status: AnalysisStatus
    definition: Definition | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.status != AnalysisStatus.FAILURE and self.definition is None:
            raise ValueError(f"{self.status.value} result requires a definition")

    @property
    def ok(self) -> bool:
        return self.status != AnalysisStatus.FAILURE

    @classmethod
    def success(cls, definition: Definition) -> AnalysisResult:
        return cls(status=AnalysisStatus.SUCCESS, definition=definition)

    @classmethod
    def degraded(cls, definition: Definition) -> AnalysisResult:
        return cls(status=AnalysisStatus.DEGRADED, definition=definition)

    @classmethod
    def failure(cls, error: str) -> AnalysisResult:
        return cls(status=AnalysisStatus.FAILURE, error=error)


@runtime_checkable
class Analyzer(Protocol):
    """Produces a definition for a word.

    Implementations report problems through the result status and never
    raise for service-side failures.
    """

    def analyze(self, word: str, *, force_update: bool = False) -> AnalysisResult:
        ...
