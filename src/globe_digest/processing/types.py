from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from globe_digest.core.errors import PipelineError
from globe_digest.models.feed import EnrichedArticle, PaginationState, QueryState, RawArticle


class PipelineStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class MergeStats:
    added: int = 0
    dropped: int = 0


@dataclass(frozen=True)
class CycleOutcome:
    status: PipelineStatus
    reset: bool
    generation: int
    added: int = 0
    dropped: int = 0
    stale: bool = False
    skipped: bool = False
    error: PipelineError | None = None


@dataclass(frozen=True)
class PipelineState:
    query: QueryState
    pagination: PaginationState
    status: PipelineStatus
    searching: bool
    generation: int
    article_count: int
    last_error: PipelineError | None = None


LogFunc = Callable[[str], None]

__all__ = [
    "CycleOutcome",
    "EnrichedArticle",
    "LogFunc",
    "MergeStats",
    "PaginationState",
    "PipelineState",
    "PipelineStatus",
    "QueryState",
    "RawArticle",
]
