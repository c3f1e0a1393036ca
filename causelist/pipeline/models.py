from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from causelist.classification.models import Record


@dataclass(frozen=True)
class Document:
    """Raw document handed to the pipeline for one run."""

    name: str
    content: bytes = field(repr=False)


@dataclass(frozen=True)
class PageText:
    """Text of one physical page; index is 1-based."""

    index: int
    text: str


class Stage(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (Stage.COMPLETE, Stage.ERROR)


@dataclass(frozen=True)
class ProgressState:
    """Snapshot delivered to progress observers."""

    stage: Stage = Stage.IDLE
    current: int = 0
    total: int = 0
    message: str | None = None


@dataclass(frozen=True)
class PipelineResult:
    """Output of a successful run. The pipeline keeps no reference to it."""

    source_name: str
    completed_at: datetime
    records: tuple[Record, ...] = ()
