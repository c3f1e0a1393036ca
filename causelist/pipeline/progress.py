"""Progress accounting for pipeline runs.

`reduce_progress` is a pure state transition; `ProgressTracker` keeps the
latest state and fans snapshots out to observers. The pipeline is the only
writer.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace

from causelist.logging.logger import Log
from causelist.pipeline.models import ProgressState, Stage


@dataclass(frozen=True)
class RunStarted:
    pass


@dataclass(frozen=True)
class ExtractionProgress:
    current: int
    total: int


@dataclass(frozen=True)
class AnalysisStarted:
    total_pages: int


@dataclass(frozen=True)
class ChunkCompleted:
    pages_processed: int


@dataclass(frozen=True)
class RunFinished:
    pass


@dataclass(frozen=True)
class RunFailed:
    message: str


ProgressEvent = (
    RunStarted | ExtractionProgress | AnalysisStarted | ChunkCompleted | RunFinished | RunFailed
)
ProgressObserver = Callable[[ProgressState], None]


def reduce_progress(state: ProgressState, event: ProgressEvent) -> ProgressState:
    """Return the state that results from applying event to state.

    Terminal states (complete, error) only leave on RunStarted.
    """
    if isinstance(event, RunStarted):
        return ProgressState(stage=Stage.EXTRACTING)
    if state.stage.is_terminal:
        return state
    if isinstance(event, ExtractionProgress):
        total = max(event.total, 0)
        return ProgressState(
            stage=Stage.EXTRACTING,
            current=min(max(event.current, 0), total),
            total=total,
        )
    if isinstance(event, AnalysisStarted):
        return ProgressState(stage=Stage.ANALYZING, current=0, total=max(event.total_pages, 0))
    if isinstance(event, ChunkCompleted):
        current = min(max(event.pages_processed, state.current), state.total)
        return replace(state, stage=Stage.ANALYZING, current=current)
    if isinstance(event, RunFinished):
        return replace(state, stage=Stage.COMPLETE, current=state.total, message=None)
    if isinstance(event, RunFailed):
        return replace(state, stage=Stage.ERROR, message=event.message)
    raise TypeError(f"Unknown progress event: {event!r}")


class ProgressTracker:
    """Holds the current ProgressState and notifies observers of each change."""

    def __init__(self) -> None:
        self._state = ProgressState()
        self._observers: list[ProgressObserver] = []

    @property
    def state(self) -> ProgressState:
        return self._state

    def subscribe(self, observer: ProgressObserver) -> Callable[[], None]:
        """Register observer; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def apply(self, event: ProgressEvent) -> ProgressState:
        self._state = reduce_progress(self._state, event)
        for observer in list(self._observers):
            try:
                observer(self._state)
            except Exception:
                Log.exception(f"Progress observer {observer!r} failed")
        return self._state
