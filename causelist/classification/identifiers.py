"""Record identifier strategies.

Ids have the shape ``p{page}_c{position}_{suffix}``. The random suffix is a
best-effort uniqueness guarantee for one run; the sequential factory trades it
for reproducible ids.
"""

import itertools
import secrets
from typing import Protocol


class RecordIdFactory(Protocol):
    def __call__(self, page_index: int, position: int) -> str: ...


class RandomRecordIdFactory:
    SUFFIX_LENGTH = 9

    def __call__(self, page_index: int, position: int) -> str:
        suffix = secrets.token_hex(self.SUFFIX_LENGTH)[: self.SUFFIX_LENGTH]
        return f"p{page_index}_c{position}_{suffix}"


class SequentialRecordIdFactory:
    """Deterministic ids: a process-local counter replaces the random suffix."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def __call__(self, page_index: int, position: int) -> str:
        return f"p{page_index}_c{position}_{next(self._counter)}"
