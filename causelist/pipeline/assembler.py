from collections.abc import Iterable
from datetime import datetime, timezone

from causelist.classification.models import Record
from causelist.pipeline.models import PipelineResult


def assemble_result(
    source_name: str,
    records: Iterable[Record],
    now: datetime | None = None,
) -> PipelineResult:
    """Wrap merged records with document metadata."""
    return PipelineResult(
        source_name=source_name,
        completed_at=now or datetime.now(timezone.utc),
        records=tuple(records),
    )
