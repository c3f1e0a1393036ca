from causelist.classification.models import Record
from causelist.pipeline.models import PipelineResult


class ResultSerializer:
    """Converts a PipelineResult to a JSON-serializable structure."""

    def to_dict(self, result: PipelineResult) -> dict[str, object]:
        """Record keys follow the classifier wire format (camelCase)."""
        return {
            "sourceName": result.source_name,
            "completedAt": result.completed_at.isoformat(),
            "cases": [self._record_to_dict(r) for r in result.records],
        }

    def _record_to_dict(self, record: Record) -> dict[str, object]:
        return {
            "id": record.id,
            "pageIndex": record.page_index,
            "caseNumber": record.case_number,
            "title": record.title,
            "category": record.category.value,
            "summary": record.summary,
            "lawyers": list(record.lawyers),
            "date": record.date.isoformat() if record.date else None,
            "bench": record.bench,
        }
