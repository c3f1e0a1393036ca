"""Read-only views over extracted records: category tallies and filters."""

import datetime
from collections import Counter
from collections.abc import Iterable

from causelist.classification.models import CaseCategory, Record


def category_counts(records: Iterable[Record]) -> dict[CaseCategory, int]:
    """Count records per category, omitting empty categories.

    Keys follow CaseCategory declaration order.
    """
    counts = Counter(record.category for record in records)
    return {category: counts[category] for category in CaseCategory if counts[category]}


def filter_records(
    records: Iterable[Record],
    category: CaseCategory | None = None,
    on_date: datetime.date | None = None,
) -> list[Record]:
    """Keep records matching every given criterion, preserving order."""
    return [
        record
        for record in records
        if (category is None or record.category is category)
        and (on_date is None or record.date == on_date)
    ]


def hearing_dates(records: Iterable[Record]) -> list[datetime.date]:
    return sorted({record.date for record in records if record.date is not None})
