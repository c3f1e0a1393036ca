"""Turns raw provider items into Records.

Classifier output is normalized, never rejected: each missing or malformed
field is replaced by a placeholder and unknown categories fall back to OTHER.
"""

import datetime
from typing import Any

from causelist.classification.identifiers import RecordIdFactory
from causelist.classification.models import CaseCategory, Record
from causelist.logging.logger import Log

UNKNOWN_CASE_NUMBER = "Unknown"
UNKNOWN_TITLE = "Unknown Parties"
NO_SUMMARY = "No summary available"

# Checked in order; the first matching substring wins.
_CATEGORY_KEYWORDS: tuple[tuple[CaseCategory, tuple[str, ...]], ...] = (
    (CaseCategory.CRIMINAL, ("crim",)),
    (CaseCategory.SERVICE, ("service",)),
    (CaseCategory.CIVIL, ("civil",)),
    (CaseCategory.FAMILY, ("family",)),
    (CaseCategory.ELECTION, ("election",)),
    (CaseCategory.TAX, ("tax", "custom")),
)


def map_category(raw: Any) -> CaseCategory:
    """Map a free-form category label onto the closed category set."""
    if not isinstance(raw, str):
        return CaseCategory.OTHER
    lower = raw.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return category
    return CaseCategory.OTHER


def build_records(
    items: list[Any],
    page_index: int,
    id_factory: RecordIdFactory,
) -> list[Record]:
    """Build Records for one page, keeping the provider's order."""
    records: list[Record] = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            Log.warning(
                f"Page {page_index}: skipping item {position}, expected an object, "
                f"got {type(item).__name__}"
            )
            continue
        records.append(_build_record(item, page_index, position, id_factory))
    return records


def _build_record(
    raw: dict[str, Any],
    page_index: int,
    position: int,
    id_factory: RecordIdFactory,
) -> Record:
    return Record(
        id=id_factory(page_index, position),
        page_index=page_index,
        case_number=_text_or(raw.get("caseNumber"), UNKNOWN_CASE_NUMBER),
        title=_text_or(raw.get("title"), UNKNOWN_TITLE),
        category=map_category(raw.get("category")),
        summary=_text_or(raw.get("summary"), NO_SUMMARY),
        lawyers=_build_lawyers(raw.get("lawyers")),
        date=_build_date(raw.get("date")),
        bench=_optional_text(raw.get("bench")),
    )


def _text_or(raw: Any, placeholder: str) -> str:
    return _optional_text(raw) or placeholder


def _optional_text(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    return raw.strip() or None


def _build_lawyers(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    names: dict[str, None] = {}
    for entry in raw:
        name = _optional_text(entry)
        if name is not None:
            names.setdefault(name, None)
    return tuple(names)


def _build_date(raw: Any) -> datetime.date | None:
    text = _optional_text(raw)
    if text is None:
        return None
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        Log.debug(f"Ignoring unparseable case date {text!r}")
        return None
