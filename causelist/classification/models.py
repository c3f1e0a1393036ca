import datetime
from dataclasses import dataclass
from enum import Enum


class CaseCategory(str, Enum):
    """Closed set of case categories. OTHER is the catch-all."""

    CRIMINAL = "Criminal"
    SERVICE = "Service"
    CIVIL = "Civil"
    FAMILY = "Family"
    ELECTION = "Election"
    TAX = "Tax"
    OTHER = "Other"


@dataclass(frozen=True)
class Record:
    """A single case extracted from one page of a cause list."""

    id: str
    page_index: int
    case_number: str
    title: str
    category: CaseCategory
    summary: str
    lawyers: tuple[str, ...] = ()
    date: datetime.date | None = None
    bench: str | None = None
