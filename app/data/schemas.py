"""
Event model and filter schemas for queries over the event store.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import pandas as pd

from app.config import FILTER_DATE_FORMAT


# Stand-in for "no date" when a filter string fails to parse. Earliest
# midnight pandas can represent, so comparisons never overflow.
ZERO_DATE = pd.Timestamp("1677-09-22", tz="UTC")

EVENT_COLUMNS = [
    "id",
    "created_at",
    "company_id",
    "company_name",
    "type",
    "content",
    "attribute",
    "user",
    "endpoint",
    "updated_at",
    "original_timestamp",
    "value",
]


@dataclass(frozen=True)
class UsageEvent:
    """One recorded usage action, as parsed from a source row."""
    id: str
    created_at: dt.datetime
    company_id: str
    type: str
    content: str
    attribute: str
    user: str
    endpoint: str
    updated_at: dt.datetime
    original_timestamp: dt.datetime
    value: Optional[float] = None
    company_name: str = ""

    def as_row(self) -> tuple:
        """Values in EVENT_COLUMNS order."""
        return tuple(getattr(self, col) for col in EVENT_COLUMNS)


class Timeframe(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def coerce(cls, value: "str | Timeframe | None") -> "Timeframe":
        """Map a raw value to a Timeframe, defaulting to daily."""
        try:
            return cls(value)
        except ValueError:
            return cls.DAILY


def parse_date_or_default(value: str | None) -> pd.Timestamp:
    """Parse a YYYY-MM-DD filter date as UTC midnight.

    Malformed input is not an error: it yields ZERO_DATE. This is the only
    place filter dates are parsed, so a strict mode belongs here.
    """
    try:
        parsed = dt.datetime.strptime((value or "").strip(), FILTER_DATE_FORMAT)
    except ValueError:
        return ZERO_DATE
    return pd.Timestamp(parsed, tz="UTC")


@dataclass(frozen=True)
class DateRange:
    """Calendar-date window; end is widened to cover the whole end date."""
    start: pd.Timestamp
    end: pd.Timestamp

    @classmethod
    def parse(cls, start: str | None, end: str | None) -> "DateRange | None":
        """Build a range only when both bounds are given."""
        if not start or not end:
            return None
        return cls(
            start=parse_date_or_default(start),
            end=parse_date_or_default(end) + pd.Timedelta(days=1),
        )

    def label(self) -> str:
        last_day = self.end - pd.Timedelta(days=1)
        return f"{self.start:%Y-%m-%d} to {last_day:%Y-%m-%d}"


@dataclass
class EventFilter:
    """Optional criteria shared by every query."""
    date_range: Optional[DateRange] = None
    companies: list[str] = field(default_factory=list)
    event_types: list[str] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        start_date: str | None = None,
        end_date: str | None = None,
        companies: list[str] | None = None,
        event_types: list[str] | None = None,
    ) -> "EventFilter":
        return cls(
            date_range=DateRange.parse(start_date, end_date),
            companies=[c for c in (companies or []) if c],
            event_types=[t for t in (event_types or []) if t],
        )

    def describe(self) -> dict:
        """Plain description used in export metadata."""
        out: dict = {}
        if self.date_range is not None:
            out["dateRange"] = self.date_range.label()
        if self.companies:
            out["companies"] = list(self.companies)
        if self.event_types:
            out["eventTypes"] = list(self.event_types)
        return out


@dataclass(frozen=True)
class LoadReport:
    """Outcome of a load: skipped rows are logged, not raised."""
    rows_read: int = 0
    rows_loaded: int = 0
    rows_skipped: int = 0
    companies: int = 0
    event_types: int = 0
