"""
EventStore — In-memory usage events backed by pandas.

Loaded once at startup, queried on every request. Nothing after load() writes
to the frame or the indexes: every accessor returns a filtered view or a new
object, so concurrent readers need no locking.
"""
from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import pandas as pd

from app.config import DATA_PATH, UNKNOWN_COMPANY
from app.data.loader import read_source, events_to_frame
from app.data.schemas import EVENT_COLUMNS, DateRange, EventFilter, LoadReport
from app.logger import get_logger

log = get_logger("store")


class EventStore:
    """Immutable-after-load snapshot of usage events plus derived indexes."""

    def __init__(self, data_path: Path | str = DATA_PATH) -> None:
        self.data_path = Path(data_path)
        self.df: pd.DataFrame = pd.DataFrame(columns=EVENT_COLUMNS)
        self._companies: Mapping[str, str] = MappingProxyType({})
        self._event_types: Mapping[str, int] = MappingProxyType({})
        self._report = LoadReport()
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> LoadReport:
        """Read the source file once. Later calls return the first report."""
        if self._loaded:
            return self._report

        log.info("loading usage events from %s", self.data_path)
        parsed = read_source(self.data_path)
        df = events_to_frame(parsed.events, parsed.companies)

        self.df = df
        self._companies = MappingProxyType(dict(parsed.companies))
        self._event_types = MappingProxyType(
            {str(k): int(v) for k, v in df["type"].value_counts(sort=False).items()}
        )
        self._report = LoadReport(
            rows_read=parsed.rows_read,
            rows_loaded=len(df),
            rows_skipped=parsed.rows_skipped,
            companies=len(self._companies),
            event_types=len(self._event_types),
        )
        self._loaded = True

        log.info(
            "loaded %d events, %d companies, %d event types (%d rows skipped)",
            self._report.rows_loaded, self._report.companies,
            self._report.event_types, self._report.rows_skipped,
        )
        return self._report

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def load_report(self) -> LoadReport:
        return self._report

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def total_events(self) -> int:
        return len(self.df)

    def company_index(self) -> Mapping[str, str]:
        """company_id -> company name, read-only."""
        return self._companies

    def event_type_counts(self) -> Mapping[str, int]:
        """type -> count over the whole store, read-only."""
        return self._event_types

    def resolve_company(self, company_id: str) -> str:
        return self._companies.get(company_id) or UNKNOWN_COMPANY

    def all_company_names(self) -> list[str]:
        """Distinct non-empty company names from the index, sorted."""
        return sorted({name for name in self._companies.values() if name})

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_date_range(df: pd.DataFrame, date_range: DateRange) -> pd.DataFrame:
        """Open interval on both ends: start < created_at < end."""
        created = df["created_at"]
        return df[(created > date_range.start) & (created < date_range.end)]

    @staticmethod
    def _apply_companies(df: pd.DataFrame, companies: list[str]) -> pd.DataFrame:
        return df[df["company_name"].isin(set(companies))]

    @staticmethod
    def _apply_event_types(df: pd.DataFrame, event_types: list[str]) -> pd.DataFrame:
        return df[df["type"].isin(set(event_types))]

    def get_events(self, filters: EventFilter | None = None) -> pd.DataFrame:
        """Events matching the filter, in canonical order.

        Filters apply in a fixed order: date range, companies, event types.
        Returns a filtered view; callers must not mutate it.
        """
        df = self.df
        if filters is None:
            return df
        if filters.date_range is not None:
            df = self._apply_date_range(df, filters.date_range)
        if filters.companies:
            df = self._apply_companies(df, filters.companies)
        if filters.event_types:
            df = self._apply_event_types(df, filters.event_types)
        return df

    def search(self, df: pd.DataFrame, query: str) -> pd.DataFrame:
        """Case-insensitive substring match across the searchable fields."""
        if not query:
            return df
        needle = query.lower()
        mask = pd.Series(False, index=df.index)
        for col in ("content", "attribute", "type", "company_name", "user", "endpoint"):
            mask |= df[col].astype(str).str.lower().str.contains(needle, regex=False)
        return df[mask]

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    def date_range(self) -> str:
        """Human-readable span of the loaded data."""
        if self.df.empty:
            return "N/A"
        created = self.df["created_at"]
        return f"{created.iloc[0]:%Y-%m-%d} to {created.iloc[-1]:%Y-%m-%d}"
