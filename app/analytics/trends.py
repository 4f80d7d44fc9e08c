"""
Trend analytics — daily / weekly / monthly event counts, single and per-company.
"""
from __future__ import annotations

import pandas as pd

from app.config import SERIES_EVENT_TYPE
from app.data.schemas import EventFilter, Timeframe, parse_date_or_default
from app.data.store import EventStore


def bucket_keys(created_at: pd.Series, timeframe: Timeframe | str) -> pd.Series:
    """Bucket label per timestamp.

    daily -> YYYY-MM-DD, weekly -> the Monday starting that week (YYYY-MM-DD),
    monthly -> YYYY-MM. Unknown timeframes fall back to daily.
    """
    timeframe = Timeframe.coerce(timeframe)
    if timeframe == Timeframe.MONTHLY:
        return created_at.dt.strftime("%Y-%m")
    if timeframe == Timeframe.WEEKLY:
        days_back = pd.to_timedelta(created_at.dt.weekday, unit="D")
        return (created_at.dt.normalize() - days_back).dt.strftime("%Y-%m-%d")
    return created_at.dt.strftime("%Y-%m-%d")


def _label(timeframe: Timeframe | str | None) -> str:
    """Timeframe as the caller gave it; unknown values still bucket daily."""
    if isinstance(timeframe, Timeframe):
        return timeframe.value
    return timeframe or Timeframe.DAILY.value


def _window(start_date: str | None, end_date: str | None) -> tuple[pd.Timestamp, pd.Timestamp]:
    start = parse_date_or_default(start_date)
    end = parse_date_or_default(end_date) + pd.Timedelta(days=1)
    return start, end


# ---------------------------------------------------------------------------
# Single series
# ---------------------------------------------------------------------------

def get_time_series(
    store: EventStore,
    timeframe: Timeframe | str,
    start_date: str | None,
    end_date: str | None,
    companies: list[str] | None = None,
    event_types: list[str] | None = None,
) -> dict:
    """Event counts per bucket inside start < created_at < end + 1 day."""
    label = _label(timeframe)
    df = store.get_events(EventFilter.build(companies=companies, event_types=event_types))

    start, end = _window(start_date, end_date)
    created = df["created_at"]
    df = df[(created > start) & (created < end)]

    counts = bucket_keys(df["created_at"], timeframe).value_counts().sort_index()
    data = [
        {"timestamp": str(key), "value": int(value), "eventType": SERIES_EVENT_TYPE}
        for key, value in counts.items()
    ]
    return {"data": data, "timeframe": label, "totalPoints": len(data)}


# ---------------------------------------------------------------------------
# Multi-company series
# ---------------------------------------------------------------------------

def get_multi_company_time_series(
    store: EventStore,
    timeframe: Timeframe | str,
    start_date: str | None,
    end_date: str | None,
    companies: list[str] | None = None,
    event_types: list[str] | None = None,
) -> dict:
    """One row per bucket with a count column for every known company.

    The window is inclusive on both ends. Buckets with no events are not
    synthesized; within an existing bucket absent companies count 0.
    """
    label = _label(timeframe)
    companies = [c for c in (companies or []) if c] or store.all_company_names()
    df = store.get_events(EventFilter.build(companies=companies, event_types=event_types))

    start, end = _window(start_date, end_date)
    created = df["created_at"]
    df = df[(created >= start) & (created <= end)]

    if df.empty:
        return {"data": [], "timeframe": label, "totalPoints": 0}

    keys = bucket_keys(df["created_at"], timeframe).rename("timestamp")
    table = df.groupby([keys, df["company_name"]]).size().unstack(fill_value=0)

    columns = sorted(set(table.columns) | set(store.all_company_names()))
    table = table.reindex(columns=columns, fill_value=0).sort_index()

    data = []
    for key, row in table.iterrows():
        point = {"timestamp": str(key)}
        point.update({str(name): int(count) for name, count in row.items()})
        data.append(point)

    return {"data": data, "timeframe": label, "totalPoints": len(data)}
