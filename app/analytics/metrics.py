"""
Headline metrics — totals, active companies, event-type mix, unique users.
"""
from __future__ import annotations

from app.config import UNKNOWN_USER
from app.data.schemas import EventFilter
from app.data.store import EventStore
from app.analytics.common import type_counts


def get_metrics(
    store: EventStore,
    start_date: str | None = None,
    end_date: str | None = None,
    companies: list[str] | None = None,
    event_types: list[str] | None = None,
) -> dict:
    """Total events, distinct company ids, type counts, and the covered time range."""
    filtered = store.get_events(EventFilter.build(start_date, end_date, companies, event_types))

    time_range = {"start": "", "end": ""}
    if not filtered.empty:
        created = filtered["created_at"]
        time_range = {
            "start": f"{created.iloc[0]:%Y-%m-%dT%H:%M:%SZ}",
            "end": f"{created.iloc[-1]:%Y-%m-%dT%H:%M:%SZ}",
        }

    return {
        "totalEvents": int(len(filtered)),
        "activeCompanies": int(filtered["company_id"].nunique()),
        "topEventTypes": type_counts(filtered),
        "timeRange": time_range,
    }


def get_unique_users_count(
    store: EventStore,
    start_date: str | None = None,
    end_date: str | None = None,
    companies: list[str] | None = None,
) -> int:
    """Distinct users, ignoring the 'Unknown User' sentinel and blanks."""
    filtered = store.get_events(EventFilter.build(start_date, end_date, companies))
    users = filtered["user"]
    return int(users[(users != "") & (users != UNKNOWN_USER)].nunique())


def get_filtered_metrics(
    store: EventStore,
    start_date: str | None = None,
    end_date: str | None = None,
    companies: list[str] | None = None,
) -> dict:
    """Explorer summary card: metrics plus unique users and per-company average."""
    metrics = get_metrics(store, start_date, end_date, companies)

    top_type, top_count = "N/A", 0
    if metrics["topEventTypes"]:
        top_type = metrics["topEventTypes"][0]["type"]
        top_count = metrics["topEventTypes"][0]["count"]

    active = metrics["activeCompanies"]
    return {
        "totalEvents": metrics["totalEvents"],
        "uniqueCompanies": active,
        "uniqueUsers": get_unique_users_count(store, start_date, end_date, companies),
        "topEventType": top_type,
        "topEventCount": top_count,
        "avgEventsPerCompany": metrics["totalEvents"] // active if active > 0 else 0,
    }
