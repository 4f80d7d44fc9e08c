"""
Activity rankings — companies, event types, users, endpoints.

Every ranking groups one dimension, counts events plus distinct secondary
values, sorts by event count descending, and truncates to a limit.
"""
from __future__ import annotations

from app.config import DEFAULT_LIMIT, TOP_COMPANIES_CAP
from app.data.schemas import EventFilter
from app.data.store import EventStore
from app.analytics.common import Distinct, group_activity, apply_limit, pct_of_total, to_iso, type_counts


def _filtered(store: EventStore, start_date, end_date, companies):
    return store.get_events(EventFilter.build(start_date, end_date, companies))


# ---------------------------------------------------------------------------
# Whole-store rankings
# ---------------------------------------------------------------------------

def get_companies(store: EventStore) -> dict:
    """Every company id with its resolved name and event count."""
    grouped = group_activity(store.get_events(), "company_id")
    data = [
        {
            "id": r["company_id"],
            "name": store.resolve_company(r["company_id"]),
            "eventCount": int(r["count"]),
        }
        for r in grouped.to_dict("records")
    ]
    return {"data": data, "total": len(data)}


def get_top_active_companies(store: EventStore) -> dict:
    """Top 5 company ids by event count, with share of all events."""
    total = store.total_events()
    grouped = group_activity(store.get_events(), "company_id", last_activity=True)

    data = [
        {
            "company_id": r["company_id"],
            "name": store.resolve_company(r["company_id"]),
            "event_count": int(r["count"]),
            "percentage": pct_of_total(r["count"], total),
            "last_activity": to_iso(r["last_activity"]),
        }
        for r in grouped.head(TOP_COMPANIES_CAP).to_dict("records")
    ]
    return {"data": data, "total": len(data)}


def get_event_distribution(store: EventStore) -> dict:
    """Share of all events per type, from the global type index."""
    df = store.get_events()
    total = store.total_events()
    companies_per_type = df.groupby("type")["company_id"].nunique()

    data = [
        {
            "type": event_type,
            "count": count,
            "percentage": pct_of_total(count, total),
            "companies": int(companies_per_type.get(event_type, 0)),
        }
        for event_type, count in store.event_type_counts().items()
    ]
    data.sort(key=lambda x: (-x["count"], x["type"]))
    return {"data": data, "total": len(data)}


# ---------------------------------------------------------------------------
# Filtered rankings
# ---------------------------------------------------------------------------

def get_top_events_by_volume(
    store: EventStore,
    start_date: str | None = None,
    end_date: str | None = None,
    companies: list[str] | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[dict]:
    """[{type, count}] for the filtered set."""
    return apply_limit(type_counts(_filtered(store, start_date, end_date, companies)), limit)


def get_most_active_users(
    store: EventStore,
    start_date: str | None = None,
    end_date: str | None = None,
    companies: list[str] | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[dict]:
    """Users ranked by event count, with the companies they touched."""
    df = _filtered(store, start_date, end_date, companies)
    df = df[df["user"] != ""]

    grouped = group_activity(
        df, "user",
        distinct=(Distinct("companies", "company_id"),),
        last_activity=True,
    )
    names = df.groupby("user")["company_name"].agg(lambda s: sorted(set(s)))

    rows = [
        {
            "user": r["user"],
            "eventCount": int(r["count"]),
            "companies": int(r["companies"]),
            "companyNames": names.get(r["user"], []),
            "lastActivity": to_iso(r["last_activity"]),
        }
        for r in grouped.to_dict("records")
    ]
    return apply_limit(rows, limit)


def get_top_endpoints_by_usage(
    store: EventStore,
    start_date: str | None = None,
    end_date: str | None = None,
    companies: list[str] | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[dict]:
    """Endpoints ranked by event count; percentage is of the whole filtered set."""
    filtered = _filtered(store, start_date, end_date, companies)
    total = len(filtered)
    df = filtered[filtered["endpoint"] != ""]

    grouped = group_activity(
        df, "endpoint",
        distinct=(
            Distinct("userCount", "user", skip_empty=True),
            Distinct("companyCount", "company_id"),
        ),
    )
    rows = [
        {
            "endpoint": r["endpoint"],
            "eventCount": int(r["count"]),
            "userCount": int(r["userCount"]),
            "companyCount": int(r["companyCount"]),
            "percentage": pct_of_total(r["count"], total),
        }
        for r in grouped.to_dict("records")
    ]
    return apply_limit(rows, limit)


def get_top_active_companies_with_filtering(
    store: EventStore,
    start_date: str | None = None,
    end_date: str | None = None,
    companies: list[str] | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[dict]:
    """Companies (by resolved name) ranked by event count."""
    df = _filtered(store, start_date, end_date, companies)

    grouped = group_activity(
        df, "company_name",
        distinct=(
            Distinct("userCount", "user", skip_empty=True),
            Distinct("endpointCount", "endpoint", skip_empty=True),
        ),
        last_activity=True,
    )
    rows = [
        {
            "companyName": r["company_name"],
            "eventCount": int(r["count"]),
            "userCount": int(r["userCount"]),
            "endpointCount": int(r["endpointCount"]),
            "lastActivity": to_iso(r["last_activity"]),
        }
        for r in grouped.to_dict("records")
    ]
    return apply_limit(rows, limit)
