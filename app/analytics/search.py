"""
Event search — filtering, free-text search, pagination, enhancement, aggregations.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd

from app.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.data.normalize import extract_user_from_content, extract_endpoint_from_content
from app.data.schemas import EventFilter
from app.data.store import EventStore
from app.analytics.common import to_iso, type_counts


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_page(page: int | None, page_size: int | None) -> tuple[int, int]:
    """page >= 1; page_size defaults to 20 and is capped at 100."""
    page = page if page and page > 0 else 1
    if not page_size or page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    return page, min(page_size, MAX_PAGE_SIZE)


def _paginate(df: pd.DataFrame, page: int, page_size: int) -> pd.DataFrame:
    start = (page - 1) * page_size
    return df.iloc[start:start + page_size]


def event_record(row: dict) -> dict:
    """One event row as a plain dict with ISO timestamps and a nullable value."""
    value = row.get("value")
    return {
        "id": row["id"],
        "created_at": to_iso(row["created_at"]),
        "company_id": row["company_id"],
        "companyName": row["company_name"],
        "type": row["type"],
        "content": row["content"],
        "attribute": row["attribute"],
        "user": row["user"],
        "endpoint": row["endpoint"],
        "updated_at": to_iso(row["updated_at"]),
        "original_timestamp": to_iso(row["original_timestamp"]),
        "value": None if value is None or np.isnan(value) else float(value),
    }


def enhance_events(store: EventStore, df: pd.DataFrame) -> pd.DataFrame:
    """Copy of df with company name resolved and user/endpoint re-derived.

    Uses the read-time heuristics, overwriting the load-time user/endpoint.
    """
    enhanced = df.copy()
    enhanced["company_name"] = enhanced["company_id"].map(store.resolve_company)
    enhanced["user"] = enhanced["content"].map(extract_user_from_content)
    enhanced["endpoint"] = enhanced["content"].map(extract_endpoint_from_content)
    return enhanced


def calculate_aggregations(df: pd.DataFrame) -> dict:
    """Totals over a filtered, unpaginated event set."""
    return {
        "totalEvents": int(len(df)),
        "uniqueCompanies": int(df["company_id"].nunique()),
        "eventTypes": type_counts(df),
    }


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def search_events(
    store: EventStore,
    query: str = "",
    filters: EventFilter | None = None,
    page: int | None = 1,
    page_size: int | None = DEFAULT_PAGE_SIZE,
) -> dict:
    """Filter, search, paginate, then enhance the page.

    Aggregations cover the whole filtered set, not just the page.
    """
    filtered = store.get_events(filters)
    if query:
        filtered = store.search(filtered, query)

    page, page_size = normalize_page(page, page_size)
    total = len(filtered)
    page_df = enhance_events(store, _paginate(filtered, page, page_size))

    return {
        "data": [event_record(r) for r in page_df.to_dict("records")],
        "pagination": {
            "page": page,
            "pageSize": page_size,
            "total": total,
            "totalPages": math.ceil(total / page_size),
        },
        "aggregations": calculate_aggregations(filtered),
    }


def list_events(
    store: EventStore,
    page: int | None = 1,
    page_size: int | None = DEFAULT_PAGE_SIZE,
) -> dict:
    """Unfiltered page of the canonical sequence, as loaded."""
    page, page_size = normalize_page(page, page_size)
    page_df = _paginate(store.get_events(), page, page_size)
    return {
        "data": [event_record(r) for r in page_df.to_dict("records")],
        "total": store.total_events(),
    }
