"""
Dashboard endpoints: headline metrics, company list, rankings.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.config import DEFAULT_LIMIT
from app.data.store import EventStore
from app.api.dependencies import get_store, parse_companies, parse_event_types, safe_json
from app.api.response_models import ListResponse
from app.analytics.metrics import get_metrics
from app.analytics.activity import (
    get_companies,
    get_top_active_companies,
    get_event_distribution,
    get_top_events_by_volume,
    get_most_active_users,
    get_top_endpoints_by_usage,
    get_top_active_companies_with_filtering,
)

router = APIRouter(prefix="/api/v1", tags=["analytics"])


@router.get("/metrics")
def metrics(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store: EventStore = Depends(get_store),
    companies: list[str] = Depends(parse_companies),
    event_types: list[str] = Depends(parse_event_types),
):
    return safe_json(get_metrics(store, start_date, end_date, companies, event_types))


@router.get("/companies", response_model=ListResponse)
def companies(store: EventStore = Depends(get_store)):
    return get_companies(store)


@router.get("/event-types", response_model=ListResponse)
def event_types(store: EventStore = Depends(get_store)):
    return get_event_distribution(store)


# ---------------------------------------------------------------------------
# Rankings (unfiltered)
# ---------------------------------------------------------------------------

@router.get("/analytics/companies")
def top_companies_overall(store: EventStore = Depends(get_store)):
    """Top companies by volume with share of all events."""
    return safe_json(get_top_active_companies(store))


@router.get("/analytics/event-distribution")
def event_distribution(store: EventStore = Depends(get_store)):
    return safe_json(get_event_distribution(store))


# ---------------------------------------------------------------------------
# Rankings (date range + companies, limit)
# ---------------------------------------------------------------------------

def _ranking(rows: list[dict]):
    return safe_json({"data": rows, "total": len(rows)})


@router.get("/analytics/top-events")
def top_events(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_LIMIT),
    store: EventStore = Depends(get_store),
    companies: list[str] = Depends(parse_companies),
):
    return _ranking(get_top_events_by_volume(store, start_date, end_date, companies, limit))


@router.get("/analytics/active-users")
def active_users(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_LIMIT),
    store: EventStore = Depends(get_store),
    companies: list[str] = Depends(parse_companies),
):
    return _ranking(get_most_active_users(store, start_date, end_date, companies, limit))


@router.get("/analytics/top-endpoints")
def top_endpoints(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_LIMIT),
    store: EventStore = Depends(get_store),
    companies: list[str] = Depends(parse_companies),
):
    return _ranking(get_top_endpoints_by_usage(store, start_date, end_date, companies, limit))


@router.get("/analytics/top-companies")
def top_companies(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    limit: int = Query(DEFAULT_LIMIT),
    store: EventStore = Depends(get_store),
    companies: list[str] = Depends(parse_companies),
):
    """Company leaderboard with distinct users/endpoints and last activity."""
    return _ranking(get_top_active_companies_with_filtering(store, start_date, end_date, companies, limit))
