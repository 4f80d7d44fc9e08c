"""
Trend endpoints — single series and per-company series.
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.data.store import EventStore
from app.data.schemas import Timeframe
from app.api.dependencies import get_store, parse_companies, parse_event_types, safe_json, client_error
from app.analytics.trends import get_time_series, get_multi_company_time_series

router = APIRouter(prefix="/api/v1/trends", tags=["trends"])

_TIMEFRAMES = {t.value for t in Timeframe}


@router.get("")
def trends(
    timeframe: Optional[str] = Query(None, description="daily|weekly|monthly"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store: EventStore = Depends(get_store),
    companies: list[str] = Depends(parse_companies),
    event_types: list[str] = Depends(parse_event_types),
):
    """Event counts per day, week, or month."""
    if not timeframe or not start_date or not end_date:
        return client_error("MISSING_PARAMETERS", "timeframe, startDate, and endDate are required")
    if timeframe not in _TIMEFRAMES:
        return client_error("INVALID_TIMEFRAME", "timeframe must be one of: daily, weekly, monthly")

    return safe_json(get_time_series(store, timeframe, start_date, end_date, companies, event_types))


@router.get("/multi-company")
def multi_company_trends(
    timeframe: Optional[str] = Query(None, description="daily|weekly|monthly (default daily)"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store: EventStore = Depends(get_store),
    companies: list[str] = Depends(parse_companies),
    event_types: list[str] = Depends(parse_event_types),
):
    """One line per company; every known company appears in every bucket."""
    if not start_date or not end_date:
        return client_error("MISSING_PARAMETERS", "startDate and endDate are required")

    return safe_json(get_multi_company_time_series(
        store, timeframe or Timeframe.DAILY, start_date, end_date, companies, event_types,
    ))
