"""
FastAPI dependencies — store lookup, list/filter parsing, JSON helpers.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query, Request
from fastapi.responses import JSONResponse

from app.data.store import EventStore
from app.data.schemas import EventFilter
from app.analytics.common import sanitize_for_json
from app.api.response_models import ErrorResponse, ErrorDetails


# ---------------------------------------------------------------------------
# Store handle (set on app.state during startup)
# ---------------------------------------------------------------------------

def get_store(request: Request) -> EventStore:
    store: EventStore | None = getattr(request.app.state, "store", None)
    if store is None or not store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return store


# ---------------------------------------------------------------------------
# Query-string parsing
# ---------------------------------------------------------------------------

def split_list(raw: str | None) -> list[str]:
    """Comma-separated query value -> trimmed, non-empty items."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_companies(
    companies: Optional[str] = Query(None, description="Comma-separated company names"),
    company: Optional[str] = Query(None, description="Single company name (legacy)"),
) -> list[str]:
    """Company list from `companies`, falling back to the single `company` param."""
    if companies:
        return split_list(companies)
    if company:
        return [company]
    return []


def parse_event_types(
    event_types: Optional[str] = Query(None, alias="eventTypes", description="Comma-separated event types"),
) -> list[str]:
    return split_list(event_types)


def parse_filters(
    start_date: Optional[str] = Query(None, alias="startDate", description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, alias="endDate", description="YYYY-MM-DD"),
    companies: Optional[str] = Query(None, description="Comma-separated company names"),
    company: Optional[str] = Query(None, description="Single company name (legacy)"),
) -> EventFilter:
    """Date range + companies as an EventFilter. Malformed dates are not rejected."""
    return EventFilter.build(start_date, end_date, parse_companies(companies, company))


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

def safe_json(data) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


def client_error(code: str, message: str, status_code: int = 400) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetails(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))
