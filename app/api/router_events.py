"""
Event explorer endpoints: search listing, filtered metrics, export.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.data.store import EventStore
from app.data.schemas import EventFilter
from app.api.dependencies import get_store, parse_filters, client_error
from app.api.response_models import EventsResponse, PaginationInfo, FilteredMetricsResponse
from app.analytics.search import search_events
from app.analytics.metrics import get_filtered_metrics
from app.analytics.export import ExportFormat, export_events

router = APIRouter(prefix="/api/v1/events", tags=["events"])


@router.get("", response_model=EventsResponse)
def list_events(
    query: str = Query("", description="Free-text search"),
    page: int = Query(1),
    page_size: int = Query(20, alias="pageSize"),
    store: EventStore = Depends(get_store),
    filters: EventFilter = Depends(parse_filters),
):
    """Unified search and filtering over events."""
    result = search_events(store, query, filters, page, page_size)
    p = result["pagination"]
    return EventsResponse(
        events=result["data"],
        pagination=PaginationInfo(
            currentPage=p["page"],
            totalPages=p["totalPages"],
            totalItems=p["total"],
            pageSize=p["pageSize"],
            hasNext=p["page"] < p["totalPages"],
            hasPrev=p["page"] > 1,
        ),
    )


@router.get("/metrics", response_model=FilteredMetricsResponse)
def filtered_metrics(
    store: EventStore = Depends(get_store),
    filters: EventFilter = Depends(parse_filters),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
):
    """Summary card metrics for the current explorer filters."""
    return FilteredMetricsResponse(**get_filtered_metrics(store, start_date, end_date, filters.companies))


@router.get("/export")
def export(
    format: str = Query("csv", description="csv|json|xlsx"),
    query: str = Query("", description="Free-text search"),
    store: EventStore = Depends(get_store),
    filters: EventFilter = Depends(parse_filters),
):
    """Download every matching event (no pagination)."""
    try:
        fmt = ExportFormat(format.lower())
    except ValueError:
        return client_error("INVALID_FORMAT", "format must be one of: csv, json, xlsx")

    result = export_events(store, fmt, query, filters)
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )
