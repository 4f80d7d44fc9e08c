"""
Meta endpoints: health and index.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.data.store import EventStore
from app.api.dependencies import get_store
from app.api.response_models import HealthResponse

router = APIRouter(tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(store: EventStore = Depends(get_store)):
    report = store.load_report
    return HealthResponse(
        status="healthy",
        message="Usage analytics API is running",
        events=store.total_events(),
        companies=report.companies,
        event_types=report.event_types,
        rows_skipped=report.rows_skipped,
    )


@router.get("/")
def index():
    return {
        "name": "Usage Analytics API",
        "docs": "/docs",
        "health": "/health",
        "api": "/api/v1",
    }
