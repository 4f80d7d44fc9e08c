"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    message: str
    events: int
    companies: int
    event_types: int
    rows_skipped: int


class ErrorDetails(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    error: ErrorDetails


class PaginationInfo(BaseModel):
    currentPage: int
    totalPages: int
    totalItems: int
    pageSize: int
    hasNext: bool
    hasPrev: bool


class EventsResponse(BaseModel):
    events: list[dict[str, Any]]
    pagination: PaginationInfo


class FilteredMetricsResponse(BaseModel):
    totalEvents: int
    uniqueCompanies: int
    uniqueUsers: int
    topEventType: str
    topEventCount: int
    avgEventsPerCompany: int


class ListResponse(BaseModel):
    """Generic {data, total} wrapper for ranking endpoints."""
    data: list[dict[str, Any]]
    total: int
