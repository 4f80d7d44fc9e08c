"""
Event export — the filtered, enhanced event listing as CSV, JSON, or Excel.
"""
from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass
from enum import Enum

import pandas as pd

from app.config import UNKNOWN_COMPANY
from app.data.schemas import EventFilter
from app.data.store import EventStore
from app.analytics.common import sanitize_for_json
from app.analytics.search import enhance_events, event_record
from app.excel.writer import ExcelWriter


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
    XLSX = "xlsx"


_MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

# (record key, excel col type, header label)
EXPORT_COLUMNS = [
    ("id", "text", "ID"),
    ("created_at", "text", "Created At"),
    ("companyName", "text", "Company Name"),
    ("type", "text", "Type"),
    ("content", "text", "Content"),
    ("attribute", "text", "Attribute"),
    ("user", "text", "User"),
    ("endpoint", "text", "Endpoint"),
    ("updated_at", "text", "Updated At"),
    ("original_timestamp", "text", "Original Timestamp"),
    ("value", "decimal", "Value"),
]


@dataclass(frozen=True)
class ExportResult:
    content: bytes
    media_type: str
    filename: str


def export_records(store: EventStore, query: str = "", filters: EventFilter | None = None) -> list[dict]:
    """All matching events (no pagination), enhanced like a search page."""
    df = store.get_events(filters)
    if query:
        df = store.search(df, query)
    return [event_record(r) for r in enhance_events(store, df).to_dict("records")]


def _to_csv(records: list[dict]) -> bytes:
    frame = pd.DataFrame(records, columns=[key for key, _, _ in EXPORT_COLUMNS])
    frame.columns = [label for _, _, label in EXPORT_COLUMNS]
    return frame.to_csv(index=False).encode("utf-8")


def _to_json(records: list[dict], query: str, filters: EventFilter | None) -> bytes:
    described = filters.describe() if filters else {}
    if query:
        described["query"] = query
    payload = {
        "metadata": {
            "exportDate": dt.datetime.now(dt.timezone.utc).isoformat(),
            "totalRecords": len(records),
            "filters": described,
        },
        "data": records,
    }
    return json.dumps(sanitize_for_json(payload), indent=2).encode("utf-8")


def _to_xlsx(records: list[dict], filters: EventFilter | None) -> bytes:
    writer = ExcelWriter()
    ws = writer.add_sheet("Events")

    window = filters.date_range.label() if filters and filters.date_range else "All dates"
    row = writer.write_title(ws, "Usage Events Export", f"{window}  |  {len(records):,} events")
    row = writer.write_kpi_row(ws, row, [
        (len(records), "Events", "number"),
        (len({r["companyName"] for r in records}), "Companies", "number"),
        (len({r["type"] for r in records}), "Event Types", "number"),
    ])

    def _unknown(_idx, r):
        return "unknown" if r["companyName"] == UNKNOWN_COMPANY else None

    writer.write_table(ws, row, EXPORT_COLUMNS, records, highlight_fn=_unknown)
    return writer.to_bytes()


def export_events(
    store: EventStore,
    fmt: ExportFormat | str = ExportFormat.CSV,
    query: str = "",
    filters: EventFilter | None = None,
) -> ExportResult:
    """Render matching events in the requested format. Raises ValueError on unknown formats."""
    fmt = ExportFormat(fmt)
    records = export_records(store, query, filters)

    if fmt == ExportFormat.JSON:
        content = _to_json(records, query, filters)
    elif fmt == ExportFormat.XLSX:
        content = _to_xlsx(records, filters)
    else:
        content = _to_csv(records)

    stamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d_%H%M%S")
    return ExportResult(
        content=content,
        media_type=_MEDIA_TYPES[fmt],
        filename=f"usage_events_{stamp}.{fmt.value}",
    )
