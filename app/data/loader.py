"""
CSV reading, row parsing, and DataFrame construction for the event store.
"""
from __future__ import annotations

import csv
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from app.config import EXPECTED_COLUMNS, UNKNOWN_COMPANY
from app.data.errors import SourceUnavailableError, HeaderReadError, TimestampParseError
from app.data.normalize import (
    parse_timestamp,
    parse_value,
    extract_company_name,
    extract_user_and_endpoint,
)
from app.data.schemas import UsageEvent, EVENT_COLUMNS
from app.logger import get_logger

log = get_logger("loader")


@dataclass
class ParsedSource:
    """Everything read from one source file, in file order."""
    events: list[UsageEvent] = field(default_factory=list)
    companies: dict[str, str] = field(default_factory=dict)
    rows_read: int = 0
    rows_skipped: int = 0


# ---------------------------------------------------------------------------
# Row parsing
# ---------------------------------------------------------------------------

def parse_event(record: list[str]) -> UsageEvent:
    """Parse one 9-column record. Raises TimestampParseError."""
    created_at = parse_timestamp(record[1])
    updated_at = parse_timestamp(record[6])
    original_timestamp = parse_timestamp(record[7])

    user, endpoint = extract_user_and_endpoint(record[4])

    return UsageEvent(
        id=record[0],
        created_at=created_at,
        company_id=record[2],
        type=record[3],
        content=record[4],
        attribute=record[5],
        user=user,
        endpoint=endpoint,
        updated_at=updated_at,
        original_timestamp=original_timestamp,
        value=parse_value(record[8]),
    )


# ---------------------------------------------------------------------------
# File reading
# ---------------------------------------------------------------------------

def read_source(path: Path) -> ParsedSource:
    """Read every row of the source CSV.

    Bad rows (wrong column count, unparseable timestamp, malformed CSV) are
    logged and skipped. Only an unopenable file or unreadable header raises.
    """
    try:
        fh = open(path, newline="", encoding="utf-8", errors="replace")
    except OSError as exc:
        raise SourceUnavailableError(f"failed to open CSV file {path}: {exc}") from exc

    parsed = ParsedSource()
    with fh:
        reader = csv.reader(fh)
        try:
            next(reader)
        except (StopIteration, csv.Error) as exc:
            raise HeaderReadError(f"failed to read CSV header from {path}: {exc!r}") from exc

        while True:
            try:
                record = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                parsed.rows_read += 1
                parsed.rows_skipped += 1
                log.warning("failed to read CSV row at line %d: %s", reader.line_num, exc)
                continue

            parsed.rows_read += 1
            if len(record) != EXPECTED_COLUMNS:
                parsed.rows_skipped += 1
                log.warning(
                    "skipping row with %d columns (expected %d): %r",
                    len(record), EXPECTED_COLUMNS, record,
                )
                continue

            try:
                event = parse_event(record)
            except TimestampParseError as exc:
                parsed.rows_skipped += 1
                log.warning("failed to parse event %r: %s", record[0], exc)
                continue

            parsed.events.append(event)
            # Last write wins for duplicate ids
            parsed.companies[event.company_id] = extract_company_name(event.content)

    return parsed


# ---------------------------------------------------------------------------
# DataFrame construction
# ---------------------------------------------------------------------------

def events_to_frame(events: list[UsageEvent], companies: dict[str, str]) -> pd.DataFrame:
    """Build the canonical frame: resolved company names, sorted by created_at."""
    df = pd.DataFrame.from_records([e.as_row() for e in events], columns=EVENT_COLUMNS)

    for col in ("created_at", "updated_at", "original_timestamp"):
        df[col] = pd.to_datetime(df[col], utc=True)
    df["value"] = df["value"].astype("float64")
    for col in ("id", "company_id", "type", "content", "attribute", "user", "endpoint"):
        df[col] = df[col].astype(object)

    # Missing or empty index entries both resolve to the sentinel
    df["company_name"] = (
        df["company_id"].map(companies).fillna(UNKNOWN_COMPANY).replace("", UNKNOWN_COMPANY)
    )

    df = df.sort_values("created_at", kind="mergesort").reset_index(drop=True)
    return df
