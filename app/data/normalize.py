"""
Field parsing and content heuristics: timestamps, values, company/user/endpoint.

Two independent extraction heuristics live here. The load-time pair
(extract_company_name, extract_user_and_endpoint) reads the
"<prefix> - <Company> <email> <path>" layout. The read-time pair
(extract_user_from_content, extract_endpoint_from_content) scans for labeled
markers and is applied when a page of search results is enhanced. They
default to different sentinels and must stay separate.
"""
from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from app.config import (
    TIMESTAMP_FORMATS, NULL_VALUES, CONTENT_SEPARATOR,
    USER_MARKERS, ENDPOINT_MARKERS,
    UNKNOWN_COMPANY, UNKNOWN_USER, UNKNOWN_ENDPOINT, NO_ENDPOINT,
)
from app.data.errors import TimestampParseError


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

_SHORT_OFFSET_RE = re.compile(r"([+-]\d{2})$")
_LONG_FRACTION_RE = re.compile(r"(\.\d{6})\d+")

# Range a nanosecond pandas timestamp can hold
_EARLIEST = dt.datetime(1677, 9, 22, tzinfo=dt.timezone.utc)
_LATEST = dt.datetime(2262, 4, 11, tzinfo=dt.timezone.utc)


def _widen(raw: str) -> str:
    """'+00' -> '+0000' and nanosecond fractions -> microseconds."""
    text = _LONG_FRACTION_RE.sub(r"\1", raw.strip())
    return _SHORT_OFFSET_RE.sub(r"\g<1>00", text)


def parse_timestamp(raw: str) -> dt.datetime:
    """Parse a source timestamp into an aware UTC datetime.

    Formats are tried in TIMESTAMP_FORMATS order; values without a zone are
    taken as UTC. Instants outside the range the event frame can store are
    rejected like unparseable text.
    """
    text = _widen(raw)
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = dt.datetime.strptime(text, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=dt.timezone.utc)
        else:
            try:
                parsed = parsed.astimezone(dt.timezone.utc)
            except OverflowError:
                break
        if not _EARLIEST <= parsed < _LATEST:
            break
        return parsed
    raise TimestampParseError(raw)


# ---------------------------------------------------------------------------
# Value
# ---------------------------------------------------------------------------

_NUMBER_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def parse_value(raw: str) -> Optional[float]:
    """Nullable numeric value; anything unparseable is absent.

    Plain decimal or exponent notation only: no padding, no digit separators.
    """
    if raw in NULL_VALUES or not _NUMBER_RE.fullmatch(raw):
        return None
    return float(raw)


# ---------------------------------------------------------------------------
# Load-time heuristics
# ---------------------------------------------------------------------------

def _company_part(content: str) -> str | None:
    parts = content.split(CONTENT_SEPARATOR)
    if len(parts) >= 2:
        return parts[1]
    return None


def extract_company_name(content: str) -> str:
    """Company name: first word after the ' - ' separator."""
    company_part = _company_part(content)
    if company_part is None:
        return UNKNOWN_COMPANY
    name, _, _ = company_part.partition(" ")
    return name


def extract_user_and_endpoint(content: str) -> tuple[str, str]:
    """User (first token with '@') and endpoint (last token) after ' - '."""
    company_part = _company_part(content)
    if company_part is None:
        return UNKNOWN_USER, UNKNOWN_ENDPOINT

    user = next((tok for tok in company_part.split() if "@" in tok), UNKNOWN_USER)

    endpoint = UNKNOWN_ENDPOINT
    idx = company_part.rfind(" ")
    if idx != -1:
        endpoint = company_part[idx + 1:]
    return user, endpoint


# ---------------------------------------------------------------------------
# Read-time heuristics
# ---------------------------------------------------------------------------

def extract_user_from_content(content: str) -> str:
    """User from a labeled marker ('user_email:' etc.), else an email-like token."""
    lowered = content.lower()
    for marker in USER_MARKERS:
        idx = lowered.find(marker)
        if idx == -1:
            continue
        start = idx + len(marker)
        end = content.find(" ", start)
        if end == -1:
            end = len(content)
        user = content[start:end].strip()
        if user:
            return user

    for word in content.split():
        if "@" in word and "." in word:
            return word
    return UNKNOWN_USER


_WHITESPACE_RE = re.compile(r"[ \n\t]")


def extract_endpoint_from_content(content: str) -> str:
    """Endpoint from a known path marker, else the first '/'-prefixed token."""
    lowered = content.lower()
    for marker in ENDPOINT_MARKERS:
        idx = lowered.find(marker)
        if idx == -1:
            continue
        endpoint = content[idx:]
        m = _WHITESPACE_RE.search(endpoint)
        if m:
            endpoint = endpoint[:m.start()]
        endpoint = endpoint.strip()
        if endpoint:
            return endpoint

    for word in content.split():
        if word.startswith("/") and len(word) > 1:
            return word
    return NO_ENDPOINT
