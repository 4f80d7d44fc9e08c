"""Event loading, normalization, and in-memory query store."""
from .loader import read_source, events_to_frame, parse_event
from .store import EventStore
from .schemas import UsageEvent, EventFilter, DateRange, Timeframe, LoadReport, parse_date_or_default
from .errors import DataLoadError, SourceUnavailableError, HeaderReadError, TimestampParseError
from .normalize import (
    parse_timestamp,
    parse_value,
    extract_company_name,
    extract_user_and_endpoint,
    extract_user_from_content,
    extract_endpoint_from_content,
)
