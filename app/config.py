"""
Usage Analytics — Configuration: paths, constants, parsing rules.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths — override with USAGE_DATA_PATH env var for deployment
# ---------------------------------------------------------------------------
_data_path = Path(os.environ.get("USAGE_DATA_PATH", "data/dataset.csv"))
if not _data_path.is_absolute():
    _data_path = Path.cwd() / _data_path
DATA_PATH = _data_path
EXPORTS_FOLDER = Path(os.environ.get("EXPORTS_FOLDER", str(DATA_PATH.parent / "exports")))

PORT = int(os.environ.get("PORT", "8080"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Source file layout
# ---------------------------------------------------------------------------
SOURCE_COLUMNS = [
    "id",
    "created_at",
    "company_id",
    "type",
    "content",
    "attribute",
    "updated_at",
    "original_timestamp",
    "value",
]
EXPECTED_COLUMNS = len(SOURCE_COLUMNS)
NULL_VALUES = {"null", ""}

# Tried in order, first match wins. Two-digit offsets ("+00", "-07") are
# widened to "+0000" before matching.
TIMESTAMP_FORMATS = [
    "%Y-%m-%d %H:%M:%S.%f%z",    # fraction + numeric offset
    "%Y-%m-%d %H:%M:%S.%fZ",     # fraction + Z
    "%Y-%m-%d %H:%M:%S.%f",      # fraction, no zone
    "%Y-%m-%d %H:%M:%S%z",       # numeric offset
    "%Y-%m-%d %H:%M:%SZ",        # Z
    "%Y-%m-%d %H:%M:%S",         # no zone
]
FILTER_DATE_FORMAT = "%Y-%m-%d"

# ---------------------------------------------------------------------------
# Sentinels
# ---------------------------------------------------------------------------
UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_USER = "Unknown User"
UNKNOWN_ENDPOINT = "Unknown Endpoint"   # load-time heuristic default
NO_ENDPOINT = "N/A"                     # read-time heuristic default

# ---------------------------------------------------------------------------
# Content heuristics
# ---------------------------------------------------------------------------
CONTENT_SEPARATOR = " - "

# Priority order matters — first marker found wins
USER_MARKERS = ["user_email:", "user_id:", "email:", "user:"]
ENDPOINT_MARKERS = ["/v1/", "/api/", "/work-orders", "/chat/", "/completions"]

# ---------------------------------------------------------------------------
# Query defaults
# ---------------------------------------------------------------------------
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_LIMIT = 10
TOP_COMPANIES_CAP = 5
SERIES_EVENT_TYPE = "Action"
