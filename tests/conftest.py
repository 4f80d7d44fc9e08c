from __future__ import annotations

"""Pytest fixtures: a small usage-events CSV on disk and stores/apps built from it.

The sample mixes every supported timestamp layout, rows out of time order, a
row with the wrong column count, and a row with an unparseable timestamp.
"""

import csv
import sys
from pathlib import Path

import pytest
from starlette.testclient import TestClient

# Ensure project root on PYTHONPATH so `import app` works when pytest is run
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.data.store import EventStore  # noqa: E402
from app.main import create_app  # noqa: E402

HEADER = [
    "id", "created_at", "company_id", "type", "content",
    "attribute", "updated_at", "original_timestamp", "value",
]

# File order is deliberately not time order.
SAMPLE_ROWS = [
    ["e2", "2024-01-02 09:30:00", "c1", "logout", "User - Acme alice@x.com /api/logout", "",
     "2024-01-02 09:30:00", "2024-01-02 09:30:00", "null"],
    ["e1", "2024-01-01 10:00:00", "c1", "login", "User - Acme alice@x.com /api/login", "",
     "2024-01-01 10:00:00", "2024-01-01 10:00:00", "null"],
    ["e4", "2024-01-10 08:00:00Z", "c3", "export", "System - Initech carol@z.io /work-orders/42", "",
     "2024-01-10 08:00:00Z", "2024-01-10 08:00:00Z", "3"],
    ["e3", "2024-01-03 12:00:00.123456+00", "c2", "login", "User - Globex bob@y.org /v1/chat", "web",
     "2024-01-03 12:00:00+00", "2024-01-03 12:00:00Z", "1.5"],
    # 8 columns
    ["e5", "2024-01-04 10:00:00", "c1", "login", "User - Acme alice@x.com /api/login", "",
     "2024-01-04 10:00:00", "2024-01-04 10:00:00"],
    ["e6", "yesterday", "c1", "login", "User - Acme alice@x.com /api/login", "",
     "2024-01-04 10:00:00", "2024-01-04 10:00:00", "null"],
    ["e7", "2024-01-10 09:00:00.123456789-07", "c2", "login", "User - Globex bob@y.org /v1/chat", "",
     "2024-01-10 09:00:00-07", "2024-01-10 09:00:00-07", ""],
    ["e8", "2024-02-15 11:00:00", "c4", "ping", "heartbeat", "",
     "2024-02-15 11:00:00", "2024-02-15 11:00:00", "abc"],
    ["e9", "2024-01-05 00:00:00", "c3", "export", "System - Initech carol@z.io /work-orders/7", "",
     "2024-01-05 00:00:00", "2024-01-05 00:00:00", "2"],
]


def write_csv(path: Path, rows: list[list[str]], header: list[str] | None = HEADER) -> Path:
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        if header is not None:
            writer.writerow(header)
        writer.writerows(rows)
    return path


def event_row(event_id: str, created_at: str, company_id: str, event_type: str, content: str) -> list[str]:
    return [event_id, created_at, company_id, event_type, content, "", created_at, created_at, "null"]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def sample_csv(tmp_path) -> Path:
    return write_csv(tmp_path / "dataset.csv", SAMPLE_ROWS)


@pytest.fixture()
def store(sample_csv) -> EventStore:
    s = EventStore(sample_csv)
    s.load()
    return s


@pytest.fixture()
def api_client(sample_csv):
    with TestClient(create_app(sample_csv)) as client:
        yield client
