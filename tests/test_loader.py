import logging

import pandas as pd
import pytest

from app.data.errors import HeaderReadError, SourceUnavailableError
from app.data.loader import read_source
from app.data.store import EventStore
from tests.conftest import SAMPLE_ROWS, event_row, write_csv


def test_load_report_counts(store):
    report = store.load_report
    assert report.rows_read == 9
    assert report.rows_loaded == 7
    assert report.rows_skipped == 2
    assert report.companies == 4
    assert report.event_types == 4
    assert store.total_events() == 7


def test_bad_rows_are_logged_and_skipped(sample_csv, caplog):
    with caplog.at_level(logging.WARNING, logger="usage_analytics.loader"):
        parsed = read_source(sample_csv)
    ids = [e.id for e in parsed.events]
    assert "e5" not in ids and "e6" not in ids
    assert parsed.rows_skipped == 2
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 2


def test_events_sorted_by_created_at(store):
    assert list(store.df["id"]) == ["e1", "e2", "e3", "e9", "e4", "e7", "e8"]
    assert store.df["created_at"].is_monotonic_increasing


def test_timestamps_are_utc(store):
    e7 = store.df.set_index("id").loc["e7"]
    assert e7["created_at"] == pd.Timestamp("2024-01-10 16:00:00.123456", tz="UTC")
    assert str(store.df["created_at"].dt.tz) == "UTC"


def test_values_and_derived_fields(store):
    rows = store.df.set_index("id")
    assert rows.loc["e3", "value"] == 1.5
    assert pd.isna(rows.loc["e1", "value"])
    assert pd.isna(rows.loc["e8", "value"])
    assert rows.loc["e1", "user"] == "alice@x.com"
    assert rows.loc["e1", "endpoint"] == "/api/login"
    assert rows.loc["e8", "user"] == "Unknown User"
    assert rows.loc["e8", "endpoint"] == "Unknown Endpoint"


def test_company_index(store):
    assert dict(store.company_index()) == {
        "c1": "Acme",
        "c2": "Globex",
        "c3": "Initech",
        "c4": "Unknown Company",
    }
    assert store.resolve_company("c1") == "Acme"
    assert store.resolve_company("missing") == "Unknown Company"
    assert store.all_company_names() == ["Acme", "Globex", "Initech", "Unknown Company"]


def test_company_index_is_read_only(store):
    with pytest.raises(TypeError):
        store.company_index()["c1"] = "Other"


def test_company_index_last_write_wins(tmp_path):
    # Later rows in file order win, even when they are earlier in time.
    path = write_csv(tmp_path / "dup.csv", [
        event_row("a", "2024-03-02 00:00:00", "c1", "login", "User - OldName x@y.z /a"),
        event_row("b", "2024-03-01 00:00:00", "c1", "login", "User - NewName x@y.z /a"),
    ])
    s = EventStore(path)
    s.load()
    assert s.resolve_company("c1") == "NewName"
    assert set(s.df["company_name"]) == {"NewName"}


def test_event_type_counts(store):
    assert dict(store.event_type_counts()) == {"login": 3, "logout": 1, "export": 2, "ping": 1}


def test_load_is_idempotent(store):
    first = store.df
    report = store.load()
    assert report == store.load_report
    assert store.df is first
    assert store.total_events() == 7


def test_missing_file_raises(tmp_path):
    with pytest.raises(SourceUnavailableError):
        EventStore(tmp_path / "nope.csv").load()


def test_empty_file_raises_header_error(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(HeaderReadError):
        EventStore(path).load()


def test_header_only_loads_empty_store(tmp_path):
    s = EventStore(write_csv(tmp_path / "header.csv", []))
    report = s.load()
    assert report.rows_loaded == 0
    assert s.total_events() == 0
    assert s.date_range() == "N/A"


def test_header_row_is_never_data(tmp_path):
    # A valid-looking first row is consumed as the header
    rows = SAMPLE_ROWS[:2]
    s = EventStore(write_csv(tmp_path / "noheader.csv", rows, header=None))
    s.load()
    assert s.total_events() == 1


def test_date_range(store):
    assert store.date_range() == "2024-01-01 to 2024-02-15"


def test_far_dated_row_is_skipped(tmp_path):
    path = write_csv(tmp_path / "far.csv", [
        event_row("ok", "2024-03-01 10:00:00", "c1", "login", "User - Acme x@y.z /a"),
        event_row("far", "2999-01-01 10:00:00", "c1", "login", "User - Acme x@y.z /a"),
    ])
    s = EventStore(path)
    report = s.load()
    assert report.rows_loaded == 1
    assert report.rows_skipped == 1
    assert list(s.df["id"]) == ["ok"]


def test_column_count_follows_source_layout():
    from app.config import EXPECTED_COLUMNS, SOURCE_COLUMNS

    assert EXPECTED_COLUMNS == len(SOURCE_COLUMNS) == len(SAMPLE_ROWS[0])
