import pandas as pd

from app.analytics.trends import bucket_keys, get_time_series, get_multi_company_time_series
from app.data.store import EventStore
from tests.conftest import event_row, write_csv


def test_weekly_bucket_is_monday_of_same_week():
    wednesday = pd.Series(pd.to_datetime(["2024-01-03 12:00:00"], utc=True))
    monday = pd.Series(pd.to_datetime(["2024-01-01 00:00:00"], utc=True))
    sunday = pd.Series(pd.to_datetime(["2024-01-07 23:59:59"], utc=True))
    assert bucket_keys(wednesday, "weekly").tolist() == ["2024-01-01"]
    assert bucket_keys(monday, "weekly").tolist() == ["2024-01-01"]
    assert bucket_keys(sunday, "weekly").tolist() == ["2024-01-01"]


def test_daily_and_monthly_buckets():
    ts = pd.Series(pd.to_datetime(["2024-02-29 23:00:00"], utc=True))
    assert bucket_keys(ts, "daily").tolist() == ["2024-02-29"]
    assert bucket_keys(ts, "monthly").tolist() == ["2024-02"]


def test_daily_series(store):
    result = get_time_series(store, "daily", "2024-01-01", "2024-01-10")
    assert result["timeframe"] == "daily"
    assert result["data"] == [
        {"timestamp": "2024-01-01", "value": 1, "eventType": "Action"},
        {"timestamp": "2024-01-02", "value": 1, "eventType": "Action"},
        {"timestamp": "2024-01-03", "value": 1, "eventType": "Action"},
        {"timestamp": "2024-01-05", "value": 1, "eventType": "Action"},
        {"timestamp": "2024-01-10", "value": 2, "eventType": "Action"},
    ]
    assert result["totalPoints"] == 5


def test_daily_series_excludes_start_midnight(store):
    result = get_time_series(store, "daily", "2024-01-05", "2024-01-10")
    assert [p["timestamp"] for p in result["data"]] == ["2024-01-10"]
    assert result["totalPoints"] == 1


def test_weekly_series(store):
    result = get_time_series(store, "weekly", "2023-12-31", "2024-01-14")
    assert result["data"] == [
        {"timestamp": "2024-01-01", "value": 4, "eventType": "Action"},
        {"timestamp": "2024-01-08", "value": 2, "eventType": "Action"},
    ]


def test_monthly_series_with_filters(store):
    result = get_time_series(store, "monthly", "2023-12-31", "2024-02-29", companies=["Globex", "Unknown Company"])
    assert [(p["timestamp"], p["value"]) for p in result["data"]] == [("2024-01", 2), ("2024-02", 1)]

    logins = get_time_series(store, "monthly", "2023-12-31", "2024-02-29", event_types=["login"])
    assert [(p["timestamp"], p["value"]) for p in logins["data"]] == [("2024-01", 3)]


def test_multi_company_fills_every_known_company(store):
    result = get_multi_company_time_series(store, "daily", "2024-01-10", "2024-01-10")
    assert result["data"] == [
        {"timestamp": "2024-01-10", "Acme": 0, "Globex": 1, "Initech": 1, "Unknown Company": 0},
    ]
    assert result["totalPoints"] == 1


def test_multi_company_window_is_inclusive(store):
    # e9 at 2024-01-05 00:00:00 is kept by the inclusive lower bound
    result = get_multi_company_time_series(store, "daily", "2024-01-05", "2024-01-05")
    assert [p["timestamp"] for p in result["data"]] == ["2024-01-05"]
    assert result["data"][0]["Initech"] == 1


def test_multi_company_does_not_synthesize_buckets(store):
    result = get_multi_company_time_series(store, "daily", "2024-01-01", "2024-01-03", ["Acme"])
    assert [p["timestamp"] for p in result["data"]] == ["2024-01-01", "2024-01-02"]
    for point in result["data"]:
        assert point["Acme"] == 1
        assert point["Globex"] == 0


def test_multi_company_weekly_uses_monday_keys(store):
    result = get_multi_company_time_series(store, "weekly", "2024-01-01", "2024-01-31")
    assert [p["timestamp"] for p in result["data"]] == ["2024-01-01", "2024-01-08"]
    assert result["data"][0]["Acme"] == 2


def test_multi_company_empty_window(store):
    result = get_multi_company_time_series(store, "monthly", "2025-01-01", "2025-12-31")
    assert result == {"data": [], "timeframe": "monthly", "totalPoints": 0}


def test_multi_company_unknown_timeframe_buckets_daily(tmp_path):
    s = EventStore(write_csv(tmp_path / "one.csv", [
        event_row("a", "2024-05-01 10:00:00", "c1", "login", "User - Solo x@y.z /a"),
    ]))
    s.load()
    result = get_multi_company_time_series(s, "fortnightly", "2024-05-01", "2024-05-01")
    # unknown values bucket daily but are echoed back unchanged
    assert result["timeframe"] == "fortnightly"
    assert result["data"] == [{"timestamp": "2024-05-01", "Solo": 1}]


def test_buckets_use_utc_dates(tmp_path):
    # 20:00 at -07 is 03:00 the next day in UTC
    s = EventStore(write_csv(tmp_path / "offset.csv", [
        event_row("a", "2024-01-10 20:00:00-07", "c1", "login", "User - Solo x@y.z /a"),
    ]))
    s.load()
    result = get_time_series(s, "daily", "2024-01-09", "2024-01-12")
    assert [p["timestamp"] for p in result["data"]] == ["2024-01-11"]
