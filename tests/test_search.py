from app.analytics.search import normalize_page, search_events, list_events
from app.data.schemas import EventFilter


def test_normalize_page():
    assert normalize_page(0, 0) == (1, 20)
    assert normalize_page(-3, -1) == (1, 20)
    assert normalize_page(2, 50) == (2, 50)
    assert normalize_page(1, 1000) == (1, 100)


def test_search_is_case_insensitive_over_company_name(store):
    result = search_events(store, "ACME")
    assert [e["id"] for e in result["data"]] == ["e1", "e2"]
    assert result["aggregations"]["totalEvents"] == 2
    assert result["aggregations"]["uniqueCompanies"] == 1


def test_search_matches_other_fields(store):
    assert [e["id"] for e in search_events(store, "web")["data"]] == ["e3"]
    assert [e["id"] for e in search_events(store, "work-orders")["data"]] == ["e9", "e4"]
    assert search_events(store, "no-such-thing")["data"] == []


def test_pagination(store):
    result = search_events(store, page=3, page_size=3)
    assert [e["id"] for e in result["data"]] == ["e8"]
    assert result["pagination"] == {"page": 3, "pageSize": 3, "total": 7, "totalPages": 3}
    # aggregations cover the whole filtered set, not the page
    assert result["aggregations"]["totalEvents"] == 7


def test_page_past_the_end_is_empty(store):
    result = search_events(store, page=9, page_size=20)
    assert result["data"] == []
    assert result["pagination"]["total"] == 7


def test_empty_result_has_zero_pages(store):
    result = search_events(store, "zzz")
    assert result["pagination"]["totalPages"] == 0
    assert result["aggregations"] == {"totalEvents": 0, "uniqueCompanies": 0, "eventTypes": []}


def test_results_are_enhanced(store):
    records = {e["id"]: e for e in search_events(store, page_size=100)["data"]}

    assert records["e1"]["companyName"] == "Acme"
    assert records["e1"]["user"] == "alice@x.com"
    assert records["e1"]["endpoint"] == "/api/login"
    assert records["e4"]["endpoint"] == "/work-orders/42"
    # read-time defaults differ from load-time ones
    assert records["e8"]["user"] == "Unknown User"
    assert records["e8"]["endpoint"] == "N/A"
    assert records["e8"]["companyName"] == "Unknown Company"


def test_record_serialization(store):
    records = {e["id"]: e for e in search_events(store, page_size=100)["data"]}
    assert records["e1"]["created_at"] == "2024-01-01T10:00:00Z"
    assert records["e1"]["value"] is None
    assert records["e3"]["value"] == 1.5
    assert records["e3"]["attribute"] == "web"


def test_enhancement_does_not_touch_the_store(store):
    search_events(store, page_size=100)
    assert store.df.set_index("id").loc["e8", "endpoint"] == "Unknown Endpoint"


def test_filters_narrow_results(store):
    everything = search_events(store, page_size=100)["pagination"]["total"]

    by_company = search_events(store, filters=EventFilter.build(companies=["Globex"]), page_size=100)
    assert [e["id"] for e in by_company["data"]] == ["e3", "e7"]

    by_date = search_events(store, filters=EventFilter.build("2024-01-01", "2024-01-03"), page_size=100)
    assert [e["id"] for e in by_date["data"]] == ["e1", "e2", "e3"]

    both = search_events(
        store, filters=EventFilter.build("2024-01-01", "2024-01-03", ["Globex"]), page_size=100,
    )
    assert [e["id"] for e in both["data"]] == ["e3"]
    assert both["pagination"]["total"] <= min(
        by_company["pagination"]["total"], by_date["pagination"]["total"], everything,
    )


def test_start_date_alone_is_ignored(store):
    result = search_events(store, filters=EventFilter.build("2024-01-09", None))
    assert result["pagination"]["total"] == 7


def test_event_type_counts_in_aggregations(store):
    types = search_events(store)["aggregations"]["eventTypes"]
    assert types == [
        {"type": "login", "count": 3},
        {"type": "export", "count": 2},
        {"type": "logout", "count": 1},
        {"type": "ping", "count": 1},
    ]


def test_list_events_is_unfiltered_and_raw(store):
    result = list_events(store, page=1, page_size=2)
    assert result["total"] == 7
    assert [e["id"] for e in result["data"]] == ["e1", "e2"]
    # load-time fields, not re-derived
    last = list_events(store, page=7, page_size=1)["data"][0]
    assert last["endpoint"] == "Unknown Endpoint"
