from statement_ingest.fields import DATE_ALIASES, find_field, resolve_field


def test_resolve_field_prefers_first_candidate_present():
    record = {"Trans Date": "01/02/24", "date": "2024-01-02", "Amount": "1.00"}
    # "date" precedes "Trans Date" in the alias order
    assert resolve_field(record, DATE_ALIASES) == "date"


def test_resolve_field_falls_back_to_first_key():
    record = {"Posted": "x", "Memo": "y"}
    assert resolve_field(record, ["date", "Date"]) == "Posted"


def test_resolve_field_empty_record_returns_empty_string():
    assert resolve_field({}, ["date"]) == ""


def test_resolve_field_is_stable_across_calls():
    record = {"Narrative": "COFFEE", "Value": "3.50"}
    candidates = ["description", "Narrative"]
    first = resolve_field(record, candidates)
    assert all(resolve_field(record, candidates) == first for _ in range(5))
    assert first == "Narrative"


def test_find_field_has_no_fallback():
    assert find_field({"A": "1"}, ["type", "Type"]) is None
    assert find_field({"Type": "debit"}, ["type", "Type"]) == "Type"
