import pytest
from src.ask_your_data.core.query_executor import execute, take_tail, count_by

# --- Tests for limits ---

def test_top_rows(sample_rows):
    res = execute(sample_rows, "show the top 3 rows")
    assert res.error is None
    assert res.result_rows == sample_rows[:3]
    assert res.query_synthesized.endswith("LIMIT 3")

def test_last_rows(sample_rows):
    res = execute(sample_rows, "show the last 5 rows")
    assert res.result_rows == sample_rows[-5:]
    assert res.query_synthesized == "SELECT * FROM data"

def test_tail_applies_to_head_output(sample_rows):
    res = execute(sample_rows, "first 10 rows, then the last 2")
    assert res.result_rows == sample_rows[8:10]

def test_take_tail_zero_returns_nothing(sample_rows):
    assert take_tail(sample_rows, 0) == []

# --- Tests for filter and grouping ---

def test_filter_is_self_referential():
    rows = [
        {"status": "status: open"},
        {"status": "closed"},
        {"status": "STATUS pending"},
    ]
    res = execute(rows, "filter where status")
    assert res.result_rows == [{"status": "status: open"}, {"status": "STATUS pending"}]

def test_count_by_category(sample_rows):
    res = execute(sample_rows, "count by category")
    counts = {r["category"]: r["count"] for r in res.result_rows}
    assert counts == {"Electronics": 8, "Accessories": 8, "Audio": 4}
    assert sum(counts.values()) == len(sample_rows)
    assert [r["category"] for r in res.result_rows] == ["Electronics", "Accessories", "Audio"]
    assert res.query_synthesized == "SELECT *, COUNT(*) as count FROM data"

def test_count_after_limit(sample_rows):
    res = execute(sample_rows, "top 4 count by region")
    assert sum(r["count"] for r in res.result_rows) == 4
    assert res.query_synthesized == "SELECT *, COUNT(*) as count FROM data LIMIT 4"

def test_count_by_renders_keys_as_text():
    rows = [{"n": 1}, {"n": 1.0}, {"n": None}]
    assert count_by(rows, "n") == [{"n": "1", "count": 2}, {"n": "null", "count": 1}]

# --- Tests for aggregates ---

def test_average_price(five_rows):
    res = execute(five_rows, "average price")
    assert res.result_rows == [{"average_price": "309.60"}]
    assert res.query_synthesized == "SELECT AVG(price) as average_price FROM data"

def test_sum_uses_first_numeric_column(sample_rows):
    res = execute(sample_rows, "sum of sales")
    total_price = sum(r["price"] for r in sample_rows)
    assert res.result_rows == [{"total_price": total_price}]
    assert res.query_synthesized == "SELECT SUM(price) as total_price FROM data"

def test_sum_of_sales_when_sales_is_first_numeric():
    rows = [{"region": "North", "sales": "10"}, {"region": "South", "sales": "2.5"}]
    res = execute(rows, "sum of sales")
    assert res.result_rows == [{"total_sales": 12.5}]

def test_aggregates_ignore_earlier_steps(five_rows):
    res = execute(five_rows, "top 2 average price")
    assert res.result_rows == [{"average_price": "309.60"}]
    assert res.query_synthesized.endswith("LIMIT 2")

def test_sum_wins_over_average(five_rows):
    res = execute(five_rows, "average and sum of price")
    assert res.result_rows == [{"total_price": 1548}]

def test_non_numeric_cells_count_as_zero():
    rows = [{"v": v} for v in ["10", "20", "30", "40", "50", "n/a"]]
    res = execute(rows, "total v")
    assert res.error is None
    assert res.result_rows == [{"total_v": 150}]
    assert execute(rows, "average v").result_rows == [{"average_v": "25.00"}]

def test_aggregate_skipped_without_numeric_column():
    rows = [{"name": "a"}, {"name": "b"}]
    res = execute(rows, "average")
    assert res.result_rows == rows
    assert res.query_synthesized == "SELECT * FROM data"

# --- Tests for fallbacks and errors ---

def test_no_match_returns_everything(sample_rows):
    res = execute(sample_rows, "hello")
    assert res.result_rows == sample_rows
    assert res.query_synthesized == "SELECT * FROM data"
    assert res.error is None

def test_empty_dataset_does_not_raise():
    res = execute([], "anything at all")
    assert res.result_rows == []

def test_malformed_rows_become_error_result():
    res = execute([{"a": 1}, "not a row"], "top 1")
    assert res.result_rows == []
    assert res.query_synthesized == ""
    assert "Row 1" in res.error

def test_non_string_question_becomes_error_result(sample_rows):
    res = execute(sample_rows, None)
    assert res.error
    assert res.result_rows == []

def test_source_dataset_is_not_modified(sample_rows):
    before = [dict(r) for r in sample_rows]
    execute(sample_rows, "top 5 filter where category count by category")
    assert sample_rows == before

def test_execute_is_deterministic(sample_rows):
    q = "top 7 count by region"
    assert execute(sample_rows, q) == execute(sample_rows, q)

def test_result_is_immutable(sample_rows):
    res = execute(sample_rows, "top 1")
    with pytest.raises(Exception):
        res.error = "changed"
