from src.ask_your_data.core.intent_matcher import match
from src.ask_your_data.core.query_synthesizer import synthesize_query
from src.ask_your_data.models import QuerySignals

def test_default_select():
    assert synthesize_query(QuerySignals()) == "SELECT * FROM data"

def test_average_string_literal(five_rows):
    assert synthesize_query(match("average price", five_rows)) == \
        "SELECT AVG(price) as average_price FROM data"

def test_avg_keyword_is_described_too(five_rows):
    assert synthesize_query(match("avg price", five_rows)) == \
        "SELECT AVG(price) as average_price FROM data"

def test_total_keyword_is_described_as_sum(five_rows):
    assert synthesize_query(match("total price", five_rows)) == \
        "SELECT SUM(price) as total_price FROM data"

def test_count_takes_precedence_over_aggregates(five_rows):
    assert synthesize_query(match("count and average", five_rows)) == \
        "SELECT *, COUNT(*) as count FROM data"

def test_limit_suffix_uses_default(five_rows):
    assert synthesize_query(match("top products", five_rows)) == "SELECT * FROM data LIMIT 10"

def test_filter_and_tail_are_not_described(five_rows):
    assert synthesize_query(match("last 2 where category", five_rows)) == "SELECT * FROM data"
