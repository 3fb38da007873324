import io
import pandas as pd
import pytest
from src.ask_your_data.core.history import (
    QueryHistory, record_query, export_history_csv, export_rows_csv,
)
from src.ask_your_data.core.ingestion import load_sample_dataset
from src.ask_your_data.core.session import AnalysisSession
from src.ask_your_data.models import QueryResult
from src.ask_your_data.utils.exceptions import (
    DatasetNotLoadedError, HistoryEntryNotFoundError, InvalidQueryError,
)

# --- Tests for the history log ---

def test_record_query_returns_new_log():
    empty = QueryHistory()
    result = QueryResult(result_rows=[{"a": 1}], query_synthesized="SELECT * FROM data")
    history, entry = record_query(empty, "show all", result)

    assert len(empty) == 0
    assert len(history) == 1
    assert entry.question == "show all"
    assert entry.result_row_count == 1
    assert history.find(entry.id) == entry
    assert history.find("missing") is None

def test_history_keeps_insertion_order():
    history = QueryHistory()
    for q in ["one", "two", "three"]:
        history, _ = record_query(history, q, QueryResult())
    assert [e.question for e in history.entries] == ["one", "two", "three"]

def test_export_history_csv():
    history, _ = record_query(QueryHistory(), "top 1", QueryResult(query_synthesized="SELECT * FROM data LIMIT 1"))
    history, _ = record_query(history, "broken", QueryResult(error="boom"))

    df = pd.read_csv(io.StringIO(export_history_csv(history)), keep_default_na=False)
    assert list(df.columns) == ["question", "query_synthesized", "timestamp", "result_count", "error"]
    assert df["question"].tolist() == ["top 1", "broken"]
    assert df["error"].tolist() == ["", "boom"]

def test_export_empty_history_has_header():
    assert export_history_csv(QueryHistory()).strip() == \
        "question,query_synthesized,timestamp,result_count,error"

def test_export_rows_csv():
    csv_text = export_rows_csv([{"category": "Audio", "count": 4}])
    assert csv_text.splitlines() == ["category,count", "Audio,4"]
    assert export_rows_csv([]) == ""

# --- Tests for the session controller ---

def test_session_requires_dataset():
    with pytest.raises(DatasetNotLoadedError):
        AnalysisSession().run_query("top 3")

def test_session_rejects_blank_question():
    session = AnalysisSession()
    session.load(load_sample_dataset())
    with pytest.raises(InvalidQueryError):
        session.run_query("   ")

def test_session_records_every_query():
    session = AnalysisSession()
    session.load(load_sample_dataset())
    first = session.run_query("top 3")
    session.run_query("count by region")

    assert first.row_count == 3
    assert [e.question for e in session.history.entries] == ["top 3", "count by region"]
    assert session.history.entries[0].query_synthesized == "SELECT * FROM data LIMIT 3"

def test_session_rerun_and_clear():
    session = AnalysisSession()
    session.load(load_sample_dataset())
    session.run_query("last 2")
    entry_id = session.history.entries[0].id

    again = session.rerun(entry_id)
    assert again.row_count == 2
    assert len(session.history) == 2

    with pytest.raises(HistoryEntryNotFoundError):
        session.rerun("nope")

    session.clear_history()
    assert len(session.history) == 0

def test_session_last_result():
    session = AnalysisSession()
    session.load(load_sample_dataset())
    with pytest.raises(InvalidQueryError):
        session.require_last_result()

    result = session.run_query("top 3")
    assert session.require_last_result() is result
    assert len(session.history) == 1
