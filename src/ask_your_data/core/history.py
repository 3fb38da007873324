"""
Session query history and CSV export.

The history is an immutable, append-only log: appending returns a new
QueryHistory and leaves the old one untouched, so whoever owns the session
decides which version is current.
"""

import uuid
import pandas as pd
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Tuple
from src.ask_your_data.models import QueryHistoryEntry, QueryResult, Row
from src.ask_your_data.utils.logger import get_logger

logger = get_logger(__name__)

HISTORY_COLUMNS = ["question", "query_synthesized", "timestamp", "result_count", "error"]


class QueryHistory(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: Tuple[QueryHistoryEntry, ...] = ()

    def append(self, entry: QueryHistoryEntry) -> "QueryHistory":
        return QueryHistory(entries=self.entries + (entry,))

    def find(self, entry_id: str) -> Optional[QueryHistoryEntry]:
        return next((e for e in self.entries if e.id == entry_id), None)

    def __len__(self) -> int:
        return len(self.entries)


def make_entry(question: str, result: QueryResult) -> QueryHistoryEntry:
    return QueryHistoryEntry(
        id=uuid.uuid4().hex,
        question=question,
        query_synthesized=result.query_synthesized,
        timestamp=datetime.now(timezone.utc),
        result_row_count=result.row_count,
        error=result.error,
    )


def record_query(
    history: QueryHistory, question: str, result: QueryResult
) -> Tuple[QueryHistory, QueryHistoryEntry]:
    """Append the outcome of one question; returns the new log and the new entry."""
    entry = make_entry(question, result)
    logger.info(f"Recorded history entry {entry.id} ({entry.result_row_count} rows)")
    return history.append(entry), entry


# ---------------------------------------------------------------------------
# EXPORT
# ---------------------------------------------------------------------------

def export_history_csv(history: QueryHistory) -> str:
    records = [
        {
            "question": e.question,
            "query_synthesized": e.query_synthesized,
            "timestamp": e.timestamp.isoformat(),
            "result_count": e.result_row_count,
            "error": e.error or "",
        }
        for e in history.entries
    ]
    return pd.DataFrame(records, columns=HISTORY_COLUMNS).to_csv(index=False)


def export_rows_csv(rows: List[Row]) -> str:
    """Result rows as CSV; the first row's keys give the header."""
    if not rows:
        return ""
    columns = list(rows[0].keys())
    return pd.DataFrame(rows, columns=columns).to_csv(index=False)
