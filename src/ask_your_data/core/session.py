from typing import Optional
from src.ask_your_data.core.history import QueryHistory, record_query
from src.ask_your_data.core.query_executor import execute
from src.ask_your_data.models import DatasetContext, QueryResult
from src.ask_your_data.utils.exceptions import (
    DatasetNotLoadedError, HistoryEntryNotFoundError, InvalidQueryError,
)
from src.ask_your_data.utils.logger import get_logger

logger = get_logger(__name__)


class AnalysisSession:
    """
    Owns the active dataset and its query history for one user session.
    Loading a new dataset keeps the history; clearing replaces it with an empty log.
    """

    def __init__(self, history: Optional[QueryHistory] = None):
        self.context: Optional[DatasetContext] = None
        self.history: QueryHistory = history or QueryHistory()
        self.last_result: Optional[QueryResult] = None

    def load(self, context: DatasetContext) -> None:
        logger.info(f"Session dataset set to '{context.filename}' ({len(context.rows)} rows)")
        self.context = context
        self.last_result = None

    def require_context(self) -> DatasetContext:
        if self.context is None:
            raise DatasetNotLoadedError()
        return self.context

    def run_query(self, question: str) -> QueryResult:
        context = self.require_context()
        if not question or not question.strip():
            raise InvalidQueryError("Question text is required.")

        result = execute(context.rows, question)
        self.history, _ = record_query(self.history, question, result)
        self.last_result = result
        return result

    def rerun(self, entry_id: str) -> QueryResult:
        entry = self.history.find(entry_id)
        if entry is None:
            raise HistoryEntryNotFoundError(entry_id)
        logger.info(f"Re-running history entry {entry_id}: '{entry.question}'")
        return self.run_query(entry.question)

    def require_last_result(self) -> QueryResult:
        if self.last_result is None:
            raise InvalidQueryError("No query result yet. Ask a question first.")
        return self.last_result

    def clear_history(self) -> None:
        logger.info(f"Clearing {len(self.history)} history entries")
        self.history = QueryHistory()
