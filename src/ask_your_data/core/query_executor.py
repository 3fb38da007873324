from collections import Counter
from collections.abc import Mapping
from functools import partial
from typing import Callable, List
from src.ask_your_data.core.intent_matcher import match
from src.ask_your_data.core.query_synthesizer import synthesize_query
from src.ask_your_data.core.values import render_text, to_number_or_zero
from src.ask_your_data.models import QueryResult, QuerySignals, Row
from src.ask_your_data.utils.exceptions import QueryExecutionError
from src.ask_your_data.utils.logger import get_logger

logger = get_logger(__name__)

Step = Callable[[List[Row]], List[Row]]


# ---------------------------------------------------------------------------
# STEPS  (each one: rows in -> new rows out, input never modified)
# ---------------------------------------------------------------------------

def take_head(rows: List[Row], count: int) -> List[Row]:
    return rows[:count]


def take_tail(rows: List[Row], count: int) -> List[Row]:
    # "last 0" means no rows, not every row as rows[-0:] would give
    return rows[-count:] if count > 0 else []


def filter_self_mention(rows: List[Row], column: str) -> List[Row]:
    """
    Keep rows whose rendered cell contains the column's own name.

    No filter value is read from the question; only the column name itself
    is searched for.
    """
    return [r for r in rows if column in render_text(r.get(column)).lower()]


def count_by(rows: List[Row], column: str) -> List[Row]:
    counts = Counter(render_text(r.get(column)) for r in rows)
    return [{column: value, "count": n} for value, n in counts.items()]


def average_of(source: List[Row], column: str) -> List[Row]:
    total = sum(to_number_or_zero(r.get(column)) for r in source)
    return [{f"average_{column}": f"{total / len(source):.2f}"}]


def sum_of(source: List[Row], column: str) -> List[Row]:
    total = sum(to_number_or_zero(r.get(column)) for r in source)
    return [{f"total_{column}": total}]


# ---------------------------------------------------------------------------
# CASCADE
# ---------------------------------------------------------------------------

def build_cascade(dataset: List[Row], signals: QuerySignals) -> List[Step]:
    """
    Ordered steps for the detected signals.

    Order is fixed: head, tail, filter, group, average, sum. Each step sees
    the previous step's output, except the aggregates, which always read the
    full source dataset and replace whatever came before them.
    """
    steps: List[Step] = []

    if signals.limit_head is not None:
        steps.append(partial(take_head, count=signals.limit_head))
    if signals.limit_tail is not None:
        steps.append(partial(take_tail, count=signals.limit_tail))
    if signals.filter_column:
        steps.append(partial(filter_self_mention, column=signals.filter_column))
    if signals.group_column:
        steps.append(partial(count_by, column=signals.group_column))

    # No numeric column: aggregate steps are skipped and the previous result stands
    if signals.aggregate_column:
        if signals.aggregate_average:
            steps.append(lambda _: average_of(dataset, signals.aggregate_column))
        if signals.aggregate_sum:
            steps.append(lambda _: sum_of(dataset, signals.aggregate_column))

    return steps


def run_cascade(dataset: List[Row], signals: QuerySignals) -> List[Row]:
    result = list(dataset)
    for step in build_cascade(dataset, signals):
        result = step(result)
    return result


def _check_rows(dataset) -> None:
    for index, row in enumerate(dataset):
        if not isinstance(row, Mapping):
            raise QueryExecutionError(
                f"Row {index} is a {type(row).__name__}, expected a column mapping."
            )


# ---------------------------------------------------------------------------
# MAIN ENTRY POINT
# ---------------------------------------------------------------------------

def execute(dataset: List[Row], question: str) -> QueryResult:
    """
    Answer a natural-language question against an in-memory dataset.

    Never raises: any failure while matching or running the cascade is
    returned as a QueryResult with no rows, an empty query string and the
    error message.

    Args:
        dataset: Source rows, treated as read-only.
        question: Free-text question.

    Returns:
        QueryResult with the result rows and the synthesized query string.
    """
    logger.info(f"Executing question: '{question}'")
    try:
        _check_rows(dataset)
        signals = match(question, dataset)
        rows = run_cascade(dataset, signals)
        result = QueryResult(result_rows=rows, query_synthesized=synthesize_query(signals))

    except Exception as e:
        logger.error(f"Query execution failed: {type(e).__name__}: {e}")
        return QueryResult(result_rows=[], query_synthesized="", error=str(e) or type(e).__name__)

    logger.info(f"Query returned {result.row_count} row(s): {result.query_synthesized}")
    return result
