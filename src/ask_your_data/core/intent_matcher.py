import re
from typing import List, Optional
from src.ask_your_data.config import settings
from src.ask_your_data.core.type_inference import classify, schema_columns
from src.ask_your_data.models import QuerySignals, Row
from src.ask_your_data.utils.logger import get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# TRIGGER PHRASES
# ---------------------------------------------------------------------------
HEAD_TRIGGERS = ("top", "first")
TAIL_TRIGGERS = ("last",)
FILTER_TRIGGERS = ("where", "filter")
GROUP_TRIGGERS = ("group by", "count")
AVERAGE_TRIGGERS = ("average", "avg")
SUM_TRIGGERS = ("sum", "total")

HEAD_COUNT_RE = re.compile(r"(?:top|first)\s+(\d+)")
TAIL_COUNT_RE = re.compile(r"last\s+(\d+)")


def normalize_question(question: str) -> str:
    return question.lower().strip()


def _contains_any(text: str, phrases) -> bool:
    return any(p in text for p in phrases)


def _extract_count(pattern: re.Pattern, text: str) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else settings.DEFAULT_LIMIT


def head_limit(text: str) -> Optional[int]:
    """Row count requested by "top N" / "first N", or None when neither word appears."""
    if not _contains_any(text, HEAD_TRIGGERS):
        return None
    return _extract_count(HEAD_COUNT_RE, text)


def tail_limit(text: str) -> Optional[int]:
    if not _contains_any(text, TAIL_TRIGGERS):
        return None
    return _extract_count(TAIL_COUNT_RE, text)


def mentioned_column(text: str, columns: List[str]) -> Optional[str]:
    """First column (schema order) whose name appears literally in the text."""
    return next((c for c in columns if c in text), None)


def match(question: str, dataset: List[Row]) -> QuerySignals:
    """
    Detect every operation requested by a free-text question.

    Detection is independent per trigger phrase, so one question can set
    several signals; QueryExecutor decides how they combine.

    Args:
        question: Raw question text.
        dataset: The source rows; supplies the column names and, for
            aggregates, the first numeric column.

    Returns:
        QuerySignals describing what was detected.
    """
    text = normalize_question(question)
    columns = schema_columns(dataset)

    filter_column = None
    if _contains_any(text, FILTER_TRIGGERS):
        filter_column = mentioned_column(text, columns)

    group_requested = _contains_any(text, GROUP_TRIGGERS)
    group_column = mentioned_column(text, columns) if group_requested else None

    aggregate_average = _contains_any(text, AVERAGE_TRIGGERS)
    aggregate_sum = _contains_any(text, SUM_TRIGGERS)
    aggregate_column = None
    if aggregate_average or aggregate_sum:
        aggregate_column = classify(dataset).first_numeric

    signals = QuerySignals(
        limit_head=head_limit(text),
        limit_tail=tail_limit(text),
        filter_column=filter_column,
        group_requested=group_requested,
        group_column=group_column,
        aggregate_average=aggregate_average,
        aggregate_sum=aggregate_sum,
        aggregate_column=aggregate_column,
    )
    logger.debug(f"Signals for '{text}': {signals.model_dump(exclude_defaults=True)}")
    return signals
