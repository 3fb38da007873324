from typing import List, Optional
from src.ask_your_data.config import settings
from src.ask_your_data.core.values import as_number, is_date, is_empty
from src.ask_your_data.models import (
    ColumnClassification, ColumnSchema, Row, NUMERIC, DATE, TEXT,
)
from src.ask_your_data.utils.logger import get_logger

logger = get_logger(__name__)


def schema_columns(dataset: List[Row]) -> List[str]:
    """Column names of a dataset; the first row defines the schema."""
    if not dataset:
        return []
    return list(dataset[0].keys())


def _column_type(values: list, threshold: float) -> str:
    # Numeric is checked before date: a column of "2024" strings is numeric.
    if not values:
        return TEXT

    numeric = sum(1 for v in values if as_number(v) is not None)
    if numeric > len(values) * threshold:
        return NUMERIC

    dates = sum(1 for v in values if is_date(v))
    if dates > len(values) * threshold:
        return DATE

    return TEXT


def classify(
    dataset: List[Row],
    sample_size: Optional[int] = None,
    threshold: Optional[float] = None,
) -> ColumnClassification:
    """
    Label each column of the dataset as numeric, date or text.

    Only the first `sample_size` rows are inspected and empty cells are
    skipped, so a column whose leading values are unrepresentative may be
    labelled differently from its tail.

    Args:
        dataset: Rows to classify. An empty dataset yields empty lists.
        sample_size: Leading rows to sample (defaults to settings.TYPE_SAMPLE_SIZE).
        threshold: Share of parseable values that must be exceeded
            (defaults to settings.TYPE_THRESHOLD).

    Returns:
        ColumnClassification with disjoint numeric/text/date column lists.
    """
    sample_size = sample_size or settings.TYPE_SAMPLE_SIZE
    threshold = settings.TYPE_THRESHOLD if threshold is None else threshold

    columns = schema_columns(dataset)
    sample = dataset[:sample_size]
    buckets = {NUMERIC: [], DATE: [], TEXT: []}

    for column in columns:
        values = [row.get(column) for row in sample]
        values = [v for v in values if not is_empty(v)]
        buckets[_column_type(values, threshold)].append(column)

    classification = ColumnClassification(
        numeric_columns=buckets[NUMERIC],
        text_columns=buckets[TEXT],
        date_columns=buckets[DATE],
        total_rows=len(dataset),
        total_columns=len(columns),
    )
    logger.debug(
        f"Classified {len(columns)} columns: numeric={buckets[NUMERIC]}, "
        f"date={buckets[DATE]}, text={buckets[TEXT]}"
    )
    return classification


def column_schema(dataset: List[Row], classification: ColumnClassification) -> List[ColumnSchema]:
    return [
        ColumnSchema(name=c, dtype=classification.type_of(c))
        for c in schema_columns(dataset)
    ]
