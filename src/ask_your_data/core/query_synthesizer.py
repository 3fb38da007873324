from src.ask_your_data.models import QuerySignals

TABLE_NAME = "data"


def _projection(signals: QuerySignals) -> str:
    column = signals.aggregate_column
    if signals.group_requested:
        return "*, COUNT(*) as count"
    if signals.aggregate_average and column:
        return f"AVG({column}) as average_{column}"
    if signals.aggregate_sum and column:
        return f"SUM({column}) as total_{column}"
    return "*"


def synthesize_query(signals: QuerySignals) -> str:
    """
    Render a SQL-like string describing the detected operations.

    Display only: it is never parsed or executed. Filters and "last N"
    are not reflected in the text.
    """
    query = f"SELECT {_projection(signals)} FROM {TABLE_NAME}"
    if signals.limit_head is not None:
        query += f" LIMIT {signals.limit_head}"
    return query
