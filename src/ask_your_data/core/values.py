"""
Coercion rules for cell values.

Rows arrive from CSV (all text) or JSON (mixed scalars), so every consumer
goes through one of these helpers instead of relying on implicit conversion:
numeric parse for aggregation/classification, date parse for classification,
and text rendering for filtering and grouping.
"""

import math
import re
import pandas as pd
from typing import Optional, Union
from src.ask_your_data.models import CellValue

Number = Union[int, float]

_INTEGER_RE = re.compile(r"[+-]?\d+")
_DIGIT_RE = re.compile(r"\d")


def is_empty(value: CellValue) -> bool:
    if value is None or value == "":
        return True
    return isinstance(value, float) and math.isnan(value)


def as_number(value: CellValue) -> Optional[Number]:
    """Parse a cell as a finite number. Returns None when it is not one."""
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    # float() accepts "1_000", "nan" and "inf"; none of those count as numbers here
    if not text or "_" in text:
        return None
    if _INTEGER_RE.fullmatch(text):
        return int(text)
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def to_number_or_zero(value: CellValue) -> Number:
    number = as_number(value)
    return 0 if number is None else number


def is_date(value: CellValue) -> bool:
    """True when pandas can read the cell as a calendar date/time."""
    if isinstance(value, bool) or is_empty(value):
        return False
    # dateutil fills in bare words like "May" or "today"; a date needs a digit
    if isinstance(value, str) and not _DIGIT_RE.search(value):
        return False
    try:
        return not pd.isna(pd.to_datetime(value, errors="coerce"))
    except (TypeError, ValueError, OverflowError):
        return False


def render_text(value: CellValue) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
