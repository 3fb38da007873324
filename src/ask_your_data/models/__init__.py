from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Union

# A cell is one of number / text / null; bool survives JSON ingestion as-is.
CellValue = Optional[Union[bool, int, float, str]]
Row = Dict[str, CellValue]

NUMERIC = "numeric"
DATE = "date"
TEXT = "text"


class ColumnSchema(BaseModel):
    """Represents metadata for a single column."""
    name: str
    dtype: str  # One of 'numeric', 'date', 'text'


class ColumnClassification(BaseModel):
    """
    Numeric/text/date labeling of every column of a dataset.
    The three lists are disjoint and keep schema (first row) order.
    """
    model_config = ConfigDict(frozen=True)

    numeric_columns: List[str] = Field(default_factory=list)
    text_columns: List[str] = Field(default_factory=list)
    date_columns: List[str] = Field(default_factory=list)
    total_rows: int = 0
    total_columns: int = 0

    def type_of(self, column: str) -> str:
        if column in self.numeric_columns:
            return NUMERIC
        if column in self.date_columns:
            return DATE
        return TEXT

    @property
    def first_numeric(self) -> Optional[str]:
        return self.numeric_columns[0] if self.numeric_columns else None


class QuerySignals(BaseModel):
    """
    Operations detected in a question. Several may be set at once; the
    executor applies them as a fixed cascade and the synthesizer describes them.
    """
    model_config = ConfigDict(frozen=True)

    limit_head: Optional[int] = None
    limit_tail: Optional[int] = None
    filter_column: Optional[str] = None
    group_requested: bool = False       # "group by" / "count" seen, column or not
    group_column: Optional[str] = None
    aggregate_average: bool = False
    aggregate_sum: bool = False
    aggregate_column: Optional[str] = None  # first numeric column of the source dataset

    @property
    def is_empty(self) -> bool:
        return not (
            self.limit_head is not None
            or self.limit_tail is not None
            or self.filter_column
            or self.group_requested
            or self.aggregate_average
            or self.aggregate_sum
        )


class QueryResult(BaseModel):
    """Outcome of a single question. Built once, never mutated."""
    model_config = ConfigDict(frozen=True)

    result_rows: List[Row] = Field(default_factory=list)
    query_synthesized: str = ""
    error: Optional[str] = None

    @property
    def row_count(self) -> int:
        return len(self.result_rows)


class QueryHistoryEntry(BaseModel):
    """Audit record of one submitted question."""
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    query_synthesized: str
    timestamp: datetime
    result_row_count: int
    error: Optional[str] = None


class DatasetContext(BaseModel):
    """
    Represents the active dataset in memory.
    Contains the normalized rows and their derived schema.
    """
    rows: List[Row]
    columns: List[ColumnSchema]
    filename: str
    classification: ColumnClassification


class DatasetOverview(BaseModel):
    """Summary rendered on the dataset overview screen."""
    filename: str
    total_rows: int
    total_columns: int
    numeric_columns: List[str]
    text_columns: List[str]
    date_columns: List[str]
    preview: List[Row]
