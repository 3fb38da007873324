import pandas as pd
import io
import csv
import json
import re
from typing import List
from src.ask_your_data.utils.logger import get_logger
from src.ask_your_data.utils.exceptions import FileProcessingError
from src.ask_your_data.models import DatasetContext, DatasetOverview, Row
from src.ask_your_data.core.type_inference import classify, column_schema
from src.ask_your_data.config import settings

logger = get_logger(__name__)

SAMPLE_FILENAME = "sample-ecommerce-data.csv"

SAMPLE_ROWS = [
    {"product_name": "Laptop", "category": "Electronics", "price": 999, "sales": 50, "region": "North"},
    {"product_name": "Mouse", "category": "Accessories", "price": 25, "sales": 200, "region": "South"},
    {"product_name": "Keyboard", "category": "Accessories", "price": 75, "sales": 150, "region": "East"},
    {"product_name": "Monitor", "category": "Electronics", "price": 299, "sales": 75, "region": "West"},
    {"product_name": "Headphones", "category": "Audio", "price": 150, "sales": 120, "region": "North"},
    {"product_name": "Laptop Pro", "category": "Electronics", "price": 1299, "sales": 45, "region": "South"},
    {"product_name": "Wireless Mouse", "category": "Accessories", "price": 35, "sales": 180, "region": "East"},
    {"product_name": "Mechanical Keyboard", "category": "Accessories", "price": 125, "sales": 90, "region": "West"},
    {"product_name": "4K Monitor", "category": "Electronics", "price": 450, "sales": 60, "region": "North"},
    {"product_name": "Bluetooth Headphones", "category": "Audio", "price": 200, "sales": 110, "region": "South"},
    {"product_name": "Gaming Laptop", "category": "Electronics", "price": 1599, "sales": 30, "region": "East"},
    {"product_name": "USB Mouse", "category": "Accessories", "price": 15, "sales": 250, "region": "West"},
    {"product_name": "Ergonomic Keyboard", "category": "Accessories", "price": 85, "sales": 140, "region": "North"},
    {"product_name": "Ultrawide Monitor", "category": "Electronics", "price": 599, "sales": 40, "region": "South"},
    {"product_name": "Noise Cancelling Headphones", "category": "Audio", "price": 299, "sales": 80, "region": "East"},
    {"product_name": "MacBook", "category": "Electronics", "price": 1499, "sales": 65, "region": "West"},
    {"product_name": "Trackpad", "category": "Accessories", "price": 149, "sales": 70, "region": "North"},
    {"product_name": "Wireless Keyboard", "category": "Accessories", "price": 95, "sales": 130, "region": "South"},
    {"product_name": "Gaming Monitor", "category": "Electronics", "price": 399, "sales": 85, "region": "East"},
    {"product_name": "Earbuds", "category": "Audio", "price": 99, "sales": 190, "region": "West"},
]


def normalize_column_name(name) -> str:
    """'  Product Name (USD) ' -> 'product_name_usd'"""
    cleaned = re.sub(r"[^\w\s]", "", str(name).strip().lower())
    return re.sub(r"\s+", "_", cleaned)


def _normalize_rows(records: List[dict]) -> List[Row]:
    return [{normalize_column_name(k): v for k, v in record.items()} for record in records]


def _scalar(value):
    # Nested JSON values are kept as their JSON text
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value


def _parse_json(file_content: bytes) -> List[dict]:
    data = json.loads(file_content.decode("utf-8"))

    if isinstance(data, dict):
        data = [data]
    elif not isinstance(data, list):
        raise FileProcessingError("Invalid JSON format: expected an object or an array of objects.")

    if not all(isinstance(item, dict) for item in data):
        raise FileProcessingError("Invalid JSON format: every array item must be an object.")

    return [{k: _scalar(v) for k, v in item.items()} for item in data]


def _parse_csv(file_content: bytes) -> List[dict]:
    # Sniff the delimiter on a small decoded chunk
    try:
        decoded_chunk = file_content[:1024].decode("utf-8")
        delimiter = csv.Sniffer().sniff(decoded_chunk).delimiter
    except Exception:
        delimiter = ","  # Fallback to comma

    logger.info(f"Detected delimiter: '{delimiter}'")

    # Cells stay text; classification decides what is numeric
    df = pd.read_csv(
        io.BytesIO(file_content),
        sep=delimiter,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        on_bad_lines="warn",
        encoding="utf-8",
    )
    return df.fillna("").to_dict(orient="records")


def build_context(rows: List[Row], filename: str) -> DatasetContext:
    if not rows:
        raise FileProcessingError("The uploaded file contains no data.")

    classification = classify(rows)
    return DatasetContext(
        rows=rows,
        columns=column_schema(rows, classification),
        filename=filename,
        classification=classification,
    )


def ingest_file(file_content: bytes, filename: str) -> DatasetContext:
    """
    Parse an uploaded CSV or JSON file into a dataset.

    Column names are normalized (trimmed, lower-cased, punctuation removed,
    whitespace runs replaced by '_'). Files ending in '.json' are read as a
    single object or an array of objects; everything else is read as CSV.

    Raises:
        FileProcessingError: If the file is too large, malformed or empty.
    """
    logger.info(f"Starting ingestion for file: {filename}")

    size_mb = len(file_content) / (1024 * 1024)
    if size_mb > settings.MAX_UPLOAD_SIZE_MB:
        raise FileProcessingError(f"File exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit.")

    try:
        if filename.lower().endswith(".json"):
            records = _parse_json(file_content)
        else:
            records = _parse_csv(file_content)

        context = build_context(_normalize_rows(records), filename)

    except FileProcessingError as e:
        logger.error(f"Error during ingestion: {e.message}")
        raise
    except Exception as e:
        logger.error(f"Error during ingestion: {str(e)}")
        raise FileProcessingError(f"Failed to parse {filename}: {str(e)}")

    logger.info(
        f"Ingestion successful. Rows: {len(context.rows)}, Columns: {len(context.columns)}"
    )
    return context


def load_sample_dataset() -> DatasetContext:
    """The built-in e-commerce dataset used for demos."""
    logger.info("Loading sample dataset.")
    return build_context([dict(row) for row in SAMPLE_ROWS], SAMPLE_FILENAME)


def build_overview(context: DatasetContext, preview_rows: int = 5) -> DatasetOverview:
    c = context.classification
    return DatasetOverview(
        filename=context.filename,
        total_rows=c.total_rows,
        total_columns=c.total_columns,
        numeric_columns=c.numeric_columns,
        text_columns=c.text_columns,
        date_columns=c.date_columns,
        preview=context.rows[:preview_rows],
    )
