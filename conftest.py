import os

# Keep test runs from writing logs/app.log
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from src.ask_your_data.core.ingestion import SAMPLE_ROWS


@pytest.fixture
def sample_rows():
    """The 20-row e-commerce dataset."""
    return [dict(row) for row in SAMPLE_ROWS]


@pytest.fixture
def five_rows():
    return [
        {"product_name": "Laptop", "category": "Electronics", "price": "999", "sales": "50"},
        {"product_name": "Mouse", "category": "Accessories", "price": "25", "sales": "200"},
        {"product_name": "Keyboard", "category": "Accessories", "price": "75", "sales": "150"},
        {"product_name": "Monitor", "category": "Electronics", "price": "299", "sales": "75"},
        {"product_name": "Headphones", "category": "Audio", "price": "150", "sales": "120"},
    ]
