"""
Query engine.
classify() labels columns, execute() answers a question against a dataset.
"""
from .type_inference import classify
from .query_executor import execute

__all__ = ["classify", "execute"]
