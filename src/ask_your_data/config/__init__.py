"""
Configuration for Ask Your Data.
Import `settings`; it is built once from the environment and .env.
"""
from .settings import settings

__all__ = ["settings"]
