"""
Document store adapters.

The catalog reads two kinds of records, charts and chart files, through
typed repositories. Two implementations are provided:

- PostgresStore: JSONB documents in PostgreSQL (production)
- InMemoryStore: plain lists, optionally seeded from JSON (development, tests)
"""

from .base import ChartQuery, ChartRepository, ChartFilesRepository
from .memory import InMemoryStore
from .postgres import PostgresStore

__all__ = [
    "ChartQuery",
    "ChartRepository",
    "ChartFilesRepository",
    "InMemoryStore",
    "PostgresStore",
]
