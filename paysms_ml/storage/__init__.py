"""Pattern storage."""

from .memory import InMemoryPatternStore
from .protocols import PatternStore
from .sqlalchemy import (
    Base,
    PatternRepository,
    PatternTable,
    create_pattern_engine,
    create_pattern_session_maker,
    create_tables,
    get_engine,
    get_session_maker,
)

__all__ = [
    "Base",
    "InMemoryPatternStore",
    "PatternRepository",
    "PatternStore",
    "PatternTable",
    "create_pattern_engine",
    "create_pattern_session_maker",
    "create_tables",
    "get_engine",
    "get_session_maker",
]
