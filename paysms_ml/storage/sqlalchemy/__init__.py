"""SQLAlchemy persistence layer for learned patterns."""

from .engine import (
    create_pattern_engine,
    create_pattern_session_maker,
    create_tables,
    get_engine,
    get_session_maker,
)
from .repositories import PatternRepository
from .tables import Base, PatternTable

__all__ = [
    # Engine
    "create_pattern_engine",
    "create_pattern_session_maker",
    "create_tables",
    "get_engine",
    "get_session_maker",
    # Tables
    "Base",
    "PatternTable",
    # Repositories
    "PatternRepository",
]
