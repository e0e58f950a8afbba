from .pattern import PatternRepository

__all__ = ["PatternRepository"]
