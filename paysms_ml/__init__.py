"""Payment SMS classification and pattern-learning service."""

__version__ = "0.1.0"
