"""API route handlers."""

from paysms_ml.api.routes import classify, health, patterns

__all__ = ["classify", "health", "patterns"]
