"""Category inference and normalization."""

import logging

from paysms_ml.config.keywords import (
    CATEGORIES,
    CATEGORY_ALIASES,
    CATEGORY_KEYWORDS,
    DEFAULT_CATEGORY,
    UNCLASSIFIED_CATEGORY,
)

logger = logging.getLogger(__name__)

_CATEGORY_KEYWORDS_LOWER: dict[str, tuple[str, ...]] = {
    category: tuple(k.lower() for k in keywords)
    for category, keywords in CATEGORY_KEYWORDS.items()
}
_VALID_CATEGORIES = frozenset(CATEGORIES)


def infer_category(store_name: str, body: str) -> str:
    """Infer a category from store-name keywords found in the store or body."""
    combined = f"{store_name} {body}".lower()
    for category, keywords in _CATEGORY_KEYWORDS_LOWER.items():
        if any(keyword in combined for keyword in keywords):
            return category
    return UNCLASSIFIED_CATEGORY


def normalize_category(raw_category: str) -> str:
    """Map a free-form category (e.g. from an LLM) onto the fixed category set."""
    trimmed = raw_category.strip()
    if trimmed in _VALID_CATEGORIES:
        return trimmed

    if trimmed in CATEGORY_ALIASES:
        return CATEGORY_ALIASES[trimmed]

    if trimmed:
        for category in CATEGORIES:
            if category in trimmed or trimmed in category:
                return category

        lower = trimmed.lower()
        for alias, category in CATEGORY_ALIASES.items():
            if alias.lower() in lower:
                return category

    logger.debug("Unknown category %r mapped to %s", raw_category, DEFAULT_CATEGORY)
    return DEFAULT_CATEGORY
