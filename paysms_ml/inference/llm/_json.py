"""Lenient JSON extraction from LLM responses.

Models wrap JSON in code fences or surround it with prose; these helpers
find the first balanced object or array and decode it.
"""

import json
import re
from typing import Any

CODE_FENCE_OPEN = re.compile(r"```json\s*", re.IGNORECASE)
CODE_FENCE_ANY = re.compile(r"```\s*")


def strip_code_fence(text: str) -> str:
    return CODE_FENCE_ANY.sub("", CODE_FENCE_OPEN.sub("", text)).strip()


def _balanced_slice(text: str, start: int, open_ch: str, close_ch: str) -> str | None:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Decode the first JSON object in the text, or None."""
    cleaned = strip_code_fence(text)
    start = cleaned.find("{")
    if start < 0:
        return None
    raw = _balanced_slice(cleaned, start, "{", "}")
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def extract_json_array(text: str) -> list[Any] | None:
    """Decode the first JSON array in the text, or None.

    Prefers an array of objects ("[{") over an earlier bare "[".
    """
    cleaned = strip_code_fence(text)
    start = cleaned.find("[{")
    if start < 0:
        start = cleaned.find("[\n{")
    if start < 0:
        start = cleaned.find("[")
    if start < 0:
        return None
    raw = _balanced_slice(cleaned, start, "[", "]")
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, list) else None
