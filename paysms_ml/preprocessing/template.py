"""Message templating.

A template replaces the variable fragments of a message (amounts, dates,
times, balances, masked card numbers and, for multi-line messages, the store
line) with placeholders. Templates are the unit of embedding: two messages
in the same institutional format share (nearly) the same template.
"""

import re

from paysms_ml.config.keywords import STORE_STRUCTURAL_KEYWORDS

AMOUNT_PLACEHOLDER = "{AMOUNT}"
STORE_PLACEHOLDER = "{STORE}"
DATE_PLACEHOLDER = "{DATE}"
TIME_PLACEHOLDER = "{TIME}"

# Applied in order; later rules see the output of earlier ones
_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[\d,]+원"), "{AMOUNT}원"),
    (re.compile(r"\n[\d,]{3,}\n"), "\n{AMOUNT}\n"),
    (re.compile(r"\d{1,2}[/.-]\d{1,2}"), "{DATE}"),
    (re.compile(r"\d{1,2}:\d{2}"), "{TIME}"),
    (re.compile(r"잔액[\d,]+"), "잔액{BALANCE}"),
    (re.compile(r"\d+\*+\d+"), "{CARD_NUM}"),
)

MIN_LINES_FOR_STORE_LINE = 4


def templateize(body: str) -> str:
    """Replace the variable fragments of a message body with placeholders."""
    template = body
    for pattern, replacement in _SUBSTITUTIONS:
        template = pattern.sub(replacement, template)

    lines = template.split("\n")
    if len(lines) < MIN_LINES_FOR_STORE_LINE:
        return template

    store_index = find_store_line(lines)
    if store_index is not None:
        lines[store_index] = STORE_PLACEHOLDER
    return "\n".join(lines)


def find_store_line(lines: list[str]) -> int | None:
    """Index of the first line that looks like a store name."""
    for i, line in enumerate(lines):
        if is_likely_store_name(line.strip()):
            return i
    return None


def is_likely_store_name(line: str) -> bool:
    """Whether a single line of a multi-line SMS is probably the store name."""
    if len(line) < 2 or len(line) > 20:
        return False
    if "{" in line:
        return False
    lower = line.lower()
    if any(keyword in lower for keyword in STORE_STRUCTURAL_KEYWORDS):
        return False
    if all(ch.isdigit() or ch == "," for ch in line):
        return False
    first = line[0]
    return first.isalpha() or first in "(*"
