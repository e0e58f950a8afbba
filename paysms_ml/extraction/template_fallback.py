"""Conservative regexes derived from template placeholders."""

from paysms_ml.data_models import RegexTriple

AMOUNT_WON_REGEX = r"([\d,]{2,})원"
AMOUNT_LINE_REGEX = r"\n([\d,]{2,})\n"
AMOUNT_LOOSE_REGEX = r"([\d,]{2,})(?:원)?"

STORE_LINE_REGEX = r"\n([^\n]{2,30})\n(?:체크카드출금|출금|승인|결제|사용|일시불|할부)"
STORE_AFTER_TIME_REGEX = r"\d{1,2}:\d{2}\s+(.+?)\s+[\d,]{2,}(?:원)?"
STORE_BEFORE_AMOUNT_REGEX = r"([가-힣a-zA-Z0-9()'&._\-\s]{2,30})\s+[\d,]{2,}(?:원)?"

CARD_BRACKET_REGEX = r"\[([^\]]+)\]"


def build_template_fallback_regex(template: str) -> RegexTriple | None:
    """Build a regex triple from the placeholders of a template.

    Needs both an {AMOUNT} and a {STORE} placeholder; returns None otherwise.
    """
    if "{AMOUNT}" not in template or "{STORE}" not in template:
        return None

    if "{AMOUNT}원" in template:
        amount_regex = AMOUNT_WON_REGEX
    elif "\n{AMOUNT}\n" in template:
        amount_regex = AMOUNT_LINE_REGEX
    else:
        amount_regex = AMOUNT_LOOSE_REGEX

    if "\n{STORE}\n" in template:
        store_regex = STORE_LINE_REGEX
    elif "{TIME}" in template:
        store_regex = STORE_AFTER_TIME_REGEX
    else:
        store_regex = STORE_BEFORE_AMOUNT_REGEX

    card_regex = CARD_BRACKET_REGEX if "[" in template else ""

    return RegexTriple(amount_regex=amount_regex, store_regex=store_regex, card_regex=card_regex)
