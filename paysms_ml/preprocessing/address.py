import re

_ADDRESS_CLEAN_PATTERN = re.compile(r"[-\s().]")


def normalize_address(raw_address: str) -> str:
    """Normalize a sender address so formatting variants compare equal.

    "+82-10-1234-5678", "8210 1234 5678" and "010-1234-5678" all become
    "01012345678".
    """
    cleaned = _ADDRESS_CLEAN_PATTERN.sub("", raw_address)
    if cleaned.startswith("+82"):
        return "0" + cleaned[3:]
    if cleaned.startswith("82") and len(cleaned) >= 11:
        return "0" + cleaned[2:]
    return cleaned
