"""Results returned by the LLM extractor."""

from pydantic import BaseModel

DEFAULT_STORE_NAME = "결제"
DEFAULT_CARD_NAME = "기타"


class ExtractionResult(BaseModel):
    """LLM judgment and fields for one message."""

    is_payment: bool = False
    amount: int = 0
    store_name: str = DEFAULT_STORE_NAME
    card_name: str = DEFAULT_CARD_NAME
    category: str = "기타"
    date_time: str = ""


class RegexTriple(BaseModel):
    """Extraction regexes; each reads its value from capture group 1."""

    amount_regex: str = ""
    store_regex: str = ""
    card_regex: str = ""
    is_payment: bool = True

    @property
    def is_usable(self) -> bool:
        return self.is_payment and bool(self.amount_regex.strip()) and bool(
            self.store_regex.strip()
        )
