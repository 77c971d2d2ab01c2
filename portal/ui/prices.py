import math
import re
from typing import Optional

PRICE_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

PRICE_LABELS = {
    "retailPrice": "Retail price",
    "bulkPrice": "Bulk price",
}


class PriceInputError(ValueError):
    """A price field holds text that is not a number."""

    def __init__(self, field: str):
        self.field = field
        label = PRICE_LABELS.get(field, "Price")
        super().__init__(f"{label} must be a valid number")


def parse_price_input(text: str, field: str = "price") -> Optional[float]:
    """
    Turn the text of a price input into a value for the API.

    Blank text means "no price" (None). Anything else must parse as a finite
    number.

    Raises:
        PriceInputError: If the text is not blank and not a finite number
    """
    text = text.strip()
    if not text:
        return None

    # float() alone would also take "1_000", "inf" and "nan"
    if not PRICE_PATTERN.match(text):
        raise PriceInputError(field)

    value = float(text)
    if not math.isfinite(value):
        raise PriceInputError(field)
    return value


def format_price_input(value: Optional[float]) -> str:
    """Inverse of parse_price_input for filling an input from a stored price."""
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)
