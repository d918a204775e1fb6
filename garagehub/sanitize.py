"""
Numeric form input sanitisation.

Browsers happily submit "0600" for a price typed over a zero placeholder.
These helpers normalise such strings and clamp the result, and the
``Annotated`` aliases at the bottom apply them to Pydantic fields.
"""
import math
from functools import partial
from typing import Annotated, Optional, Union

from pydantic import BeforeValidator

Number = Union[int, float]


def strip_leading_zeros(text: str, allow_decimals: bool = False) -> str:
    """
    Remove leading zeros from a numeric string.

    ``""`` is returned unchanged, ``"0.5"`` is kept when decimals are allowed
    and a string made only of zeros collapses to ``"0"``.
    """
    if text == "":
        return text
    if allow_decimals and text.startswith("0."):
        return text
    cleaned = text.lstrip("0")
    if cleaned == "":
        return "0"
    # "00.5" -> ".5" -> "0.5"
    if cleaned.startswith("."):
        return "0" + cleaned
    return cleaned


def parse_number_input(
    value,
    allow_decimals: bool = False,
    minimum: Optional[Number] = None,
    maximum: Optional[Number] = None,
) -> Number:
    """
    Parse a form value into an int (or float when ``allow_decimals``).

    Empty strings and None become 0. Out of range values are clamped to
    ``minimum`` / ``maximum``. Raises ValueError for text that is not a number
    and for fractional input when decimals are not allowed. NaN and infinities
    are rejected.
    """
    if value is None:
        parsed: Number = 0
    elif isinstance(value, bool):
        raise ValueError("Expected a number")
    elif isinstance(value, (int, float)):
        if not allow_decimals and isinstance(value, float) and not value.is_integer():
            raise ValueError("Decimals are not allowed")
        parsed = value if allow_decimals else int(value)
    elif isinstance(value, str):
        text = value.strip()
        if text == "":
            parsed = 0
        else:
            negative = text.startswith("-")
            text = strip_leading_zeros(text.lstrip("+-"), allow_decimals)
            if not allow_decimals and "." in text:
                raise ValueError("Decimals are not allowed")
            try:
                parsed = float(text) if allow_decimals else int(text, 10)
            except ValueError:
                raise ValueError(f"Not a number: {value!r}") from None
            if negative:
                parsed = -parsed
    else:
        raise ValueError("Expected a number")

    if isinstance(parsed, float) and not math.isfinite(parsed):
        raise ValueError(f"Not a finite number: {value!r}")

    if minimum is not None and parsed < minimum:
        parsed = minimum
    elif maximum is not None and parsed > maximum:
        parsed = maximum
    return parsed


# Pydantic field types for request schemas
Quantity = Annotated[int, BeforeValidator(partial(parse_number_input, allow_decimals=False, minimum=0))]
Money = Annotated[float, BeforeValidator(partial(parse_number_input, allow_decimals=True, minimum=0))]
Hours = Annotated[float, BeforeValidator(partial(parse_number_input, allow_decimals=True, minimum=0))]
Percent = Annotated[
    float, BeforeValidator(partial(parse_number_input, allow_decimals=True, minimum=0, maximum=100))
]
