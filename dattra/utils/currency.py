"""
Brazilian currency and procedure code parsing/formatting helpers.

Parsing never raises: text that cannot be read as a number becomes 0.
"""

import re
from typing import Any, Union

CODE_DIGITS = 10


def currency_to_number(value: Any) -> float:
    """
    Convert a Brazilian currency string to a number.

    Only digits and the comma are kept, and the comma is the decimal
    separator, so "R$ 1.234,56" becomes 1234.56.

    Args:
        value: Display-formatted amount (numbers pass through)

    Returns:
        Parsed amount, or 0.0 when it cannot be parsed
    """
    if value is None or value == "":
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    cleaned = re.sub(r"[^\d,]", "", str(value)).replace(",", ".", 1)
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_int(value: Any) -> int:
    """
    Parse the leading integer of a text field.

    Args:
        value: Text such as "10" or "10%"

    Returns:
        Parsed integer, or 0 when there is none
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)

    match = re.match(r"\s*([+-]?\d+)", str(value))
    return int(match.group(1)) if match else 0


def format_currency(value: Union[int, float]) -> str:
    """
    Format a number as Brazilian currency.

    Args:
        value: Amount

    Returns:
        Text like "R$ 1.234,56" (negative amounts as "-R$ 1.234,56")
    """
    formatted = f"{abs(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    sign = "-" if value < 0 and round(abs(value), 2) > 0 else ""
    return f"{sign}R$ {formatted}"


def mask_currency_input(text: str) -> str:
    """
    Mask a currency field as it is typed: digits are read as cents.

    Args:
        text: Raw field text, e.g. "123456"

    Returns:
        Formatted amount ("R$ 1.234,56"), or "" when no digit was typed
    """
    digits = re.sub(r"\D", "", text or "")
    if not digits:
        return ""
    return format_currency(int(digits) / 100)


def mask_digits(text: str) -> str:
    """Keep only the digits of a text field."""
    return re.sub(r"\D", "", text or "")


def format_procedure_code(text: str) -> str:
    """
    Apply the procedure code mask xx.xx.xx.xxx-x.

    Args:
        text: Raw code text; non-digits are dropped and at most 10 digits kept

    Returns:
        Partially or fully masked code, "" when there are no digits
    """
    digits = re.sub(r"\D", "", text or "")[:CODE_DIGITS]
    if not digits:
        return ""

    groups = [digits[0:2], digits[2:4], digits[4:6], digits[6:9]]
    formatted = ".".join(group for group in groups if group)
    if len(digits) > 9:
        formatted += "-" + digits[9:]
    return formatted
