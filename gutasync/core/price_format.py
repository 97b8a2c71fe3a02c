# price_format.py
# gutasync.core.price_format

import math
from typing import Any, Tuple

POSITIVE_COLOR = '#22c55e'  # green
NEGATIVE_COLOR = '#ef4444'  # red


def format_price(value: Any) -> str:
    """
    Форматировать цену в USD.

    Формат:
        >= 1: два знака и разделитель тысяч ("$1,234.50")
        < 1:  от двух до шести знаков ("$0.000012", "$0.50")
        не число: "$-"
    """
    try:
        num = float(value)
    except (TypeError, ValueError):
        return "$-"

    if not math.isfinite(num):
        return "$-"

    if num >= 1:
        return f"${num:,.2f}"

    text = f"{num:,.6f}"
    integer, _, fraction = text.partition('.')
    fraction = fraction.rstrip('0').ljust(2, '0')
    return f"${integer}.{fraction}"


def format_price_change(change: float) -> Tuple[str, str]:
    """
    Форматировать изменение за 24ч.

    Returns:
        (text, color) - например ("+1.23%", "#22c55e")
    """
    is_positive = change >= 0
    text = f"{'+' if is_positive else ''}{change:.2f}%"
    color = POSITIVE_COLOR if is_positive else NEGATIVE_COLOR
    return text, color
