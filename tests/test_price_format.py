# test_price_format.py
# tests/test_price_format.py

from gutasync.core.price_format import format_price, format_price_change


def test_price_two_decimals_with_separator():
    assert format_price(1234.5) == "$1,234.50"
    assert format_price(1_000_000) == "$1,000,000.00"
    assert format_price(1) == "$1.00"


def test_small_price_up_to_six_decimals():
    assert format_price(0.0000123) == "$0.000012"
    assert format_price(0.5) == "$0.50"
    assert format_price(0.123456) == "$0.123456"


def test_invalid_price():
    assert format_price(None) == "$-"
    assert format_price("abc") == "$-"
    assert format_price(float("nan")) == "$-"
    assert format_price(float("inf")) == "$-"


def test_price_change_positive():
    assert format_price_change(1.234) == ("+1.23%", "#22c55e")
    assert format_price_change(0) == ("+0.00%", "#22c55e")


def test_price_change_negative():
    assert format_price_change(-4.567) == ("-4.57%", "#ef4444")
