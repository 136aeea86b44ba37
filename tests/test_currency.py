from budgetsmart.utils.currency import (
    currency_display_text,
    format_amount,
    format_number_only,
    format_with_sign,
)


def test_format_amount_uses_currency_symbol():
    assert format_amount(1234.5, "USD") == "$1,234.50"
    assert format_amount(10, "eur") == "€10.00"
    assert format_amount(-3, "GBP") == "-£3.00"


def test_unknown_currency_falls_back_to_usd():
    assert format_amount(1, "XYZ") == "$1.00"
    assert format_amount(1, None) == "$1.00"


def test_format_with_sign():
    assert format_with_sign(-12.5, "CAD") == "-C$12.50"
    assert format_with_sign(12.5, "CAD") == "C$12.50"
    assert format_with_sign(12.5, "CAD", force_sign=True) == "+C$12.50"
    assert format_with_sign(0, "USD", force_sign=True) == "$0.00"


def test_number_only_and_display_text():
    assert format_number_only(1000000) == "1,000,000.00"
    assert currency_display_text("ILS") == "ILS - Israeli Shekel"
    assert currency_display_text("ABC") == "ABC - Unknown Currency"
