from dataclasses import dataclass
from typing import Dict

DEFAULT_CURRENCY_CODE = "USD"


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    name: str
    symbol: str


SUPPORTED_CURRENCIES: Dict[str, CurrencyInfo] = {
    "USD": CurrencyInfo("USD", "US Dollar", "$"),
    "EUR": CurrencyInfo("EUR", "Euro", "€"),
    "GBP": CurrencyInfo("GBP", "British Pound", "£"),
    "ILS": CurrencyInfo("ILS", "Israeli Shekel", "₪"),
    "CAD": CurrencyInfo("CAD", "Canadian Dollar", "C$"),
}


def get_currency_info(code: str | None) -> CurrencyInfo:
    return SUPPORTED_CURRENCIES.get(
        (code or "").upper(), SUPPORTED_CURRENCIES[DEFAULT_CURRENCY_CODE]
    )


def currency_display_text(code: str) -> str:
    info = SUPPORTED_CURRENCIES.get(code.upper())
    if info is None:
        return f"{code} - Unknown Currency"
    return f"{info.code} - {info.name}"


def format_number_only(amount: float) -> str:
    return f"{amount:,.2f}"


def format_amount(amount: float, code: str | None = None) -> str:
    """
    Format an amount for display. Display only: no conversion happens.
    """
    info = get_currency_info(code)
    if amount < 0:
        return f"-{info.symbol}{format_number_only(abs(amount))}"
    return f"{info.symbol}{format_number_only(amount)}"


def format_with_sign(
    amount: float, code: str | None = None, force_sign: bool = False
) -> str:
    formatted = format_amount(abs(amount), code)
    if amount < 0:
        return f"-{formatted}"
    if amount > 0 and force_sign:
        return f"+{formatted}"
    return formatted
