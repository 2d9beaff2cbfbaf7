# businesses/services/formatting.py

"""
CURRENCY FORMATTING (presentation adapter)

The ledger core always returns raw Decimals. This module is the only place
that turns them into display strings, using the business's configured
symbol and separators (defaults: ৳ . ,).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

TWOPLACES = Decimal("0.01")


def format_amount(
    value,
    *,
    symbol: str = "৳",
    decimal_separator: str = ".",
    thousand_separator: str = ",",
) -> str:
    amount = Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""

    whole, frac = f"{abs(amount):.2f}".split(".")
    groups = []
    while whole:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]

    body = f"{thousand_separator.join(groups)}{decimal_separator}{frac}"
    if symbol:
        return f"{sign}{symbol} {body}"
    return f"{sign}{body}"


def format_for_setting(value, setting) -> str:
    if setting is None:
        return format_amount(value)
    return format_amount(
        value,
        symbol=setting.currency_symbol,
        decimal_separator=setting.decimal_separator or ".",
        thousand_separator=setting.thousand_separator or "",
    )
