# accounting/services/money.py

"""
MONEY HELPERS

All ledger arithmetic goes through here.

Rules:
- decimal.Decimal only; floats are converted through str() so 0.1 stays 0.1
- 2 fractional digits for storage and comparison (ROUND_HALF_UP)
- Sums run at full precision and are quantized once at the end
- Amounts written to the ledger (ledger_amount) must fit DecimalField(15, 2)
  exactly: at most 13 integer digits and 2 decimal places, never rounded
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from accounting.services.exceptions import InvalidAmount

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")
BALANCE_TOLERANCE = Decimal("0.01")

# JournalItem.amount is DecimalField(max_digits=15, decimal_places=2)
MAX_LEDGER_AMOUNT = Decimal("9999999999999.99")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        amt = value
    elif isinstance(value, bool):
        raise InvalidAmount(f"Invalid money value: {value!r}")
    else:
        try:
            amt = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise InvalidAmount(f"Invalid money value: {value!r}") from exc

    if not amt.is_finite():
        raise InvalidAmount(f"Invalid money value: {value!r}")

    return amt


def quantize(value: Decimal) -> Decimal:
    return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def money(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        return quantize(to_decimal(value))
    except InvalidOperation as exc:
        raise InvalidAmount(f"Invalid money value: {value!r}") from exc


def ledger_amount(value) -> Decimal:
    """
    Parse an amount that is about to be stored on a journal item.

    Unlike money(), nothing is rounded: extra fractional digits or an
    amount too large for the column raise InvalidAmount.
    """
    if value is None or value == "":
        return ZERO

    amt = to_decimal(value)
    if abs(amt) > MAX_LEDGER_AMOUNT:
        raise InvalidAmount(f"Amount {value!r} exceeds the largest storable amount")

    rounded = quantize(amt)
    if rounded != amt:
        raise InvalidAmount(f"Amount {value!r} has more than 2 decimal places")
    return rounded


def add_amounts(*values) -> Decimal:
    total = Decimal("0")
    for v in values:
        if v is None or v == "":
            continue
        total += to_decimal(v)
    return quantize(total)


def subtract_amounts(a, b) -> Decimal:
    return quantize(to_decimal(a or "0") - to_decimal(b or "0"))


def percentage_of(amount, percent) -> Decimal:
    return quantize(to_decimal(amount) * to_decimal(percent) / Decimal("100"))


def amounts_match(a, b, tolerance=BALANCE_TOLERANCE) -> bool:
    """
    True when a and b differ by strictly less than `tolerance` after both
    are rounded to 2 places. With the default tolerance this means the two
    amounts are equal to the cent.
    """
    return abs(money(a) - money(b)) < to_decimal(tolerance)
