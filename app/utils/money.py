"""Decimal helpers for prices, cents and percentage labels."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """
    Permissive numeric coercion.

    None, empty strings, NaN, infinities and anything unparseable become 0.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        return Decimal(int(value))
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def round_cents(amount: Decimal) -> Decimal:
    """Round half-up to two decimals."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(amount) -> int:
    """Whole cents, half-up."""
    return int((to_decimal(amount) * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_percentage(pct: Decimal) -> str:
    """10 -> '10%', Decimal('12.50') -> '12.5%'."""
    pct = to_decimal(pct)
    if pct == pct.to_integral_value():
        return f"{int(pct)}%"
    return f"{format(pct.normalize(), 'f')}%"
