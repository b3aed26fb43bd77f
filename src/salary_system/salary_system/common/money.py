from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..core.exceptions import ValidationError

ZERO = Decimal("0")
WHOLE_UNIT = Decimal("1")


def to_money(value, field_name: str = "amount") -> Decimal:
    """Coerce int/float/str/Decimal into a Decimal amount.

    Floats go through ``str`` so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if value is None:
        raise ValidationError(f"{field_name} is required")
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} is not a valid amount: {value!r}") from e


def round_currency(value: Decimal) -> Decimal:
    """Round to the nearest whole currency unit (half away from zero)."""
    return value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def money_str(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
