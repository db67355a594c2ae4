from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Optional, Union

SCALE = 4
QUANTUM = Decimal(1).scaleb(-SCALE)

# 96-bit mantissa at a fixed scale of four fractional digits.
MAX_NUMBER = Decimal(2**96 - 1).scaleb(-SCALE)
MIN_NUMBER = -MAX_NUMBER

ZERO = Decimal("0")

# Wide enough that adding or subtracting two in-range values never rounds.
_CONTEXT = Context(prec=40, rounding=ROUND_HALF_EVEN, traps=[InvalidOperation])


def in_range(value: Decimal) -> bool:
    return MIN_NUMBER <= value <= MAX_NUMBER


def is_number(value) -> bool:
    """True if value is a finite Decimal, in range and on the 0.0001 grid."""
    if not isinstance(value, Decimal) or not value.is_finite():
        return False
    return in_range(value) and value == value.quantize(QUANTUM, context=_CONTEXT)


def to_number(value: Union[str, int, Decimal]) -> Decimal:
    """
    Convert external input to a Number.
    Rounds to four fractional digits; raises ValueError if the value is
    not finite or does not fit.
    """
    try:
        number = Decimal(value.strip() if isinstance(value, str) else value)
    except InvalidOperation:
        raise ValueError(f"not a decimal number: {value!r}")

    if not number.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    if not in_range(number):
        raise ValueError(f"out of range: {value!r}")

    # MAX_NUMBER sits on the quantum grid, so rounding cannot leave the range.
    return number.quantize(QUANTUM, context=_CONTEXT)


def add(a: Decimal, b: Decimal) -> Decimal:
    return _CONTEXT.add(a, b)


def subtract(a: Decimal, b: Decimal) -> Decimal:
    return _CONTEXT.subtract(a, b)


def checked_add(a: Decimal, b: Decimal) -> Optional[Decimal]:
    """Return a + b, or None if the result is not representable."""
    result = add(a, b)
    return result if in_range(result) else None


def checked_sub(a: Decimal, b: Decimal) -> Optional[Decimal]:
    """Return a - b, or None if the result is not representable."""
    result = subtract(a, b)
    return result if in_range(result) else None


def format_number(value: Decimal) -> str:
    """Format with up to four decimal places, trailing zeros removed."""
    if value.is_zero():
        return "0"
    normalized = value.normalize(context=_CONTEXT)
    return f"{normalized:f}"
