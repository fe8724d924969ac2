"""
Locale-aware number parsing and formatting (id-ID convention).

  "1.234,56"  ->  1234.56     ('.' groups thousands, ',' marks decimals)
  1234.56     ->  "1.234,56"

Parsing never raises: anything that does not read as a number becomes 0.
Formatting renders an exact zero as an empty string so untouched fields
display blank.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

# Leading numeric prefix, read the way a browser's parseFloat does
_NUMERIC_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number(text: Any) -> float:
    """Parse user-typed text such as "1.234,56" into a float (0.0 if invalid)."""
    if text is None or isinstance(text, bool):
        return 0.0
    if isinstance(text, (int, float)):
        value = float(text)
        return value if math.isfinite(value) else 0.0

    cleaned = str(text).replace(".", "").replace(",", ".")
    match = _NUMERIC_PREFIX.match(cleaned)
    if not match:
        return 0.0
    try:
        value = float(match.group(1))
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def to_non_negative(value: Any) -> float:
    """Parse *value* (text or number) and clamp it at zero (never -0.0)."""
    parsed = parse_number(value)
    return parsed if parsed > 0 else 0.0


def _round_half_up(value: float, digits: int) -> Decimal:
    # round the shortest decimal form of the float, ties away from zero
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + digits + 2)
        return exact.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def format_number(value: float, decimal_digits: int = 0) -> str:
    """
    Render *value* with '.' thousands and ',' decimal separators, fixed to
    *decimal_digits* fractional digits. Exactly zero renders as "".

    Ties round away from zero: 0.5 -> "1", 0.125 (2 digits) -> "0,13".
    """
    if value == 0:
        return ""
    digits = max(int(decimal_digits), 0)
    if math.isfinite(value):
        rendered = f"{_round_half_up(float(value), digits):,.{digits}f}"
    else:
        rendered = f"{value:,.{digits}f}"
    # swap separators: 1,234.56 -> 1.234,56
    return rendered.replace(",", "\x00").replace(".", ",").replace("\x00", ".")
