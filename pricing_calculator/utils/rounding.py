"""
Rounding helpers.

Python's built-in round() uses banker's rounding; prices shown to customers
round half away from zero instead (148.5 -> 149, -2.5 -> -3).
"""

from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

# Enough digits to quantize any finite float (max ~1.8e308) to a few decimals.
_DECIMAL_PRECISION = 400


class ComputationError(ArithmeticError):
    """A metric evaluated to NaN or infinity."""

    def __init__(self, metric: str, detail: str = "") -> None:
        self.metric = metric
        self.detail = detail
        super().__init__(f"{metric}: {detail}" if detail else metric)


def ensure_finite(metric: str, value: float) -> float:
    """Return *value* unchanged, or raise ComputationError naming *metric*."""
    if math.isnan(value) or math.isinf(value):
        raise ComputationError(metric, f"non-finite result {value!r}")
    return value


def _quantize(value: float, digits: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return Decimal(value).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def round_half_away(value: float, digits: int = 0) -> float:
    """Round half away from zero to *digits* decimals."""
    return float(_quantize(value, digits))


def round_int(value: float) -> int:
    """Round half away from zero to an int."""
    return int(_quantize(value, 0))
