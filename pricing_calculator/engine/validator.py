"""
Input Validator — gate between raw form data and the pricing engine.

validate() is total: it returns either a PricingInput or the ValidationError
for the first failing field. Fields are checked in FIELD_ORDER so the
reported error is deterministic. Nothing here logs or raises to the caller.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from pricing_calculator.models.enums import (
    ContractLength,
    SupportTier,
    ValidationReason,
)
from pricing_calculator.models.schemas import PricingInput, ValidationError

FIELD_ORDER = (
    "currentPrice",
    "customers",
    "churnRate",
    "competitorPrice",
    "cac",
    "features",
    "growthRate",
    "supportTier",
    "contractLength",
)

# Upper bounds on form inputs. Near-zero churn or prices still yield very large
# (finite) metrics; the rounding helpers handle any finite float.
MAX_PRICE = 100_000
MAX_CUSTOMERS = 10_000_000
MAX_FEATURES = 100
MAX_GROWTH_RATE = 1_000

# Older form builds post the customer count as "users".
LEGACY_KEYS = {"customers": "users"}


class _Rejected(Exception):
    def __init__(self, reason: ValidationReason) -> None:
        self.reason = reason
        super().__init__(reason.value)


# ── Primitive parsers ────────────────────────────────────


def _parse_number(value: Any) -> Optional[float]:
    """Return a finite float, None when the value is absent, or reject."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise _Rejected(ValidationReason.REQUIRED)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise _Rejected(ValidationReason.REQUIRED)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            raise _Rejected(ValidationReason.REQUIRED)
    else:
        raise _Rejected(ValidationReason.REQUIRED)

    if math.isnan(number) or math.isinf(number):
        raise _Rejected(ValidationReason.REQUIRED)
    return number


def _required(value: Any) -> float:
    number = _parse_number(value)
    if number is None:
        raise _Rejected(ValidationReason.REQUIRED)
    return number


def _as_int(number: float) -> int:
    if not number.is_integer():
        raise _Rejected(ValidationReason.MUST_BE_INTEGER)
    return int(number)


def _parse_enum(value: Any, enum_cls: type[Enum], default: Enum) -> Enum:
    if value is None:
        return default
    if not isinstance(value, str):
        raise _Rejected(ValidationReason.INVALID_ENUM)
    text = value.strip().lower()
    if not text:
        return default
    try:
        return enum_cls(text)
    except ValueError:
        raise _Rejected(ValidationReason.INVALID_ENUM)


# ── Field rules ──────────────────────────────────────────


def _current_price(value: Any) -> float:
    number = _required(value)
    if number <= 0:
        raise _Rejected(ValidationReason.MUST_BE_POSITIVE)
    if number > MAX_PRICE:
        raise _Rejected(ValidationReason.OUT_OF_RANGE)
    return number


def _customers(value: Any) -> int:
    number = _required(value)
    if number < 0:
        raise _Rejected(ValidationReason.MUST_BE_NON_NEGATIVE)
    if number > MAX_CUSTOMERS:
        raise _Rejected(ValidationReason.OUT_OF_RANGE)
    return _as_int(number)


def _churn_rate(value: Any) -> float:
    number = _required(value)
    if number < 0 or number > 100:
        raise _Rejected(ValidationReason.OUT_OF_RANGE)
    return number


def _optional_positive(value: Any) -> Optional[float]:
    number = _parse_number(value)
    if number is not None and number <= 0:
        raise _Rejected(ValidationReason.MUST_BE_POSITIVE)
    if number is not None and number > MAX_PRICE:
        raise _Rejected(ValidationReason.OUT_OF_RANGE)
    return number


def _features(value: Any) -> int:
    number = _required(value)
    if number < 0:
        raise _Rejected(ValidationReason.MUST_BE_NON_NEGATIVE)
    if number > MAX_FEATURES:
        raise _Rejected(ValidationReason.OUT_OF_RANGE)
    return _as_int(number)


def _growth_rate(value: Any) -> float:
    number = _required(value)
    if number < 0:
        raise _Rejected(ValidationReason.MUST_BE_NON_NEGATIVE)
    if number > MAX_GROWTH_RATE:
        raise _Rejected(ValidationReason.OUT_OF_RANGE)
    return number


def _support_tier(value: Any) -> SupportTier:
    return _parse_enum(value, SupportTier, SupportTier.STANDARD)  # type: ignore[return-value]


def _contract_length(value: Any) -> ContractLength:
    return _parse_enum(value, ContractLength, ContractLength.MONTHLY)  # type: ignore[return-value]


_RULES: dict[str, Callable[[Any], Any]] = {
    "currentPrice": _current_price,
    "customers": _customers,
    "churnRate": _churn_rate,
    "competitorPrice": _optional_positive,
    "cac": _optional_positive,
    "features": _features,
    "growthRate": _growth_rate,
    "supportTier": _support_tier,
    "contractLength": _contract_length,
}


def _lookup(raw: Mapping[str, Any], field: str) -> Any:
    if field in raw:
        return raw[field]
    legacy = LEGACY_KEYS.get(field)
    if legacy is not None:
        return raw.get(legacy)
    return None


def validate(raw: Mapping[str, Any] | None) -> PricingInput | ValidationError:
    """
    Normalize a raw calculator payload.

    Returns a PricingInput when every field passes, otherwise the
    ValidationError for the first field (in FIELD_ORDER) that failed.
    """
    if not isinstance(raw, Mapping):
        return ValidationError(field=FIELD_ORDER[0], reason=ValidationReason.REQUIRED)

    values: dict[str, Any] = {}
    for field in FIELD_ORDER:
        try:
            values[field] = _RULES[field](_lookup(raw, field))
        except _Rejected as rejected:
            return ValidationError(field=field, reason=rejected.reason)

    return PricingInput(**values)
