"""
Tests: Input validator.

Run with:
    pytest pricing_calculator/tests/test_validator.py -v
"""

import math

import pytest
from pricing_calculator.engine.validator import validate, FIELD_ORDER
from pricing_calculator.models.enums import ContractLength, SupportTier
from pricing_calculator.models.schemas import PricingInput, ValidationError


def _payload(**overrides) -> dict:
    payload = {
        "currentPrice": 99,
        "customers": 100,
        "churnRate": 5,
        "competitorPrice": 120,
        "cac": 300,
        "features": 3,
        "growthRate": 10,
        "supportTier": "standard",
        "contractLength": "monthly",
    }
    payload.update(overrides)
    return payload


def _error(result) -> tuple[str, str]:
    assert isinstance(result, ValidationError)
    return result.field, result.reason.value


class TestValidInput:
    def test_full_payload_accepted(self):
        result = validate(_payload())
        assert isinstance(result, PricingInput)
        assert result.current_price == 99
        assert result.customers == 100
        assert result.cac == 300
        assert result.support_tier == SupportTier.STANDARD
        assert result.contract_length == ContractLength.MONTHLY

    def test_numeric_strings_from_form_fields(self):
        result = validate(_payload(currentPrice=" 49.5 ", customers="12", churnRate="2.5"))
        assert isinstance(result, PricingInput)
        assert result.current_price == 49.5
        assert result.customers == 12
        assert result.churn_rate == 2.5

    def test_enum_defaults_when_unset(self):
        payload = _payload()
        del payload["supportTier"]
        payload["contractLength"] = ""
        result = validate(payload)
        assert result.support_tier == SupportTier.STANDARD
        assert result.contract_length == ContractLength.MONTHLY

    def test_enum_case_insensitive(self):
        result = validate(_payload(supportTier="Premium", contractLength=" ANNUAL "))
        assert result.support_tier == SupportTier.PREMIUM
        assert result.contract_length == ContractLength.ANNUAL

    def test_optional_fields_absent(self):
        payload = _payload(competitorPrice=None, cac="")
        result = validate(payload)
        assert isinstance(result, PricingInput)
        assert result.competitor_price is None
        assert result.cac is None

    def test_zero_customers_allowed(self):
        result = validate(_payload(customers=0))
        assert isinstance(result, PricingInput)
        assert result.customers == 0

    def test_churn_bounds_inclusive(self):
        assert isinstance(validate(_payload(churnRate=0)), PricingInput)
        assert isinstance(validate(_payload(churnRate=100)), PricingInput)

    def test_legacy_users_key(self):
        payload = _payload()
        del payload["customers"]
        payload["users"] = 25
        result = validate(payload)
        assert result.customers == 25


class TestRejections:
    def test_negative_churn_out_of_range(self):
        assert _error(validate(_payload(churnRate=-5))) == ("churnRate", "out_of_range")

    def test_churn_above_100_out_of_range(self):
        assert _error(validate(_payload(churnRate=100.5))) == ("churnRate", "out_of_range")

    def test_unknown_support_tier(self):
        assert _error(validate(_payload(supportTier="gold"))) == ("supportTier", "invalid_enum")

    def test_unknown_contract_length(self):
        assert _error(validate(_payload(contractLength="weekly"))) == ("contractLength", "invalid_enum")

    def test_non_string_enum(self):
        assert _error(validate(_payload(supportTier=2))) == ("supportTier", "invalid_enum")

    @pytest.mark.parametrize("price", [0, -10])
    def test_price_must_be_positive(self, price):
        assert _error(validate(_payload(currentPrice=price))) == ("currentPrice", "must_be_positive")

    def test_negative_customers(self):
        assert _error(validate(_payload(customers=-1))) == ("customers", "must_be_non_negative")

    def test_fractional_customers(self):
        assert _error(validate(_payload(customers=10.5))) == ("customers", "must_be_integer")

    @pytest.mark.parametrize("value", ["abc", math.nan, math.inf, True, [1], None])
    def test_non_numeric_price_is_required(self, value):
        assert _error(validate(_payload(currentPrice=value))) == ("currentPrice", "required")

    def test_missing_features_is_required(self):
        payload = _payload()
        del payload["features"]
        assert _error(validate(payload)) == ("features", "required")

    def test_non_positive_cac(self):
        assert _error(validate(_payload(cac=0))) == ("cac", "must_be_positive")

    def test_negative_growth_rate(self):
        assert _error(validate(_payload(growthRate=-1))) == ("growthRate", "must_be_non_negative")

    def test_price_above_ceiling(self):
        assert _error(validate(_payload(currentPrice=1_000_000))) == ("currentPrice", "out_of_range")

    def test_not_a_mapping(self):
        assert _error(validate(None)) == ("currentPrice", "required")
        assert _error(validate([1, 2, 3])) == ("currentPrice", "required")


class TestErrorOrder:
    def test_first_failing_field_reported(self):
        result = validate(_payload(currentPrice=-1, churnRate=-5, supportTier="gold"))
        assert _error(result) == ("currentPrice", "must_be_positive")

    def test_churn_reported_before_enums(self):
        result = validate(_payload(churnRate=-5, supportTier="gold", contractLength="x"))
        assert _error(result) == ("churnRate", "out_of_range")

    def test_empty_payload_reports_price(self):
        assert _error(validate({})) == ("currentPrice", "required")

    def test_field_order_matches_contract(self):
        assert FIELD_ORDER.index("currentPrice") < FIELD_ORDER.index("customers")
        assert FIELD_ORDER.index("customers") < FIELD_ORDER.index("churnRate")
        assert FIELD_ORDER.index("churnRate") < FIELD_ORDER.index("supportTier")
        assert FIELD_ORDER[-2:] == ("supportTier", "contractLength")

    def test_error_payload_shape(self):
        result = validate(_payload(supportTier="gold"))
        assert result.to_payload() == {"field": "supportTier", "reason": "invalid_enum"}
