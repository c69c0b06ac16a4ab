"""
Payload validation tests.

Verifies:
- Integer parsing is strict and bounded to the INTEGER column range
- The engine and payload validation share the same integer rules
"""

import pytest

from garments.errors import InvalidQuantityError, ValidationError
from garments.models import Product
from garments.validation import MAX_INT, MIN_INT, ModelValidationPolicy, parse_int, validate_payload


# =============================================================================
# INTEGER PARSING
# =============================================================================


class TestParseInt:
    @pytest.mark.parametrize("value, expected", [(5, 5), (" 12 ", 12), ("-3", -3), (MAX_INT, MAX_INT), (MIN_INT, MIN_INT)])
    def test_accepts_plain_integers(self, value, expected):
        assert parse_int(value, "quantity") == expected

    @pytest.mark.parametrize("value", [True, 1.0, "1.0", "1e3", "", "ten", None, [1]])
    def test_rejects_non_integers(self, value):
        with pytest.raises(ValidationError):
            parse_int(value, "quantity")

    @pytest.mark.parametrize("value", [MAX_INT + 1, MIN_INT - 1, 10**20, "99999999999999999999"])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(ValidationError, match="out of range"):
            parse_int(value, "quantity")

    def test_custom_error_class(self):
        with pytest.raises(InvalidQuantityError):
            parse_int(10**20, "quantity", error=InvalidQuantityError)


class TestPayloadIntegers:
    policy = ModelValidationPolicy(writable_fields={"quantity", "minimum_order"})

    def test_integer_columns_use_shared_parsing(self):
        patch = validate_payload(model=Product, payload={"quantity": "7"}, policy=self.policy, partial=True)
        assert patch == {"quantity": 7}

    def test_integer_column_overflow_rejected(self):
        with pytest.raises(ValidationError, match="minimum_order is out of range"):
            validate_payload(model=Product, payload={"minimum_order": 2**31}, policy=self.policy, partial=True)
