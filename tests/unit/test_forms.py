"""
Unit tests for form validation and display formatting.
"""

from decimal import Decimal

import pytest

from mbs_estimate.services.mbs_lookup import MbsValidationError
from mbs_estimate.utils.formatting import format_aud, yes_no
from mbs_estimate.utils.forms import (
    parse_fee,
    parse_gap_fee,
    parse_item_codes,
    require_query,
)


class TestRequireQuery:
    def test_strips_query(self):
        assert require_query("  knee ") == "knee"

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_rejected(self, text):
        with pytest.raises(MbsValidationError, match="Please enter a search query."):
            require_query(text)


class TestParseFee:
    """Tests for required fee fields."""

    def test_valid_fee(self):
        assert parse_fee(" 500.50 ") == Decimal("500.50")

    def test_zero_allowed(self):
        assert parse_fee("0") == Decimal("0")

    def test_blank_fee(self):
        with pytest.raises(MbsValidationError, match="Please enter Total Charged Fee."):
            parse_fee("", label="Total Charged Fee")

    @pytest.mark.parametrize("text", ["abc", "-10", "NaN"])
    def test_invalid_fee(self, text):
        with pytest.raises(MbsValidationError, match="valid positive number"):
            parse_fee(text)


class TestParseGapFee:
    def test_blank_is_zero(self):
        assert parse_gap_fee("") == Decimal("0")

    def test_invalid_is_zero(self):
        assert parse_gap_fee("-20") == Decimal("0")
        assert parse_gap_fee("lots") == Decimal("0")

    def test_valid_gap(self):
        assert parse_gap_fee("75") == Decimal("75.00")


class TestParseItemCodes:
    def test_mixed_separators(self):
        assert parse_item_codes("30175, 30180 105A;\n51300") == ["30175", "30180", "105A", "51300"]

    def test_empty_rejected(self):
        with pytest.raises(MbsValidationError, match="at least one MBS Item Number"):
            parse_item_codes(" , ")


class TestFormatting:
    """Tests for currency display."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (Decimal("1234.5"), "$1,234.50"),
            (Decimal("0"), "$0.00"),
            (Decimal("-12"), "-$12.00"),
            (285.7, "$285.70"),
            (None, "N/A"),
            ("abc", "N/A"),
        ],
    )
    def test_format_aud(self, amount, expected):
        assert format_aud(amount) == expected

    def test_yes_no(self):
        assert yes_no(True) == "Yes"
        assert yes_no(False) == "No"
