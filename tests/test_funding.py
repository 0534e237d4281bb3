import pytest

from portal.funding import (
    calculated_funding, format_calculated_funding, minimum_investment,
    share_request_amount, total_business_funding, validate_share_request,
)


class TestCalculatedFunding:
    def test_product(self):
        assert calculated_funding("1000", "12.5") == 12500.0

    def test_missing_input_is_zero(self):
        assert calculated_funding("", "12.5") == 0.0
        assert calculated_funding("100", None) == 0.0

    def test_label(self):
        assert format_calculated_funding("1000", "12.5") == "$12,500.00"
        assert format_calculated_funding("1234.5", "1") == "$1,234.50"
        assert format_calculated_funding("", "") == "$0.00"


def test_share_request_amount_uses_whole_shares():
    assert share_request_amount("10.7", 5) == 50.0
    assert share_request_amount("", 5) == 0.0


def test_minimum_investment():
    assert minimum_investment({"share_value": 10, "minimum_shares_per_request": 5}) == 50.0
    assert minimum_investment({"share_value": 10}) == 10.0
    assert minimum_investment({}) is None


class TestValidateShareRequest:
    business = {"share_value": 10, "minimum_shares_per_request": 5, "remaining_shares": 100}

    def test_ok(self):
        assert validate_share_request(self.business, "50") is None

    @pytest.mark.parametrize("shares", ["", "0", "abc"])
    def test_missing(self, shares):
        assert validate_share_request(self.business, shares) == "Please enter the number of shares"

    def test_below_minimum(self):
        assert validate_share_request(self.business, "4") == "Minimum shares required: 5"

    def test_above_remaining(self):
        assert validate_share_request(self.business, "101") == "Only 100 shares available"

    def test_minimum_defaults_to_one(self):
        assert validate_share_request({"remaining_shares": 3}, "1") is None


def test_total_business_funding():
    rows = [{"total_shares": 100, "share_value": 2}, {"total_shares": 10}, {}]
    assert total_business_funding(rows) == 200.0
