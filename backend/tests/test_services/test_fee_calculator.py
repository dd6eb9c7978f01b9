"""
Unit tests for the fee calculator

Amounts are compared as Decimal so rounding mistakes of a single cent fail.
"""
import pytest
from decimal import Decimal

from app.core.exceptions import InvalidInput
from app.domain.fees import DeliveryOption, FeeSchedule
from app.services.fee_calculator import (
    calculate_fees, resolve_delivery_fee, to_money,
)


class TestCalculateFees:
    """Test calculate_fees with the default schedule"""

    def test_pickup_order(self):
        fees = calculate_fees(Decimal("100.00"), "pickup")

        assert fees.subtotal == Decimal("100.00")
        assert fees.delivery_fee == Decimal("0.00")
        assert fees.platform_fee == Decimal("5.00")
        assert fees.processing_fee == Decimal("3.20")
        assert fees.total == Decimal("108.20")

    def test_home_delivery_fee_is_included_in_processing_base(self):
        """Processing fee is charged on subtotal + delivery: (50 + 4.99) * 2.9% + 0.30"""
        fees = calculate_fees(Decimal("50.00"), "home")

        assert fees.delivery_fee == Decimal("4.99")
        assert fees.platform_fee == Decimal("2.50")
        assert fees.processing_fee == Decimal("1.89")
        assert fees.total == Decimal("59.38")

    def test_farmers_market_order(self):
        fees = calculate_fees("20", DeliveryOption.FARMERS_MARKET)

        assert fees.delivery_fee == Decimal("1.99")
        assert fees.platform_fee == Decimal("1.00")
        assert fees.processing_fee == Decimal("0.94")
        assert fees.total == Decimal("23.93")

    def test_zero_subtotal_still_pays_fixed_processing_fee(self):
        fees = calculate_fees(0, "pickup")

        assert fees.platform_fee == Decimal("0.00")
        assert fees.processing_fee == Decimal("0.30")
        assert fees.total == Decimal("0.30")

    def test_rounds_half_up(self):
        """10.10 * 5% = 0.505 must round to 0.51, not to the even 0.50"""
        fees = calculate_fees(Decimal("10.10"), "pickup")

        assert fees.platform_fee == Decimal("0.51")
        assert fees.processing_fee == Decimal("0.59")
        assert fees.total == Decimal("11.20")

    def test_float_input_is_not_subject_to_binary_error(self):
        fees = calculate_fees(0.1 + 0.2, "pickup")

        assert fees.subtotal == Decimal("0.30")

    @pytest.mark.parametrize("subtotal", ["0.01", "7.77", "19.99", "123.45", "1000"])
    @pytest.mark.parametrize("option", ["pickup", "home", "farmers-market"])
    def test_total_is_sum_of_rounded_components(self, subtotal, option):
        fees = calculate_fees(Decimal(subtotal), option)

        assert fees.total == fees.subtotal + fees.platform_fee + fees.processing_fee + fees.delivery_fee
        assert fees.total >= fees.subtotal
        for amount in (fees.platform_fee, fees.processing_fee, fees.delivery_fee, fees.total):
            assert amount == amount.quantize(Decimal("0.01"))

    @pytest.mark.parametrize("subtotal", [Decimal("-1"), Decimal("-0.004"), "-5"])
    def test_negative_subtotal_is_rejected(self, subtotal):
        with pytest.raises(InvalidInput):
            calculate_fees(subtotal, "pickup")

    @pytest.mark.parametrize("subtotal", ["abc", "NaN", "Infinity"])
    def test_non_numeric_subtotal_is_rejected(self, subtotal):
        with pytest.raises(InvalidInput):
            calculate_fees(subtotal, "pickup")

    def test_to_dict_returns_floats(self):
        data = calculate_fees(Decimal("100"), "pickup").to_dict()

        assert data == {
            'subtotal': 100.0,
            'delivery_fee': 0.0,
            'platform_fee': 5.0,
            'processing_fee': 3.2,
            'total': 108.2,
        }


class TestDeliveryOptions:
    """Test delivery fee lookup"""

    def test_unknown_option_charges_no_delivery_fee(self):
        fees = calculate_fees(Decimal("100"), "drone")

        assert fees.delivery_fee == Decimal("0.00")
        assert fees.total == Decimal("108.20")

    def test_missing_option_charges_no_delivery_fee(self):
        assert resolve_delivery_fee(None) == Decimal("0.00")

    def test_unknown_option_rejected_by_strict_schedule(self):
        schedule = FeeSchedule(strict_delivery_options=True)

        with pytest.raises(InvalidInput):
            calculate_fees(Decimal("100"), "drone", schedule)

    def test_known_option_accepted_by_strict_schedule(self):
        schedule = FeeSchedule(strict_delivery_options=True)

        assert resolve_delivery_fee("home", schedule) == Decimal("4.99")


class TestCustomSchedule:
    """Test that rates come from the schedule"""

    def test_custom_rates(self):
        schedule = FeeSchedule(
            platform_fee_rate=Decimal("0.10"),
            processing_fee_rate=Decimal("0"),
            processing_fixed_fee=Decimal("0"),
            delivery_fees={DeliveryOption.HOME: Decimal("10")},
        )

        fees = calculate_fees(Decimal("40"), "home", schedule)

        assert fees.platform_fee == Decimal("4.00")
        assert fees.processing_fee == Decimal("0.00")
        assert fees.delivery_fee == Decimal("10.00")
        assert fees.total == Decimal("54.00")

    def test_option_missing_from_schedule_costs_nothing(self):
        schedule = FeeSchedule(delivery_fees={DeliveryOption.HOME: Decimal("3")})

        assert resolve_delivery_fee("pickup", schedule) == Decimal("0.00")

    def test_settings_schedule_matches_default_rates(self):
        from app.core.config import Settings

        fees = calculate_fees(Decimal("50"), "home", Settings().fee_schedule())

        assert fees.total == Decimal("59.38")


class TestToMoney:

    def test_quantizes_to_cents(self):
        assert to_money("1.005") == Decimal("1.01")
        assert to_money(2) == Decimal("2.00")
