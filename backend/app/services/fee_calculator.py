"""
Fee Calculator
Turns a subtotal and delivery option into a fee breakdown and total

All arithmetic is Decimal. Each fee is rounded half-up to cents on its own
and the total is the sum of the rounded parts, so
total == subtotal + platform_fee + processing_fee + delivery_fee exactly.
"""
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from app.core.exceptions import InvalidInput
from app.domain.fees import DeliveryOption, FeeCalculation, FeeSchedule

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

DEFAULT_SCHEDULE = FeeSchedule()


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """Parse an amount without going through binary floating point arithmetic"""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise InvalidInput(f"Invalid amount: {value!r}")
    return amount


def to_money(value: Union[Decimal, int, float, str]) -> Decimal:
    """Round an amount half-up to cents"""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def resolve_delivery_fee(delivery_option: Union[DeliveryOption, str, None],
                         schedule: FeeSchedule = DEFAULT_SCHEDULE) -> Decimal:
    """
    Look up the flat delivery fee for an option

    Unknown options cost nothing unless the schedule is strict.
    """
    try:
        option = DeliveryOption(delivery_option)
    except ValueError:
        if schedule.strict_delivery_options:
            raise InvalidInput(f"Unknown delivery option: {delivery_option!r}")
        logger.warning(f"Unknown delivery option {delivery_option!r}, charging no delivery fee")
        return Decimal("0.00")

    return to_money(schedule.delivery_fees.get(option, Decimal("0")))


def calculate_fees(subtotal: Union[Decimal, int, float, str],
                   delivery_option: Union[DeliveryOption, str, None] = DeliveryOption.PICKUP,
                   schedule: Optional[FeeSchedule] = None) -> FeeCalculation:
    """
    Price an order

    Args:
        subtotal: Sum of line totals, must be >= 0
        delivery_option: pickup, home or farmers-market
        schedule: Fee schedule (defaults to the standard marketplace rates)

    Returns:
        FeeCalculation with every component rounded to cents

    Raises:
        InvalidInput: subtotal is negative or not a number
    """
    schedule = schedule or DEFAULT_SCHEDULE

    if to_decimal(subtotal) < 0:
        raise InvalidInput("Subtotal cannot be negative")
    subtotal = to_money(subtotal)

    delivery_fee = resolve_delivery_fee(delivery_option, schedule)
    platform_fee = to_money(subtotal * schedule.platform_fee_rate)
    processing_fee = to_money(
        (subtotal + delivery_fee) * schedule.processing_fee_rate + schedule.processing_fixed_fee
    )
    total = subtotal + platform_fee + processing_fee + delivery_fee

    return FeeCalculation(
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        platform_fee=platform_fee,
        processing_fee=processing_fee,
        total=total,
    )
