"""
Fee Domain Models

Delivery options, the configurable fee schedule and the
fee breakdown attached to every order.
"""
from decimal import Decimal
from enum import Enum
from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field


class DeliveryOption(str, Enum):
    """How an order reaches the consumer"""
    PICKUP = "pickup"
    HOME = "home"
    FARMERS_MARKET = "farmers-market"


class FeeSchedule(BaseModel):
    """
    Rates and flat fees used to price an order

    Fields:
        platform_fee_rate: Marketplace commission on the subtotal
        processing_fee_rate: Payment processor rate on subtotal + delivery
        processing_fixed_fee: Payment processor flat fee per order
        delivery_fees: Flat fee per delivery option
        strict_delivery_options: Reject unknown delivery options instead of
            charging no delivery fee
    """

    platform_fee_rate: Decimal = Field(Decimal("0.05"), ge=0)
    processing_fee_rate: Decimal = Field(Decimal("0.029"), ge=0)
    processing_fixed_fee: Decimal = Field(Decimal("0.30"), ge=0)
    delivery_fees: Dict[DeliveryOption, Decimal] = Field(
        default_factory=lambda: {
            DeliveryOption.PICKUP: Decimal("0.00"),
            DeliveryOption.HOME: Decimal("4.99"),
            DeliveryOption.FARMERS_MARKET: Decimal("1.99"),
        }
    )
    strict_delivery_options: bool = False

    model_config = ConfigDict(frozen=True)


class FeeCalculation(BaseModel):
    """
    Fee breakdown for a subtotal and delivery option

    Every component is already rounded to cents and
    total == subtotal + platform_fee + processing_fee + delivery_fee.
    """

    subtotal: Decimal
    delivery_fee: Decimal
    platform_fee: Decimal
    processing_fee: Decimal
    total: Decimal

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        return {field: float(value) for field, value in self.model_dump().items()}


class FeeRequest(BaseModel):
    """Body of POST /orders/calculate-fees"""
    # Strings are parsed by the fee calculator
    subtotal: Union[Decimal, str]
    delivery_option: str = DeliveryOption.PICKUP.value
