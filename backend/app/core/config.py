"""
Centralized application configuration
"""
from decimal import Decimal
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain.fees import DeliveryOption, FeeSchedule


class Settings(BaseSettings):
    """Application settings, loaded from the environment and .env"""

    # API Settings
    API_TITLE: str = "FreshLink API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Marketplace API connecting local food producers with consumers"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = ""

    # Auth (HS256 bearer tokens issued by the frontend session layer)
    AUTH_SECRET: str = ""

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000,http://localhost:5173"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Payments
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com"
    PAYMENT_CURRENCY: str = "cad"

    # Fee schedule
    PLATFORM_FEE_RATE: Decimal = Decimal("0.05")
    PROCESSING_FEE_RATE: Decimal = Decimal("0.029")
    PROCESSING_FIXED_FEE: Decimal = Decimal("0.30")
    DELIVERY_FEE_PICKUP: Decimal = Decimal("0.00")
    DELIVERY_FEE_HOME: Decimal = Decimal("4.99")
    DELIVERY_FEE_FARMERS_MARKET: Decimal = Decimal("1.99")
    # Unknown delivery options fall back to a zero fee unless this is enabled
    STRICT_DELIVERY_OPTIONS: bool = False

    # Search
    DEFAULT_NEARBY_RADIUS_KM: float = 10.0

    def fee_schedule(self) -> FeeSchedule:
        """Build the fee schedule used by the fee calculator"""
        return FeeSchedule(
            platform_fee_rate=self.PLATFORM_FEE_RATE,
            processing_fee_rate=self.PROCESSING_FEE_RATE,
            processing_fixed_fee=self.PROCESSING_FIXED_FEE,
            delivery_fees={
                DeliveryOption.PICKUP: self.DELIVERY_FEE_PICKUP,
                DeliveryOption.HOME: self.DELIVERY_FEE_HOME,
                DeliveryOption.FARMERS_MARKET: self.DELIVERY_FEE_FARMERS_MARKET,
            },
            strict_delivery_options=self.STRICT_DELIVERY_OPTIONS,
        )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
