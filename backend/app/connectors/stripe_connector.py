"""
Stripe API Connector
Creates payment intents through the Stripe REST API
"""
import logging
from typing import Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import PaymentProviderError

logger = logging.getLogger(__name__)


class StripeConnector:
    """
    Connector for the Stripe REST API

    Handles:
    - Payment intent creation (amount in the currency's smallest unit)

    Stripe expects form-encoded bodies; metadata is sent as metadata[key]=value.
    """

    def __init__(self, secret_key: str = None, base_url: str = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize Stripe connector

        Args:
            secret_key: Stripe secret key (defaults to STRIPE_SECRET_KEY)
            base_url: API base URL (defaults to STRIPE_API_BASE)
            transport: Optional httpx transport, used by tests
        """
        self.secret_key = secret_key or settings.STRIPE_SECRET_KEY
        if not self.secret_key:
            raise ValueError("Stripe credentials not configured. Set STRIPE_SECRET_KEY")

        self.base_url = (base_url or settings.STRIPE_API_BASE).rstrip("/")
        self._transport = transport

    async def create_payment_intent(self, amount: int, currency: str,
                                    metadata: Optional[Dict[str, str]] = None) -> Dict:
        """
        Create a payment intent

        Args:
            amount: Amount in the smallest currency unit (cents)
            currency: ISO currency code (cad, usd, ...)
            metadata: String key/values attached to the intent

        Returns:
            Dict with id and client_secret

        Raises:
            PaymentProviderError: Stripe rejected the request or was unreachable
        """
        if amount <= 0:
            raise PaymentProviderError("Payment amount must be positive")

        data = {
            'amount': str(amount),
            'currency': currency.lower(),
        }
        for key, value in (metadata or {}).items():
            data[f'metadata[{key}]'] = str(value)

        headers = {
            'Authorization': f'Bearer {self.secret_key}',
            'Accept': 'application/json',
        }

        async with httpx.AsyncClient(transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/v1/payment_intents",
                    data=data,
                    headers=headers,
                    timeout=30.0,
                )
                response.raise_for_status()
                payload = response.json()

            except httpx.HTTPStatusError as e:
                logger.error(f"Stripe request failed: {e.response.status_code} - {e.response.text}")
                raise PaymentProviderError(f"Payment provider rejected the request ({e.response.status_code})")
            except httpx.HTTPError as e:
                logger.error(f"Stripe request error: {e}")
                raise PaymentProviderError("Payment provider unreachable")

        logger.info(f"Payment intent {payload.get('id')} created for {amount} {currency}")
        return {
            'id': payload.get('id'),
            'client_secret': payload.get('client_secret'),
        }
