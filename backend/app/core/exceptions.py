"""
Domain exceptions for the FreshLink backend

Services and repositories raise these; the API layer maps them
to HTTP status codes via STATUS_CODES.
"""


class MarketplaceError(Exception):
    """Base class for all marketplace domain errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(MarketplaceError):
    """Rejected client input (negative subtotal, malformed coordinates, ...)"""


class NotFound(MarketplaceError):
    """Unknown order, product, producer or cart item"""


class Unauthorized(MarketplaceError):
    """Operation on a resource owned by another user"""


class PaymentProviderError(MarketplaceError):
    """Payment provider rejected or failed the request"""


STATUS_CODES = {
    InvalidInput: 400,
    Unauthorized: 403,
    NotFound: 404,
    PaymentProviderError: 502,
}


def status_code_for(error: MarketplaceError) -> int:
    for error_type, code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return code
    return 500
