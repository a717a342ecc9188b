"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Create limiter instance
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window",
)

# Specific rate limits for different endpoint types
RATE_LIMITS = {
    # Authentication - stricter limits to prevent brute force
    "auth_login": "5/minute",
    "auth_register": "3/minute",
    "auth_refresh": "30/minute",

    # Heavy operations
    "price_refresh": "10/minute",

    # Quote proxy calls (Alpha Vantage free tier is 5 requests/minute)
    "price_fetch": "30/minute",
}
