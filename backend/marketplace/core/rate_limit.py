"""Rate limiting configuration for the marketplace API."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from marketplace.core.config import get_settings

# Create limiter using client IP address as the key
limiter = Limiter(key_func=get_remote_address)


def api_rate_limit() -> str:
    """Limit applied to write endpoints, read from settings on every request."""
    return get_settings().rate_limit_api
