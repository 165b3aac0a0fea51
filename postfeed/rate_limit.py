"""Per-client request limiting shared by every API route."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from postfeed.config import get_settings

settings = get_settings()

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def current_rate_limit() -> str:
    """Limit string such as ``100/15 minutes``, read on every request."""
    return get_settings().rate_limit


# One bucket per client address across all decorated routes
api_rate_limit = limiter.shared_limit(current_rate_limit, scope="api")
