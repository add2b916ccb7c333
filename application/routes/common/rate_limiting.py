"""
Rate limit key for Zak Chat routes.

Limits are counted per client address. Authenticated and guest callers share
the bucket of the address they call from, so minting fresh guest tokens does
not reset a limit.
"""

from quart import request


async def default_rate_limit_key() -> str:
    """
    Key a rate limit bucket by client IP address.

    Returns:
        str: Client IP address or "unknown" if not available

    Example:
        >>> @rate_limit(RATE_LIMIT_STANDARD, timedelta(minutes=1), key_function=default_rate_limit_key)
        >>> async def list_conversations():
        >>>     pass
    """
    return request.remote_addr or "unknown"
