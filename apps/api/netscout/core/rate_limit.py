"""
rate_limit.py — Global rate limiter instance.

Uses slowapi (a Starlette-compatible wrapper around the `limits` library).
Requests are keyed by client IP address. Only the scan endpoint is limited,
since it is the one that spends a Gemini call.

Usage in routes:
    from fastapi import Request
    from netscout.core.rate_limit import limiter

    @router.post("")
    @limiter.limit(settings.scan_rate_limit)
    async def my_endpoint(request: Request, payload: MyRequest):
        ...
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
