"""Sliding-window rate limiting for API endpoints, keyed by client IP."""

import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Optional

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse

from services.cache_service import CacheService, cache_service

logger = structlog.get_logger()


@dataclass
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_time: int

    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_time),
        }


class RateLimiter:
    """Counts request timestamps per key inside a trailing window."""

    def __init__(self, cache: CacheService = cache_service):
        self.cache = cache

    async def check(self, key: str, limit: int, window_seconds: int) -> RateLimitDecision:
        now = time.time()
        window_key = f"rate_limit:sliding:{key}"

        window = [stamp for stamp in await self.cache.get(window_key, []) if stamp > now - window_seconds]
        allowed = len(window) < limit
        if allowed:
            window.append(now)
            await self.cache.set(window_key, window, window_seconds + 60)

        reset_time = int(window[0] + window_seconds) if window else int(now + window_seconds)
        return RateLimitDecision(
            allowed=allowed,
            limit=limit,
            remaining=max(0, limit - len(window)),
            reset_time=reset_time,
        )


def _find_request(args, kwargs) -> Optional[Request]:
    for value in list(args) + list(kwargs.values()):
        if isinstance(value, Request):
            return value
    return None


def _find_response(kwargs) -> Optional[Response]:
    for value in kwargs.values():
        if isinstance(value, Response):
            return value
    return None


def rate_limit(limit: int, window_seconds: int, key_func: Optional[Callable[[Request], str]] = None):
    """
    Decorator for rate limiting API endpoints.

    The endpoint must accept a ``Request`` parameter. Requests over the limit get
    a 429 ``{error}`` body with ``X-RateLimit-*`` and ``Retry-After`` headers.
    Allowed requests carry the ``X-RateLimit-*`` headers too: on the returned
    ``Response``, or on the endpoint's injected ``response`` parameter when it
    returns a model.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request = _find_request(args, kwargs)
            if request is None:
                return await func(*args, **kwargs)

            if key_func:
                key = key_func(request)
            else:
                client_ip = request.client.host if request.client else "unknown"
                key = f"ip:{client_ip}:{func.__name__}"

            decision = await rate_limiter.check(key, limit, window_seconds)
            if not decision.allowed:
                logger.warning("Rate limit exceeded", key=key, limit=limit)
                headers = decision.headers()
                headers["Retry-After"] = str(max(1, decision.reset_time - int(time.time())))
                return JSONResponse(status_code=429, content={"error": "Rate limit exceeded"}, headers=headers)

            result = await func(*args, **kwargs)
            target = result if isinstance(result, Response) else _find_response(kwargs)
            if target is not None:
                target.headers.update(decision.headers())
            return result

        return wrapper
    return decorator


# Rate limiting configurations for different endpoint types
RATE_LIMIT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "api_read": {"limit": 100, "window_seconds": 60},  # 100 per minute
    "api_write": {"limit": 20, "window_seconds": 60},  # 20 per minute
    "public": {"limit": 1000, "window_seconds": 3600},  # 1000 per hour
}

# Global rate limiter instance
rate_limiter = RateLimiter()
