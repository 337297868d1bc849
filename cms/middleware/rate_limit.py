"""
Rate limiting for the HTTP layer.

``RateLimitMiddleware`` applies the general per-client limit to every
``/api/`` request. ``rate_limit(scope, setting)`` builds a route dependency
for the stricter login and forgot-password limits; a successful login is
handed back with ``release_rate_limit`` so only failures count.
"""

import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from cms.config import get_settings
from cms.errors import TooManyRequests, error_response
from cms.services.rate_limit import RateLimitResult, get_rate_limiter

logger = logging.getLogger(__name__)


def client_identifier(request: Request) -> str:
    """
    Key for per-client limits.

    ``X-Forwarded-For`` is only believed when the socket peer is one of
    ``settings.trusted_proxies``; the rightmost hop that is not itself a
    trusted proxy is the client.
    """
    peer = request.client.host if request.client else "unknown"
    trusted = get_settings().trusted_proxies
    forwarded = request.headers.get("x-forwarded-for")
    if not forwarded or peer not in trusted:
        return peer

    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    for hop in reversed(hops):
        if hop not in trusted:
            return hop
    return hops[0] if hops else peer


def _headers(result: RateLimitResult) -> dict:
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "Retry-After": str(result.reset_after),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: FastAPI, prefix: str = "/api/"):
        super().__init__(app)
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = get_settings()
        if not settings.rate_limit_enabled or not request.url.path.startswith(self.prefix):
            return await call_next(request)

        limiter = await get_rate_limiter()
        result = await limiter.hit(
            "api",
            client_identifier(request),
            settings.rate_limit_max_requests,
            settings.rate_limit_window_seconds,
        )
        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {client_identifier(request)} on {request.url.path}")
            response = error_response(429, TooManyRequests.code, TooManyRequests.default_message)
            response.headers.update(_headers(result))
            return response

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        return response


def rate_limit(
    scope: str,
    limit_setting: str,
    message: str,
    window_setting: str = "rate_limit_window_seconds",
) -> Callable:
    """
    Route dependency enforcing ``settings.<limit_setting>`` requests per
    ``settings.<window_setting>`` seconds for ``scope``.

    The counted hit is kept on ``request.state`` so the route can hand it
    back with ``release_rate_limit``.
    """

    async def checker(request: Request) -> None:
        settings = get_settings()
        if not settings.rate_limit_enabled:
            return
        limiter = await get_rate_limiter()
        result = await limiter.hit(
            scope,
            client_identifier(request),
            getattr(settings, limit_setting),
            getattr(settings, window_setting),
        )
        if not result.allowed:
            logger.warning(f"{scope} rate limit exceeded for {client_identifier(request)}")
            raise TooManyRequests(message)
        hits = getattr(request.state, "rate_limit_hits", {})
        hits[scope] = result
        request.state.rate_limit_hits = hits

    return checker


async def release_rate_limit(request: Request, scope: str) -> None:
    """Uncount the request recorded by the ``scope`` dependency, if any."""
    result = getattr(request.state, "rate_limit_hits", {}).pop(scope, None)
    if result is None:
        return
    limiter = await get_rate_limiter()
    await limiter.release(result)


login_rate_limit = rate_limit(
    "login",
    "login_rate_limit_max",
    "Too many login attempts, please try again after 15 minutes",
)
password_reset_rate_limit = rate_limit(
    "password-reset",
    "password_reset_rate_limit_max",
    "Too many password reset requests, please try again later",
    window_setting="password_reset_window_seconds",
)
