"""
Middleware Package

Contains FastAPI middleware for:
- Prometheus metrics collection
- Redis-backed rate limiting
"""

from cms.middleware.metrics import PrometheusMiddleware, setup_metrics
from cms.middleware.rate_limit import (
    RateLimitMiddleware,
    login_rate_limit,
    password_reset_rate_limit,
)

__all__ = [
    "PrometheusMiddleware",
    "setup_metrics",
    "RateLimitMiddleware",
    "login_rate_limit",
    "password_reset_rate_limit",
]
