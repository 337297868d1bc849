"""
Prometheus instrumentation for the CMS API.

HTTP metrics are labelled with the route template (``/api/v1/posts/{post_id}``)
rather than the concrete path so label cardinality stays bounded.

Exposed series:
    cms_http_request_duration_seconds   histogram, method/route/status
    cms_http_requests_total             counter, method/route/status
    cms_http_requests_in_progress       gauge, method/route
    cms_login_attempts_total            counter, outcome
    cms_uploads_total                   counter, file_type
    cms_scheduled_posts_published_total counter

Scrape endpoint:
    GET /metrics
"""

import logging
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

logger = logging.getLogger(__name__)

METRICS_PATH = "/metrics"
UNMATCHED_ROUTE = "unmatched"

HTTP_LABELS = ["method", "route", "status"]

REQUEST_DURATION = Histogram(
    "cms_http_request_duration_seconds",
    "Time spent handling API requests",
    HTTP_LABELS,
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)
REQUESTS = Counter("cms_http_requests_total", "API requests by route and status", HTTP_LABELS)
IN_PROGRESS = Gauge("cms_http_requests_in_progress", "API requests currently being handled", ["method", "route"])

LOGIN_ATTEMPTS = Counter("cms_login_attempts_total", "Login attempts", ["outcome"])
UPLOADS = Counter("cms_uploads_total", "Uploaded media files", ["file_type"])
SCHEDULED_PUBLISHES = Counter(
    "cms_scheduled_posts_published_total",
    "Scheduled posts published by the background job",
)


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    if route is not None:
        return getattr(route, "path_format", None) or getattr(route, "path", UNMATCHED_ROUTE)
    for candidate in request.app.router.routes:
        match, _ = candidate.matches(request.scope)
        if match is Match.FULL:
            return getattr(candidate, "path_format", None) or getattr(candidate, "path", UNMATCHED_ROUTE)
    return UNMATCHED_ROUTE


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == METRICS_PATH:
            return await call_next(request)

        method = request.method
        in_progress = IN_PROGRESS.labels(method=method, route=route_template(request))
        in_progress.inc()

        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            # the router records the matched route on the scope once it has dispatched
            labels = {"method": method, "route": route_template(request), "status": str(status)}
            REQUEST_DURATION.labels(**labels).observe(time.perf_counter() - started)
            REQUESTS.labels(**labels).inc()
            in_progress.dec()


async def metrics_endpoint(request: Request) -> Response:
    return PlainTextResponse(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


def setup_metrics(app: FastAPI) -> None:
    app.add_middleware(PrometheusMiddleware)
    app.add_route(METRICS_PATH, metrics_endpoint, methods=["GET"], include_in_schema=False)
    logger.debug("Prometheus instrumentation enabled")


def record_login(success: bool) -> None:
    LOGIN_ATTEMPTS.labels(outcome="success" if success else "failure").inc()


def record_upload(file_type: str) -> None:
    UPLOADS.labels(file_type=file_type).inc()


def record_scheduled_publishes(count: int) -> None:
    if count > 0:
        SCHEDULED_PUBLISHES.inc(count)
