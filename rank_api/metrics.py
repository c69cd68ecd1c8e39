"""
Prometheus metrics for the rank API.

Metrics live on the default prometheus_client registry and are exported by a
separate HTTP server (port 9000 by default) so scraping never competes with
API traffic.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

HTTP_REQUESTS = Counter(
    "rank_api_http_requests_total",
    "HTTP requests handled, by method, route template and status code.",
    ["method", "route", "status"],
)
HTTP_REQUEST_DURATION = Histogram(
    "rank_api_http_request_duration_seconds",
    "Time spent handling HTTP requests.",
    ["method", "route"],
)
ITEMS_CREATED = Counter(
    "rank_api_items_created_total",
    "Items registered for ranking.",
)
SCORES_RECORDED = Counter(
    "rank_api_scores_recorded_total",
    "Scores folded into an item's average.",
)
ITEM_LOOKUPS = Counter(
    "rank_api_item_lookups_total",
    "Item reads, by result (found or missing).",
    ["result"],
)

UNMATCHED_ROUTE = "unmatched"


def _route_template(request: Request) -> str:
    # Use the template, not the raw path, to keep label cardinality bounded.
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


def install_metrics_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def record_request_metrics(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            route = _route_template(request)
            HTTP_REQUESTS.labels(request.method, route, str(status_code)).inc()
            HTTP_REQUEST_DURATION.labels(request.method, route).observe(
                time.perf_counter() - started
            )


def start_metrics_server(port: int, addr: str = "0.0.0.0") -> None:
    """Serve the Prometheus exposition format from a background thread."""
    start_http_server(port, addr=addr)
    logger.info("Metrics available at http://%s:%d/", addr, port)
