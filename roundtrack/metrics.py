from __future__ import annotations

import os
import time
from typing import Any, Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

REQUESTS = Counter(
    "requests_total", "HTTP requests", ["path", "method", "status"], registry=REGISTRY
)
LATENCY = Histogram(
    "request_latency_seconds",
    "Request latency (seconds)",
    ["path", "method"],
    registry=REGISTRY,
)

FIXES_PROCESSED = Counter(
    "roundtrack_fixes_processed_total",
    "Location fixes processed by the tracker",
    ["outcome"],
    registry=REGISTRY,
)
SHOTS_DETECTED = Counter(
    "roundtrack_shots_detected_total",
    "Shot events detected from GPS movement",
    registry=REGISTRY,
)
HOLE_TRANSITIONS = Counter(
    "roundtrack_hole_transitions_total",
    "Hole changes applied to active rounds",
    ["source"],
    registry=REGISTRY,
)
SCORE_SUGGESTIONS = Counter(
    "roundtrack_score_suggestions_total",
    "Score suggestions produced",
    registry=REGISTRY,
)
SCORE_CONFIRMATIONS_REQUIRED = Counter(
    "roundtrack_score_confirmation_required_total",
    "Score suggestions flagged for golfer confirmation",
    registry=REGISTRY,
)
FIX_LATENCY = Histogram(
    "roundtrack_fix_latency_ms",
    "Time spent processing a single fix (milliseconds)",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 50.0, 100.0),
    registry=REGISTRY,
)

BUILD_VERSION = os.getenv("BUILD_VERSION", "dev")
GIT_SHA = os.getenv("GIT_SHA", "unknown")


def observe_fix(outcome: str, duration_ms: float) -> None:
    """Record one processed fix and how long the pipeline took."""

    FIXES_PROCESSED.labels(outcome=outcome).inc()
    FIX_LATENCY.observe(max(0.0, duration_ms))


def observe_score_suggestion(requires_confirmation: bool) -> None:
    SCORE_SUGGESTIONS.inc()
    if requires_confirmation:
        SCORE_CONFIRMATIONS_REQUIRED.inc()


async def metrics_app(_req: Request | None = None) -> Response:
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


class MetricsMiddleware:
    def __init__(self, app: Callable[..., Awaitable[Any]]):
        self.app = app

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Awaitable[Any]],
        send: Callable[..., Awaitable[Any]],
    ) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "")
        start = time.perf_counter()
        status_code = 500

        async def _send(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = message.get("status", 200)
            await send(message)

        try:
            await self.app(scope, receive, _send)
        finally:
            duration = time.perf_counter() - start
            LATENCY.labels(path=path, method=method).observe(duration)
            REQUESTS.labels(path=path, method=method, status=str(status_code)).inc()


__all__ = [
    "BUILD_VERSION",
    "FIXES_PROCESSED",
    "FIX_LATENCY",
    "GIT_SHA",
    "HOLE_TRANSITIONS",
    "LATENCY",
    "REGISTRY",
    "REQUESTS",
    "SCORE_CONFIRMATIONS_REQUIRED",
    "SCORE_SUGGESTIONS",
    "SHOTS_DETECTED",
    "MetricsMiddleware",
    "metrics_app",
    "observe_fix",
    "observe_score_suggestion",
]
