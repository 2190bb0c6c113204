from __future__ import annotations

from fastapi import APIRouter, FastAPI, Request

from roundtrack import __version__
from roundtrack.api.health import health as _health_handler
from roundtrack.api.routers.geo import router as geo_router
from roundtrack.api.routers.rounds import router as rounds_router
from roundtrack.metrics import MetricsMiddleware, metrics_app

app = FastAPI(title="RoundTrack", version=__version__)
app.add_middleware(MetricsMiddleware)

app.add_api_route("/health", _health_handler, methods=["GET"])
app.include_router(geo_router)
app.include_router(rounds_router)

_metrics_router = APIRouter()


@_metrics_router.get("/metrics", include_in_schema=False)
async def _metrics_endpoint(request: Request):
    return await metrics_app(request)


app.include_router(_metrics_router)


__all__ = ["app"]
