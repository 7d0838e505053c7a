"""Application entrypoint for the AI readiness service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from ai_readiness.core.config import settings
from ai_readiness.routers import ingest, quests, readiness
from ai_readiness.telemetry import configure_metrics, shutdown_metrics, collect_prometheus_metrics
from ai_readiness.dependencies import get_event_sink


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_metrics()
    yield
    get_event_sink().close()
    shutdown_metrics()


def create_app() -> FastAPI:
    app = FastAPI(
        title="AI Readiness Quests",
        description="Tracks AI-readiness quests per repository from scan reports and manual approvals.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(ingest.router)
    app.include_router(quests.router)
    app.include_router(readiness.router)

    @app.get("/healthz", tags=["health"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    if settings.otel_exporter.lower().strip() == "prometheus":

        @app.get("/metrics", tags=["metrics"])
        def metrics_endpoint() -> PlainTextResponse:
            payload, content_type = collect_prometheus_metrics()
            return PlainTextResponse(payload, media_type=content_type)

    return app


app = create_app()
