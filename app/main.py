"""
Usage Analytics — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import DATA_PATH
from app.data.store import EventStore
from app.logger import configure_logging, get_logger
from app.api.router_meta import router as meta_router
from app.api.router_events import router as events_router
from app.api.router_trends import router as trends_router
from app.api.router_analytics import router as analytics_router

log = get_logger("main")


def create_app(data_path: Path | str | None = None) -> FastAPI:
    """Build the app. The event store is loaded once, before the first request."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        store = EventStore(data_path or DATA_PATH)
        # Source or header failures propagate and abort startup.
        report = store.load()
        app.state.store = store
        log.info(
            "usage analytics ready: %d events, %d companies, %s",
            report.rows_loaded, report.companies, store.date_range(),
        )
        yield

    app = FastAPI(
        title="Usage Analytics API",
        description="Product usage events: search, trends, rankings, export",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(events_router)
    app.include_router(trends_router)
    app.include_router(analytics_router)

    return app


app = create_app()
