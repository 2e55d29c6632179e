"""
API package.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from omegaconf import DictConfig

from ...common.config import ConfigManager
from ...common.logging import setup_logger, set_level
from ...predictions.application.feeds import build_feed
from ...predictions.domain.protocols import PredictionFeed
from ...realtime.broadcast.realtime_broadcaster import RealtimeBroadcaster
from ...reports.application.report_store import ReportStore
from .dependencies import Services
from .errors import register_error_handlers
from .routes import predictions, reports, streaming

logger = setup_logger("riesgovial.api")

def create_app(
    cfg: Optional[DictConfig] = None,
    store: Optional[ReportStore] = None,
    feed: Optional[PredictionFeed] = None,
    broadcaster: Optional[RealtimeBroadcaster] = None
) -> FastAPI:
    """
    Builds the application. Services not passed in are created from the
    configuration, which defaults to the typed schema defaults.
    """
    cfg = ConfigManager().merge(cfg)
    set_level(cfg.log_level)

    if broadcaster is None:
        broadcaster = RealtimeBroadcaster(queue_size=cfg.streaming.queue_size)
    if store is None:
        store = ReportStore(broadcaster, max_reports=cfg.reports.max_reports)
    if feed is None:
        feed = build_feed(cfg.feed, broadcaster)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Prediction feed mode: {feed.mode}")
        await feed.start()
        try:
            yield
        finally:
            await feed.stop()

    app = FastAPI(title="RiesgoVial API", lifespan=lifespan)
    app.state.services = Services(
        store=store,
        feed=feed,
        broadcaster=broadcaster,
        ping_seconds=cfg.streaming.ping_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.server.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(predictions.router, tags=["predictions"])
    app.include_router(reports.router, tags=["reports"])
    app.include_router(streaming.router, tags=["streaming"])

    return app
