"""FastAPI application factory for the routing API."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.config import RoutingConfigManager, build_router
from ..routing.router import IntelligentRouter
from .config import settings
from .routes.health import router as health_router
from .routes.routing import router as routing_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting GlassWallet routing API with {len(app.state.router.registry)} agents")
    yield
    logger.info("GlassWallet routing API shutting down")


def create_app(router: Optional[IntelligentRouter] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The router is built from the routing config file unless one is passed in.
    """
    app = FastAPI(
        title="GlassWallet Routing API",
        description="Lead-to-agent routing and agent availability management",
        version="1.0.0",
        lifespan=lifespan,
    )

    if router is None:
        config = RoutingConfigManager(Path(settings.routing_config_path)).config
        router = build_router(config)
    app.state.router = router

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(routing_router)

    return app


# Module-level app instance for uvicorn
app = create_app()
