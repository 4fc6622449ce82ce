"""Main FastAPI application: dashboard, JSON API and the check scheduler."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, settings as default_settings
from .dependencies import MonitorServices, build_services
from .routers import dashboard_router, status_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - load history, run the scheduler, final save."""
    services: MonitorServices = app.state.services
    settings = services.settings

    services.store.load()
    logger.info(f"Health Monitor running on http://{settings.host}:{settings.port}")
    logger.info(f"Monitoring: {settings.api_base_url}")
    logger.info(f"Polling every {settings.poll_interval_seconds:g}s")
    logger.info(f"Alert webhook: {settings.alert_webhook_url or '(not configured)'}")

    if app.state.start_scheduler:
        services.scheduler.start()

    yield

    services.scheduler.stop()
    services.store.persist()
    logger.info("Shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[MonitorServices] = None,
    start_scheduler: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings
    app = FastAPI(
        title="Bounty Board API Health Monitor",
        description="Uptime, response time and error rate history for the Bounty Board API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.services = services or build_services(settings)
    app.state.start_scheduler = start_scheduler

    # CORS for external consumers of the JSON API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(dashboard_router)
    app.include_router(status_router)

    return app


# Create the application instance
app = create_app()


def run():
    """Console entry point."""
    import uvicorn

    uvicorn.run(app, host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
