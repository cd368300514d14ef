"""Main application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import uvicorn
from fastapi import FastAPI

from .api.router import consistency_error_handler, rejection_handler, router
from .config import AppConfig, get_config_path, load_config
from .errors import LedgerConsistencyError, ParkingRejection
from .service import ParkingService
from .state.models import LotSettings
from .state.settings import checked_hourly_rate
from .storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def read_config() -> AppConfig:
    """Load the YAML config if present, otherwise use defaults."""
    config_path = get_config_path()
    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}, using defaults")
        return AppConfig()

    config = load_config(config_path)
    logger.info(f"Loaded configuration from {config_path}")
    return config


def open_service(config: AppConfig) -> ParkingService:
    """Load saved lot state, seeding a fresh lot from config when none exists."""
    store = SnapshotStore(config.storage.path)
    defaults = LotSettings(
        slot_count=config.lot.slot_count,
        hourly_rate=checked_hourly_rate(config.lot.hourly_rate),
    )
    return ParkingService.open(store, defaults=defaults)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Parking Manager...")

    if app.state.config is None:
        app.state.config = read_config()

    if app.state.service is None:
        # A snapshot that can't be read stops startup rather than being overwritten
        app.state.service = open_service(app.state.config)

    stats = app.state.service.statistics()
    logger.info(
        f"Parking Manager ready: {stats.total_slots} slots, "
        f"{stats.occupied_count} occupied, {stats.completed_sessions} in history"
    )

    yield  # Application runs here

    logger.info("Shutdown complete")


def create_app(
    config: Optional[AppConfig] = None,
    service: Optional[ParkingService] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Application config; read from config/config.yaml at startup if None
        service: Pre-built service; opened from the configured snapshot at startup if None
    """
    app = FastAPI(
        title="Parking Manager",
        description="API for managing parking slots, sessions and fees",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.service = service
    app.state.started_at = datetime.now()

    app.add_exception_handler(ParkingRejection, rejection_handler)
    app.add_exception_handler(LedgerConsistencyError, consistency_error_handler)
    app.include_router(router, prefix="/api/v1")

    return app


def main():
    """Run the application."""
    configure_logging()
    config = read_config()

    uvicorn.run(
        create_app(config=config),
        host=config.api.host,
        port=config.api.port,
    )


if __name__ == "__main__":
    main()
