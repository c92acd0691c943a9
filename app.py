"""
app.py: FastAPI application factory.

This is the ASGI application object imported by uvicorn. It builds the
optimization service once and exposes it to the routers through app.state.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from backend.controllers.optimization_controller import router as optimization_router
from backend.services.generation_service import PassengerGenerator
from backend.services.optimizer_service import FlightOptimizationService
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Each request gets its own knapsack table inside the service call, so a
    single service instance is shared by all requests.
    """
    settings = settings or get_settings()

    optimization_service = FlightOptimizationService(
        settings=settings,
        generator=PassengerGenerator.seeded(settings.generator_random_seed),
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
    )
    app.include_router(optimization_router)
    app.state.settings = settings
    app.state.optimization_service = optimization_service

    logger.info(
        "Application created | default_capacity=%s | max_table_cells=%s",
        settings.default_seat_capacity,
        settings.optimizer_max_table_cells,
    )
    return app


# Module-level app object for uvicorn
app = create_app()
