"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from backend.services.optimizer_service import FlightOptimizationService
from backend.utils.config import get_settings


def get_optimization_service(request: Request) -> FlightOptimizationService:
    service = getattr(request.app.state, "optimization_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Optimization service is not initialized",
        )
    return service


def get_app_identity() -> dict[str, str]:
    settings = get_settings()
    return {"app_name": settings.app_name, "app_version": settings.app_version}
