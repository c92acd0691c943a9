"""HTTP controller layer for seat allocation optimization."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from backend.controllers.dependencies import get_app_identity, get_optimization_service
from backend.domain.constraints import FamilyCompositionError
from backend.domain.models import AllocationResult, Passenger, PassengerType
from backend.services.assignment_service import UnknownFamilyError, assemble_families
from backend.services.generation_service import GenerationError
from backend.services.optimizer_service import (
    AllocationValidationError,
    FlightOptimizationService,
)
from backend.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["optimization"])


class PassengerPayload(BaseModel):
    """Input DTO for one passenger on the candidate list."""

    passenger_id: int = Field(gt=0)
    age: int = Field(ge=0)
    passenger_type: PassengerType
    family: Optional[str] = Field(default=None, max_length=64)

    def to_domain(self) -> Passenger:
        return Passenger(
            passenger_id=self.passenger_id,
            age=self.age,
            passenger_type=self.passenger_type,
            family=self.family or None,
        )


class OptimizeRequest(BaseModel):
    capacity: int = Field(ge=0)
    passengers: list[PassengerPayload]


class GeneratedOptimizeRequest(BaseModel):
    passenger_count: int = Field(gt=0)
    capacity: int = Field(ge=0)
    seed: Optional[int] = None


class AllocationUnitResponse(BaseModel):
    cost: int = Field(ge=0)
    seats: int = Field(ge=0)
    family: Optional[str] = None
    passenger_ids: list[int]


class OptimizeResponse(BaseModel):
    units: list[AllocationUnitResponse]
    total_revenue: int = Field(ge=0)
    seats_used: int = Field(ge=0)
    capacity: int = Field(ge=0)


class GeneratedOptimizeResponse(OptimizeResponse):
    generated_passenger_count: int = Field(ge=0)
    generated_family_count: int = Field(ge=0)


class HealthResponse(BaseModel):
    status: str
    app_name: str
    app_version: str


def _to_response_fields(result: AllocationResult) -> dict[str, object]:
    return {
        "units": [
            AllocationUnitResponse(
                cost=unit.cost,
                seats=unit.seats,
                family=unit.family,
                passenger_ids=[member.passenger_id for member in unit.members],
            )
            for unit in result.units
        ],
        "total_revenue": result.total_cost,
        "seats_used": result.total_seats,
        "capacity": result.capacity,
    }


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", **get_app_identity())


@router.post(
    "/optimize",
    response_model=OptimizeResponse,
    status_code=status.HTTP_200_OK,
)
async def optimize(
    payload: OptimizeRequest,
    service: FlightOptimizationService = Depends(get_optimization_service),
) -> OptimizeResponse:
    """Select the revenue-maximising passengers for the submitted candidate list."""
    try:
        passengers = [item.to_domain() for item in payload.passengers]
        families = assemble_families(passengers)
        result = service.optimize(
            passengers=passengers,
            families=families,
            capacity=payload.capacity,
        )
        return OptimizeResponse(**_to_response_fields(result))
    except FamilyCompositionError as exc:
        raise HTTPException(
            status_code=422,
            detail={"message": str(exc), "kind": exc.kind},
        ) from exc
    except (UnknownFamilyError, AllocationValidationError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected optimization failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to optimize seat allocation",
        ) from exc


@router.post(
    "/optimize/generated",
    response_model=GeneratedOptimizeResponse,
    status_code=status.HTTP_200_OK,
)
async def optimize_generated(
    payload: GeneratedOptimizeRequest,
    service: FlightOptimizationService = Depends(get_optimization_service),
) -> GeneratedOptimizeResponse:
    """Generate a synthetic passenger population and optimize it in one call."""
    try:
        flight = service.optimize_generated(
            passenger_count=payload.passenger_count,
            capacity=payload.capacity,
            seed=payload.seed,
        )
        return GeneratedOptimizeResponse(
            **_to_response_fields(flight.result),
            generated_passenger_count=len(flight.passengers),
            generated_family_count=len(flight.families),
        )
    except (GenerationError, AllocationValidationError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover
        logger.exception("Unexpected generated optimization failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to optimize generated flight",
        ) from exc
