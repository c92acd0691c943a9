"""Revenue-maximising seat allocation using an exact 0/1 knapsack table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from backend.domain.constraints import AllocationValidationError
from backend.domain.models import AllocationResult, AllocationUnit, Family, Passenger
from backend.services.assignment_service import form_units
from backend.services.generation_service import PassengerGenerator
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

_INT64_MAX = int(np.iinfo(np.int64).max)

__all__ = [
    "AllocationValidationError",
    "FlightOptimizationService",
    "GeneratedFlight",
    "build_value_table",
    "reconstruct_selection",
    "select_optimal",
]


def build_value_table(units: Sequence[AllocationUnit], capacity: int) -> np.ndarray:
    """Return ``best`` where ``best[i, c]`` is the top revenue from the first ``i`` units in ``c`` seats.

    Ties keep the value carried forward from the previous row, so the earlier
    unit wins when two choices are worth the same. Cells are ``int64`` unless
    the combined revenue of all units could overflow it, in which case they
    hold Python ints.
    """
    capacity = max(capacity, 0)
    dtype = np.int64 if sum(unit.cost for unit in units) <= _INT64_MAX else object
    table = np.zeros((len(units) + 1, capacity + 1), dtype=dtype)
    for row, unit in enumerate(units, start=1):
        previous = table[row - 1]
        current = table[row]
        current[:] = previous
        if unit.seats > capacity:
            continue
        candidate = previous[: capacity + 1 - unit.seats] + unit.cost
        np.maximum(previous[unit.seats :], candidate, out=current[unit.seats :])
    return table


def reconstruct_selection(
    units: Sequence[AllocationUnit],
    table: np.ndarray,
    capacity: int,
) -> list[AllocationUnit]:
    """Walk the table backwards and return the chosen units in input order."""
    selected: list[AllocationUnit] = []
    remaining = max(capacity, 0)
    for row in range(len(units), 0, -1):
        # nothing left to recover once the remaining value is zero
        if table[row, remaining] == 0:
            break
        if table[row, remaining] != table[row - 1, remaining]:
            unit = units[row - 1]
            selected.append(unit)
            remaining -= unit.seats
    selected.reverse()
    return selected


def select_optimal(units: Sequence[AllocationUnit], capacity: int) -> list[AllocationUnit]:
    """Pick the subsequence of ``units`` with maximal cost whose seats fit ``capacity``.

    A non-positive capacity or an empty unit list yields an empty selection.
    """
    if capacity <= 0 or not units:
        return []
    table = build_value_table(units, capacity)
    logger.debug(
        "Knapsack table built | rows=%s | columns=%s | best_value=%s",
        table.shape[0],
        table.shape[1],
        int(table[-1, capacity]),
    )
    return reconstruct_selection(units, table, capacity)


@dataclass(frozen=True)
class GeneratedFlight:
    passengers: list[Passenger]
    families: list[Family]
    result: AllocationResult


class FlightOptimizationService:
    """Orchestrates unit formation, the table-size guard and selection."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        generator: Optional[PassengerGenerator] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._generator = generator

    def _ensure_table_fits(self, unit_count: int, capacity: int) -> None:
        if capacity <= 0:
            return
        cells = (unit_count + 1) * (capacity + 1)
        if cells > self._settings.optimizer_max_table_cells:
            logger.warning(
                "Optimization rejected | units=%s | capacity=%s | cells=%s | limit=%s",
                unit_count,
                capacity,
                cells,
                self._settings.optimizer_max_table_cells,
            )
            raise AllocationValidationError(
                f"units x capacity table of {cells} cells exceeds the limit of "
                f"{self._settings.optimizer_max_table_cells}"
            )

    def optimize_units(
        self,
        units: Sequence[AllocationUnit],
        capacity: int,
    ) -> AllocationResult:
        self._ensure_table_fits(len(units), capacity)
        selected = select_optimal(units, capacity)
        result = AllocationResult(units=selected, capacity=capacity)
        logger.info(
            (
                "Flight optimization completed | units=%s | selected=%s | "
                "revenue=%s | seats_used=%s | capacity=%s"
            ),
            len(units),
            len(selected),
            result.total_cost,
            result.total_seats,
            capacity,
        )
        return result

    def optimize(
        self,
        *,
        passengers: Sequence[Passenger],
        families: Sequence[Family],
        capacity: Optional[int] = None,
    ) -> AllocationResult:
        resolved_capacity = (
            capacity if capacity is not None else self._settings.default_seat_capacity
        )
        units = form_units(passengers, families)
        return self.optimize_units(units, resolved_capacity)

    def optimize_generated(
        self,
        *,
        passenger_count: Optional[int] = None,
        capacity: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> GeneratedFlight:
        """Generate a synthetic passenger population and optimize it."""
        count = (
            passenger_count
            if passenger_count is not None
            else self._settings.default_passenger_count
        )
        if seed is not None:
            generator = PassengerGenerator.seeded(seed)
        elif self._generator is not None:
            generator = self._generator
        else:
            generator = PassengerGenerator.seeded(self._settings.generator_random_seed)

        passengers, families = generator.generate_passengers(count)
        result = self.optimize(passengers=passengers, families=families, capacity=capacity)
        return GeneratedFlight(passengers=passengers, families=families, result=result)
