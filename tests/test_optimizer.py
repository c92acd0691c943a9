from __future__ import annotations

import itertools
import random
from dataclasses import replace

import numpy as np
import pytest

from backend.domain.models import AllocationUnit, Family, Passenger, PassengerType
from backend.services.optimizer_service import (
    AllocationValidationError,
    FlightOptimizationService,
    build_value_table,
    reconstruct_selection,
    select_optimal,
)
from backend.utils.config import get_settings


def _unit(cost: int, seats: int, tag: str | None = None) -> AllocationUnit:
    return AllocationUnit(cost=cost, seats=seats, family=tag)


def _totals(units: list[AllocationUnit]) -> tuple[int, int]:
    return sum(unit.cost for unit in units), sum(unit.seats for unit in units)


def _brute_force_best(units: list[AllocationUnit], capacity: int) -> int:
    best = 0
    for size in range(len(units) + 1):
        for combo in itertools.combinations(units, size):
            cost, seats = _totals(list(combo))
            if seats <= capacity:
                best = max(best, cost)
    return best


def _build_test_settings(**overrides):
    get_settings.cache_clear()
    return replace(get_settings(), **overrides)


def _family(name: str, *types: PassengerType, first_id: int) -> Family:
    family = Family(name=name)
    for offset, passenger_type in enumerate(types):
        age = 7 if passenger_type == PassengerType.CHILD else 41
        family.add_member(Passenger(first_id + offset, age, passenger_type, name))
    return family


# --- Concrete scenarios ---

def test_reference_scenario_selects_everything() -> None:
    units = [_unit(250, 1, "A"), _unit(250, 1, "B"), _unit(950, 5, "C"), _unit(500, 2, "D")]
    selected = select_optimal(units, 10)
    assert [unit.family for unit in selected] == ["A", "B", "C", "D"]
    assert _totals(selected) == (1950, 9)


def test_tie_scenario_keeps_500_and_400() -> None:
    units = [_unit(300, 5, "low"), _unit(500, 5, "high"), _unit(400, 5, "mid")]
    selected = select_optimal(units, 10)
    assert _totals(selected) == (900, 10)
    assert [unit.family for unit in selected] == ["high", "mid"]


def test_equal_value_prefers_earlier_unit() -> None:
    first = _unit(300, 3, "first")
    second = _unit(300, 3, "second")
    selected = select_optimal([first, second], 3)
    assert len(selected) == 1
    assert selected[0] is first


def test_mixed_families_fill_fifteen_seats() -> None:
    units = [_unit(950, 5), _unit(700, 4), _unit(950, 5), _unit(550, 3), _unit(500, 2)]
    assert _totals(select_optimal(units, 15)) == (2950, 15)


def test_full_family_with_two_seat_adults() -> None:
    units = [_unit(950, 5), _unit(500, 2), _unit(500, 2), _unit(500, 2)]
    revenue, seats = _totals(select_optimal(units, 10))
    assert revenue == 1950
    assert seats <= 10


def test_four_full_families_use_every_seat() -> None:
    units = [_unit(950, 5) for _ in range(4)]
    assert _totals(select_optimal(units, 20)) == (3800, 20)


# --- Degenerate inputs ---

def test_empty_unit_list_gives_empty_selection() -> None:
    assert select_optimal([], 10) == []


@pytest.mark.parametrize("capacity", [0, -1, -50])
def test_non_positive_capacity_gives_empty_selection(capacity: int) -> None:
    assert select_optimal([_unit(250, 1), _unit(0, 0)], capacity) == []


def test_unit_larger_than_capacity_is_skipped() -> None:
    assert select_optimal([_unit(5000, 11)], 10) == []


def test_zero_seat_unit_is_always_included() -> None:
    free = _unit(100, 0, "free")
    paid = _unit(50, 1, "paid")
    selected = select_optimal([free, paid], 1)
    assert [unit.family for unit in selected] == ["free", "paid"]
    assert _totals(selected) == (150, 1)


def test_zero_cost_unit_is_never_needed() -> None:
    selected = select_optimal([_unit(0, 1, "nothing"), _unit(250, 1, "adult")], 5)
    assert [unit.family for unit in selected] == ["adult"]


# --- Table ---

def test_value_table_shape_and_last_cell() -> None:
    units = [_unit(250, 1), _unit(950, 5)]
    table = build_value_table(units, 6)
    assert table.shape == (3, 7)
    assert table[0].tolist() == [0] * 7
    assert int(table[-1, 6]) == 1200


def test_reconstruction_matches_table_value() -> None:
    units = [_unit(400, 2), _unit(550, 3), _unit(700, 4)]
    table = build_value_table(units, 6)
    selected = reconstruct_selection(units, table, 6)
    assert _totals(selected)[0] == int(table[-1, 6])


def test_revenue_beyond_int64_stays_exact() -> None:
    units = [_unit(2**62, 1, "a"), _unit(2**62, 1, "b")]
    selected = select_optimal(units, 2)
    assert [unit.family for unit in selected] == ["a", "b"]
    assert _totals(selected) == (2**63, 2)


def test_single_cost_beyond_int64_is_selected() -> None:
    huge = _unit(2**63, 1, "huge")
    selected = select_optimal([_unit(250, 1), huge], 1)
    assert selected == [huge]


def test_large_costs_keep_earlier_unit_on_tie() -> None:
    first = _unit(2**63, 3, "first")
    second = _unit(2**63, 3, "second")
    selected = select_optimal([first, second], 3)
    assert len(selected) == 1
    assert selected[0] is first


def test_small_costs_use_int64_table() -> None:
    table = build_value_table([_unit(250, 1), _unit(950, 5)], 6)
    assert table.dtype == np.int64


@pytest.mark.parametrize("capacity", [-1, -7])
def test_reconstruction_with_negative_capacity_is_empty(capacity: int) -> None:
    units = [_unit(250, 1), _unit(500, 2)]
    table = build_value_table(units, 3)
    assert reconstruct_selection(units, table, capacity) == []


# --- Properties ---

@pytest.mark.parametrize("seed", range(12))
def test_matches_brute_force_on_random_instances(seed: int) -> None:
    rng = random.Random(seed)
    units = [_unit(rng.randint(0, 1000), rng.randint(0, 6)) for _ in range(rng.randint(1, 8))]
    capacity = rng.randint(1, 18)

    selected = select_optimal(units, capacity)
    revenue, seats = _totals(selected)

    assert seats <= capacity
    assert revenue == _brute_force_best(units, capacity)
    positions = [next(i for i, unit in enumerate(units) if unit is chosen) for chosen in selected]
    assert positions == sorted(positions)


def test_more_capacity_never_lowers_revenue() -> None:
    rng = random.Random(3)
    units = [_unit(rng.randint(100, 950), rng.randint(1, 5)) for _ in range(10)]
    revenues = [_totals(select_optimal(units, capacity))[0] for capacity in range(0, 30)]
    assert revenues == sorted(revenues)


def test_repeated_calls_return_same_selection() -> None:
    units = [_unit(300, 5), _unit(500, 5), _unit(400, 5), _unit(250, 1)]
    assert select_optimal(units, 11) == select_optimal(units, 11)


# --- Service ---

def test_service_keeps_families_whole() -> None:
    service = FlightOptimizationService(settings=_build_test_settings())
    big = _family(
        "A",
        PassengerType.ADULT,
        PassengerType.ADULT,
        PassengerType.CHILD,
        PassengerType.CHILD,
        PassengerType.CHILD,
        first_id=1,
    )
    small = _family("B", PassengerType.ADULT, PassengerType.CHILD, first_id=6)
    lone = [Passenger(8, 30, PassengerType.ADULT), Passenger(9, 45, PassengerType.ADULT)]
    passengers = big.members + small.members + lone

    result = service.optimize(passengers=passengers, families=[big, small], capacity=4)

    chosen = {passenger.passenger_id for passenger in result.passengers}
    for family in (big, small):
        ids = {member.passenger_id for member in family.members}
        assert ids <= chosen or not (ids & chosen)
    assert result.total_seats <= 4
    assert result.total_cost == 900


def test_service_defaults_to_configured_capacity() -> None:
    service = FlightOptimizationService(settings=_build_test_settings(default_seat_capacity=1))
    passengers = [Passenger(1, 30, PassengerType.ADULT), Passenger(2, 30, PassengerType.ADULT)]
    result = service.optimize(passengers=passengers, families=[])
    assert result.capacity == 1
    assert len(result.units) == 1


def test_service_rejects_oversized_table() -> None:
    service = FlightOptimizationService(
        settings=_build_test_settings(optimizer_max_table_cells=10)
    )
    units = [_unit(250, 1) for _ in range(5)]
    with pytest.raises(AllocationValidationError):
        service.optimize_units(units, 10)


def test_service_allows_zero_capacity_past_table_limit() -> None:
    service = FlightOptimizationService(settings=_build_test_settings(optimizer_max_table_cells=1))
    result = service.optimize_units([_unit(250, 1) for _ in range(5)], 0)
    assert result.units == []
    assert result.total_cost == 0


def test_generated_flight_is_reproducible_with_seed() -> None:
    service = FlightOptimizationService(settings=_build_test_settings())

    first = service.optimize_generated(passenger_count=60, capacity=40, seed=11)
    second = service.optimize_generated(passenger_count=60, capacity=40, seed=11)

    assert len(first.passengers) == 60
    assert first.result.total_seats <= 40
    assert first.result.total_cost == second.result.total_cost
    assert [p.passenger_id for p in first.result.passengers] == [
        p.passenger_id for p in second.result.passengers
    ]
