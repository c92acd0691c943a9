"""Groups raw passengers into the indivisible units the optimizer works on."""

from __future__ import annotations

from typing import Iterable, Sequence

from backend.domain.models import AllocationUnit, Family, Passenger
from backend.utils.logger import get_logger


logger = get_logger(__name__)


class UnknownFamilyError(LookupError):
    """Raised when a passenger references a family that was not supplied."""

    def __init__(self, family_name: str, passenger_id: int) -> None:
        super().__init__(
            f"Family '{family_name}' referenced by passenger_id={passenger_id} was not found"
        )
        self.family_name = family_name
        self.passenger_id = passenger_id


def form_units(
    passengers: Sequence[Passenger],
    families: Iterable[Family],
) -> list[AllocationUnit]:
    """Build one unit per lone passenger and one unit per distinct family.

    Units come out in first-encounter order of the passenger stream. A
    family unit carries the family's full current member list, so later
    passengers tagged with an already-seen family produce nothing.
    """
    family_by_name: dict[str, Family] = {}
    for family in families:
        family_by_name.setdefault(family.name, family)

    seen_families: set[str] = set()
    units: list[AllocationUnit] = []
    for passenger in passengers:
        if not passenger.has_family:
            units.append(AllocationUnit.for_passenger(passenger))
            continue

        if passenger.family in seen_families:
            continue
        family = family_by_name.get(passenger.family)
        if family is None:
            raise UnknownFamilyError(passenger.family, passenger.passenger_id)
        seen_families.add(passenger.family)
        units.append(AllocationUnit.for_family(family))

    logger.debug(
        "Allocation units formed | passengers=%s | units=%s | family_units=%s",
        len(passengers),
        len(units),
        len(seen_families),
    )
    return units


def flatten_units(units: Iterable[AllocationUnit]) -> list[Passenger]:
    return [member for unit in units for member in unit.members]


def assemble_families(passengers: Iterable[Passenger]) -> list[Family]:
    """Group family-tagged passengers into families through ``Family.add_member``.

    Composition errors propagate unchanged; families are returned in
    first-encounter order.
    """
    families: dict[str, Family] = {}
    for passenger in passengers:
        if not passenger.has_family:
            continue
        family = families.setdefault(passenger.family, Family(name=passenger.family))
        family.add_member(passenger)
    return list(families.values())
