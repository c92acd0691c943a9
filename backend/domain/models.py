"""Domain models for passengers, families and seat allocation units."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from backend.domain.constraints import (
    category_of,
    is_adult,
    is_child,
    validate_family_addition,
    validate_unit_values,
)


class PassengerType(str, Enum):
    ADULT = "Adult"
    ADULT_REQUIRING_TWO_SEATS = "AdultRequiringTwoSeats"
    CHILD = "Child"


TICKET_PRICES: dict[str, int] = {
    PassengerType.ADULT_REQUIRING_TWO_SEATS.value: 500,
    PassengerType.ADULT.value: 250,
    PassengerType.CHILD.value: 150,
}

SEAT_REQUIREMENTS: dict[str, int] = {
    PassengerType.ADULT_REQUIRING_TWO_SEATS.value: 2,
    PassengerType.ADULT.value: 1,
    PassengerType.CHILD.value: 1,
}


@dataclass(frozen=True)
class Passenger:
    passenger_id: int
    age: int
    passenger_type: PassengerType
    family: Optional[str] = None

    @property
    def has_family(self) -> bool:
        return bool(self.family)

    def ticket_price(self) -> int:
        """Price in euros; unknown categories cost nothing."""
        return TICKET_PRICES.get(category_of(self), 0)

    def seat_requirement(self) -> int:
        return SEAT_REQUIREMENTS.get(category_of(self), 0)


@dataclass
class Family:
    """A named group of passengers that must fly together or not at all."""

    name: str
    members: list[Passenger] = field(default_factory=list)

    def add_member(self, passenger: Passenger) -> None:
        """Append ``passenger`` after checking every composition rule.

        Raises one of the ``FamilyCompositionError`` subclasses and leaves
        ``members`` untouched when a rule is violated.
        """
        validate_family_addition(self.members, passenger)
        self.members.append(passenger)

    def adult_count(self) -> int:
        return sum(1 for member in self.members if is_adult(member))

    def child_count(self) -> int:
        return sum(1 for member in self.members if is_child(member))

    def total_cost(self) -> int:
        return sum(member.ticket_price() for member in self.members)

    def total_seats(self) -> int:
        return sum(member.seat_requirement() for member in self.members)


@dataclass(frozen=True)
class AllocationUnit:
    """Indivisible item handed to the optimizer: a lone passenger or a whole family."""

    cost: int
    seats: int
    members: tuple[Passenger, ...] = ()
    family: Optional[str] = None

    def __post_init__(self) -> None:
        validate_unit_values(self.cost, self.seats)

    @classmethod
    def for_passenger(cls, passenger: Passenger) -> "AllocationUnit":
        return cls(
            cost=passenger.ticket_price(),
            seats=passenger.seat_requirement(),
            members=(passenger,),
        )

    @classmethod
    def for_family(cls, family: Family) -> "AllocationUnit":
        return cls(
            cost=family.total_cost(),
            seats=family.total_seats(),
            members=tuple(family.members),
            family=family.name,
        )


@dataclass(frozen=True)
class AllocationResult:
    units: list[AllocationUnit]
    capacity: int

    @property
    def total_cost(self) -> int:
        return sum(unit.cost for unit in self.units)

    @property
    def total_seats(self) -> int:
        return sum(unit.seats for unit in self.units)

    @property
    def seats_remaining(self) -> int:
        return max(0, self.capacity - self.total_seats)

    @property
    def passengers(self) -> list[Passenger]:
        return [member for unit in self.units for member in unit.members]
