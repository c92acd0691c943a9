"""Domain-level validation rules for family composition and allocation units."""

from __future__ import annotations

from typing import Iterable, Protocol


MAX_FAMILY_SIZE = 5
MAX_CHILDREN_PER_FAMILY = 3
MAX_ADULTS_PER_FAMILY = 2

ADULT_CATEGORIES = frozenset({"Adult", "AdultRequiringTwoSeats"})
CHILD_CATEGORY = "Child"

FAMILY_MAX_SIZE_EXCEEDED = "Maximum members in a family cannot exceed 5."
FAMILY_MIN_SIZE_NOT_REACHED = "A family must consist of at least one member."
PASSENGER_MIN_COUNT_NOT_REACHED = "Passenger count must be greater than zero."
MAX_ADULTS_REACHED = "Cannot add more adults to the family."
MAX_CHILDREN_REACHED = "Cannot add more children to the family."
CHILD_NEEDS_ADULT = "A child must be accompanied by an adult in the family."


class _Categorised(Protocol):
    passenger_type: str


class FamilyCompositionError(ValueError):
    """Base class for rejected family member additions."""

    kind = "FamilyComposition"
    default_message = "Family composition rule violated."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class FamilyFullError(FamilyCompositionError):
    """Raised when a family already holds the maximum number of members."""

    kind = "FamilyFull"
    default_message = FAMILY_MAX_SIZE_EXCEEDED


class UnaccompaniedChildError(FamilyCompositionError):
    """Raised when a child is added to a family without any adult."""

    kind = "UnaccompaniedChild"
    default_message = CHILD_NEEDS_ADULT


class TooManyChildrenError(FamilyCompositionError):
    kind = "TooManyChildren"
    default_message = MAX_CHILDREN_REACHED


class TooManyAdultsError(FamilyCompositionError):
    kind = "TooManyAdults"
    default_message = MAX_ADULTS_REACHED


class AllocationValidationError(ValueError):
    """Raised when allocation inputs are outside the supported domain."""


def category_of(passenger: _Categorised) -> str:
    """Return the plain category name whether it is stored as an enum or a string."""
    value = passenger.passenger_type
    return getattr(value, "value", value)


def is_adult(passenger: _Categorised) -> bool:
    return category_of(passenger) in ADULT_CATEGORIES


def is_child(passenger: _Categorised) -> bool:
    return category_of(passenger) == CHILD_CATEGORY


def validate_family_addition(
    members: Iterable[_Categorised],
    candidate: _Categorised,
) -> None:
    """Check whether ``candidate`` may join a family holding ``members``.

    Checks run in a fixed order and the first failing rule wins: size, then
    adult presence and child count for children, then adult count for
    adult-class passengers. Passengers of any other category only pass the
    size check.
    """
    current = list(members)
    if len(current) >= MAX_FAMILY_SIZE:
        raise FamilyFullError()

    adults = sum(1 for member in current if is_adult(member))
    if is_child(candidate):
        if adults == 0:
            raise UnaccompaniedChildError()
        children = sum(1 for member in current if is_child(member))
        if children >= MAX_CHILDREN_PER_FAMILY:
            raise TooManyChildrenError()
    elif is_adult(candidate):
        if adults >= MAX_ADULTS_PER_FAMILY:
            raise TooManyAdultsError()


def validate_unit_values(cost: int, seats: int) -> None:
    if cost < 0:
        raise AllocationValidationError("unit cost must be >= 0")
    if seats < 0:
        raise AllocationValidationError("unit seats must be >= 0")
