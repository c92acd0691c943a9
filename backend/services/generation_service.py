"""Synthetic passenger and family population generator."""

from __future__ import annotations

import random
from typing import Optional

from backend.domain.constraints import (
    FAMILY_MAX_SIZE_EXCEEDED,
    FAMILY_MIN_SIZE_NOT_REACHED,
    MAX_ADULTS_PER_FAMILY,
    MAX_CHILDREN_PER_FAMILY,
    MAX_FAMILY_SIZE,
    PASSENGER_MIN_COUNT_NOT_REACHED,
)
from backend.domain.models import Family, Passenger, PassengerType
from backend.utils.logger import get_logger


logger = get_logger(__name__)

ADULT_AGE_RANGE = (13, 59)
CHILD_AGE_RANGE = (2, 11)
CHILD_AGE_LIMIT = 12


class GenerationError(ValueError):
    """Base exception for rejected generation requests."""


class InvalidPassengerCountError(GenerationError):
    def __init__(self, message: str = PASSENGER_MIN_COUNT_NOT_REACHED) -> None:
        super().__init__(message)


class InvalidFamilySizeError(GenerationError):
    pass


def family_name_for_index(index: int) -> str:
    """Spreadsheet-style name: 0 -> ``A``, 25 -> ``Z``, 26 -> ``AA``."""
    if index < 0:
        raise ValueError("family index must be >= 0")
    name = ""
    while index >= 0:
        name = chr(ord("A") + index % 26) + name
        index = index // 26 - 1
    return name


class PassengerIdGenerator:
    """Monotonic passenger id counter owned by one generator."""

    def __init__(self, start: int = 1) -> None:
        self._start = start
        self._next_id = start

    def next_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def reset(self) -> None:
        self._next_id = self._start


class PassengerGenerator:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        id_generator: Optional[PassengerIdGenerator] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._ids = id_generator or PassengerIdGenerator()

    @classmethod
    def seeded(cls, seed: Optional[int]) -> "PassengerGenerator":
        return cls(rng=random.Random(seed))

    @property
    def id_generator(self) -> PassengerIdGenerator:
        return self._ids

    def generate_passenger(self, age: int, family: Optional[str] = None) -> Passenger:
        if age > CHILD_AGE_LIMIT:
            passenger_type = self._rng.choice(
                (PassengerType.ADULT_REQUIRING_TWO_SEATS, PassengerType.ADULT)
            )
        else:
            passenger_type = PassengerType.CHILD
        return Passenger(
            passenger_id=self._ids.next_id(),
            age=age,
            passenger_type=passenger_type,
            family=family or None,
        )

    def generate_single_passenger(self) -> Passenger:
        return self.generate_passenger(self._rng.randint(*ADULT_AGE_RANGE))

    def generate_family(self, name: str, max_members: Optional[int] = None) -> Family:
        """Create a valid family of at most ``max_members`` people (5 when omitted)."""
        if max_members is not None and max_members > MAX_FAMILY_SIZE:
            raise InvalidFamilySizeError(FAMILY_MAX_SIZE_EXCEEDED)
        if max_members is not None and max_members <= 0:
            raise InvalidFamilySizeError(FAMILY_MIN_SIZE_NOT_REACHED)

        upper = max_members if max_members is not None else MAX_FAMILY_SIZE
        size = self._rng.randint(min(2, upper), upper)
        adults = self._rng.randint(1, min(MAX_ADULTS_PER_FAMILY, size))
        children = min(size - adults, MAX_CHILDREN_PER_FAMILY)

        family = Family(name=name)
        for _ in range(adults):
            family.add_member(self.generate_passenger(self._rng.randint(*ADULT_AGE_RANGE), name))
        for _ in range(children):
            family.add_member(self.generate_passenger(self._rng.randint(*CHILD_AGE_RANGE), name))
        return family

    def generate_passengers(self, count: int) -> tuple[list[Passenger], list[Family]]:
        """Generate exactly ``count`` passengers, a random share of them in families.

        Ids restart at 1 for every run.
        """
        if count <= 0:
            raise InvalidPassengerCountError()

        self._ids.reset()
        passengers: list[Passenger] = []
        families: list[Family] = []

        while len(passengers) < count:
            remaining = count - len(passengers)
            if remaining > 1 and self._rng.random() < 0.5:
                name = family_name_for_index(len(families))
                cap = remaining if remaining <= MAX_FAMILY_SIZE else None
                family = self.generate_family(name, cap)
                families.append(family)
                passengers.extend(family.members)
            else:
                passengers.append(self.generate_single_passenger())

        logger.info(
            "Passenger population generated | passengers=%s | families=%s",
            len(passengers),
            len(families),
        )
        return passengers, families
