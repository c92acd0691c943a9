from __future__ import annotations

import pytest

from backend.domain.constraints import UnaccompaniedChildError
from backend.domain.models import Family, Passenger, PassengerType
from backend.services.assignment_service import (
    UnknownFamilyError,
    assemble_families,
    flatten_units,
    form_units,
)


def _adult(passenger_id: int, family: str | None = None) -> Passenger:
    return Passenger(passenger_id, 35, PassengerType.ADULT, family)


def _child(passenger_id: int, family: str) -> Passenger:
    return Passenger(passenger_id, 6, PassengerType.CHILD, family)


def test_lone_passengers_become_single_units() -> None:
    passengers = [_adult(1), Passenger(2, 50, PassengerType.ADULT_REQUIRING_TWO_SEATS)]
    units = form_units(passengers, [])
    assert [(unit.cost, unit.seats) for unit in units] == [(250, 1), (500, 2)]
    assert all(unit.family is None for unit in units)


def test_family_produces_one_unit_at_first_member() -> None:
    family = Family(name="A")
    members = [_adult(2, "A"), _child(3, "A")]
    for member in members:
        family.add_member(member)
    passengers = [_adult(1), members[0], _adult(4), members[1]]

    units = form_units(passengers, [family])

    assert [unit.family for unit in units] == [None, "A", None]
    assert (units[1].cost, units[1].seats) == (400, 2)
    assert [member.passenger_id for member in units[1].members] == [2, 3]


def test_unknown_family_raises() -> None:
    with pytest.raises(UnknownFamilyError) as excinfo:
        form_units([_adult(9, "Z")], [])
    assert excinfo.value.family_name == "Z"
    assert excinfo.value.passenger_id == 9


def test_flatten_units_preserves_order() -> None:
    family = Family(name="B")
    family.add_member(_adult(2, "B"))
    family.add_member(_child(3, "B"))
    passengers = [_adult(1), *family.members]
    units = form_units(passengers, [family])
    assert [p.passenger_id for p in flatten_units(units)] == [1, 2, 3]


def test_assemble_families_groups_in_first_encounter_order() -> None:
    passengers = [_adult(1, "B"), _adult(2), _adult(3, "A"), _child(4, "B")]
    families = assemble_families(passengers)
    assert [family.name for family in families] == ["B", "A"]
    assert [member.passenger_id for member in families[0].members] == [1, 4]


def test_assemble_families_propagates_composition_errors() -> None:
    with pytest.raises(UnaccompaniedChildError):
        assemble_families([_child(1, "A"), _adult(2, "A")])
