"""Repository layer responsible for passenger manifest files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from backend.domain.constraints import category_of
from backend.domain.models import Family, Passenger, PassengerType
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

ADULT_LABEL = "Adulte"
CHILD_LABEL = "Enfant"
NO_FAMILY = "-"
_REQUIRED_KEYS = ("Id", "Type", "Age")


class ManifestFormatError(ValueError):
    """Raised when a manifest file or record cannot be interpreted."""


def _record_to_passenger(record: Mapping[str, Any], position: int) -> Passenger:
    missing = [key for key in _REQUIRED_KEYS if key not in record]
    if missing:
        raise ManifestFormatError(
            f"record #{position} is missing required keys: {', '.join(missing)}"
        )
    try:
        passenger_id = int(record["Id"])
        age = int(record["Age"])
    except (TypeError, ValueError) as exc:
        raise ManifestFormatError(f"record #{position} has non-integer Id or Age") from exc

    if record["Type"] == ADULT_LABEL:
        passenger_type = (
            PassengerType.ADULT_REQUIRING_TWO_SEATS
            if record.get("RequiresTwoSeats", False)
            else PassengerType.ADULT
        )
    else:
        passenger_type = PassengerType.CHILD

    family = record.get("Family") or NO_FAMILY
    return Passenger(
        passenger_id=passenger_id,
        age=age,
        passenger_type=passenger_type,
        family=None if family == NO_FAMILY else str(family),
    )


def _passenger_to_record(passenger: Passenger) -> dict[str, Any]:
    category = category_of(passenger)
    return {
        "Id": passenger.passenger_id,
        "Type": CHILD_LABEL if category == PassengerType.CHILD.value else ADULT_LABEL,
        "Age": passenger.age,
        "Family": passenger.family or NO_FAMILY,
        "RequiresTwoSeats": category == PassengerType.ADULT_REQUIRING_TWO_SEATS.value,
    }


def parse_records(
    records: Iterable[Mapping[str, Any]],
) -> tuple[list[Passenger], list[Family]]:
    """Convert manifest records into passengers plus their families.

    Families keep first-appearance order and are assembled directly from the
    records; the manifest is trusted to satisfy the composition rules.
    """
    passengers: list[Passenger] = []
    families: dict[str, Family] = {}
    for position, record in enumerate(records, start=1):
        if not isinstance(record, Mapping):
            raise ManifestFormatError(f"record #{position} must be a JSON object")
        passenger = _record_to_passenger(record, position)
        passengers.append(passenger)
        if passenger.family:
            families.setdefault(passenger.family, Family(name=passenger.family)).members.append(
                passenger
            )
    return passengers, list(families.values())


class ManifestRepository:
    """Reads and writes passenger manifests stored as JSON arrays."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def load(self, path: str | Path) -> tuple[list[Passenger], list[Family]]:
        manifest_path = Path(path)
        try:
            payload = json.loads(
                manifest_path.read_text(encoding=self._settings.manifest_encoding)
            )
        except json.JSONDecodeError as exc:
            raise ManifestFormatError(f"{manifest_path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise ManifestFormatError(f"{manifest_path} must contain a JSON array of records")

        passengers, families = parse_records(payload)
        logger.info(
            "Manifest loaded | path=%s | passengers=%s | families=%s",
            manifest_path,
            len(passengers),
            len(families),
        )
        return passengers, families

    def save(self, path: str | Path, passengers: Sequence[Passenger]) -> Path:
        manifest_path = Path(path)
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        manifest_path.write_text(
            json.dumps([_passenger_to_record(passenger) for passenger in passengers], indent=2),
            encoding=self._settings.manifest_encoding,
        )
        logger.info("Manifest saved | path=%s | passengers=%s", manifest_path, len(passengers))
        return manifest_path
