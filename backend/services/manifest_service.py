"""Tabular passenger manifests and revenue summaries for an allocation result."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from backend.domain.constraints import category_of
from backend.domain.models import AllocationResult, Passenger


MANIFEST_COLUMNS = [
    "passenger_id",
    "age",
    "passenger_type",
    "family",
    "ticket_price",
    "seats",
]


@dataclass(frozen=True)
class ManifestSummary:
    total_revenue: int
    seats_used: int
    capacity: int
    passenger_count: int
    unit_count: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total_revenue": self.total_revenue,
            "seats_used": self.seats_used,
            "capacity": self.capacity,
            "passenger_count": self.passenger_count,
            "unit_count": self.unit_count,
        }


def build_manifest_frame(passengers: Sequence[Passenger]) -> pd.DataFrame:
    frame = pd.DataFrame(
        [
            {
                "passenger_id": passenger.passenger_id,
                "age": passenger.age,
                "passenger_type": category_of(passenger),
                "family": passenger.family or "",
                "ticket_price": passenger.ticket_price(),
                "seats": passenger.seat_requirement(),
            }
            for passenger in passengers
        ],
        columns=MANIFEST_COLUMNS,
    )
    return frame


def summarize_selection(result: AllocationResult) -> ManifestSummary:
    frame = build_manifest_frame(result.passengers)
    return ManifestSummary(
        total_revenue=int(frame["ticket_price"].sum()),
        seats_used=int(frame["seats"].sum()),
        capacity=result.capacity,
        passenger_count=len(frame),
        unit_count=len(result.units),
    )


def render_manifest(result: AllocationResult) -> str:
    """Render the selected passengers and the revenue summary as plain text."""
    frame = build_manifest_frame(result.passengers)
    summary = summarize_selection(result)

    lines = ["Selected Passengers:"]
    if frame.empty:
        lines.append("No passengers selected.")
    else:
        display = pd.DataFrame(
            {
                "": frame["passenger_id"].map(lambda value: f"ID: {value:03d}"),
                "Age": frame["age"],
                "Type": frame["passenger_type"],
                "Family": frame["family"],
            }
        )
        lines.append(display.to_string(index=False))

    lines.extend(
        [
            "",
            "Summary:",
            f"Total Revenue Generated: {summary.total_revenue} Euros",
            f"Total Seats Used: {summary.seats_used} / {summary.capacity}",
        ]
    )
    return "\n".join(lines)
