#!/usr/bin/env python3
"""Generate a passenger population, optimize the flight and print the manifest."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.repository.manifest_repository import ManifestRepository
from backend.services.manifest_service import render_manifest
from backend.services.optimizer_service import FlightOptimizationService
from backend.utils.config import get_settings


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seats", type=int, default=settings.default_seat_capacity)
    parser.add_argument("--passengers", type=int, default=settings.default_passenger_count)
    parser.add_argument("--seed", type=int, default=settings.generator_random_seed)
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="optimize the passengers in this JSON manifest instead of generating them",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    service = FlightOptimizationService()

    if args.manifest is not None:
        passengers, families = ManifestRepository().load(args.manifest)
        result = service.optimize(passengers=passengers, families=families, capacity=args.seats)
    else:
        flight = service.optimize_generated(
            passenger_count=args.passengers,
            capacity=args.seats,
            seed=args.seed,
        )
        result = flight.result

    print(render_manifest(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
