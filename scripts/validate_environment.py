#!/usr/bin/env python3
"""Validate local Flight Profit Optimizer environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.domain.models import AllocationUnit
from backend.repository.manifest_repository import ManifestRepository
from backend.services.optimizer_service import FlightOptimizationService, select_optimal

SEPARATOR_LINE = "=" * 44
REQUIRED_PACKAGES = ("fastapi", "uvicorn", "pydantic", "numpy", "pandas", "httpx", "pytest")


def _result_line(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def _check_reference_scenario() -> tuple[bool, str]:
    units = [
        AllocationUnit(cost=250, seats=1),
        AllocationUnit(cost=250, seats=1),
        AllocationUnit(cost=950, seats=5),
        AllocationUnit(cost=500, seats=2),
    ]
    selected = select_optimal(units, 10)
    revenue = sum(unit.cost for unit in selected)
    seats = sum(unit.seats for unit in selected)
    if (revenue, seats) != (1950, 9):
        return _result_line("Reference scenario", False, f"got revenue={revenue} seats={seats}")
    return _result_line("Reference scenario: 1950 EUR / 9 seats", True)


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="flight-optimizer-env-")

    if sys.version_info >= (3, 10):
        ok, line = _result_line("Python " + sys.version.split()[0], True)
    else:
        ok, line = _result_line("Python version >= 3.10", False, f"found {sys.version.split()[0]}")
    results.append(line)
    all_passed = all_passed and ok

    import_errors: list[str] = []
    for module_name in REQUIRED_PACKAGES:
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _result_line(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _result_line("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        ok, line = _check_reference_scenario()
        results.append(line)
        all_passed = all_passed and ok

        service = FlightOptimizationService()
        flight = None
        try:
            flight = service.optimize_generated(passenger_count=250, capacity=200, seed=7)
            if len(flight.passengers) != 250:
                raise RuntimeError(f"expected 250 passengers, got {len(flight.passengers)}")
            if flight.result.total_seats > 200:
                raise RuntimeError("selection exceeds seat capacity")
            ok, line = _result_line(
                "Generated flight",
                True,
                f": revenue={flight.result.total_cost} seats={flight.result.total_seats}/200",
            )
        except Exception as exc:
            ok, line = _result_line("Generated flight", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        try:
            if flight is None:
                raise RuntimeError("no generated flight to save")
            repository = ManifestRepository()
            manifest_path = repository.save(Path(temp_dir) / "manifest.json", flight.passengers)
            passengers, families = repository.load(manifest_path)
            if len(passengers) != len(flight.passengers) or len(families) != len(flight.families):
                raise RuntimeError("manifest round-trip changed the population")
            ok, line = _result_line("Manifest round-trip", True)
        except Exception as exc:
            ok, line = _result_line("Manifest round-trip", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Flight Profit Optimizer Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
