"""Environment-backed runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    host: str
    port: int
    default_seat_capacity: int
    default_passenger_count: int
    generator_random_seed: Optional[int]
    optimizer_max_table_cells: int
    manifest_encoding: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once per process; call ``cache_clear()`` to reload."""
    return Settings(
        app_name=_env_str("APP_NAME", "Flight Profit Optimizer"),
        app_version=_env_str("APP_VERSION", "1.0.0"),
        log_level=_env_str("FLIGHT_LOG_LEVEL", _env_str("LOG_LEVEL", "INFO")),
        host=_env_str("HOST", "127.0.0.1"),
        port=_env_int("PORT", 8000),
        default_seat_capacity=_env_int("FLIGHT_SEAT_CAPACITY", 200),
        default_passenger_count=_env_int("FLIGHT_PASSENGER_COUNT", 250),
        generator_random_seed=_env_int("GENERATOR_RANDOM_SEED", None),
        optimizer_max_table_cells=_env_int("OPTIMIZER_MAX_TABLE_CELLS", 20_000_000),
        manifest_encoding=_env_str("MANIFEST_ENCODING", "utf-8"),
    )
