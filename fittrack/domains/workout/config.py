from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class WorkoutEngineConfig:
    catalog_limit: int = 100
    default_sets: int = 3
    default_reps: str = "10"
    default_rest_sec: int = 60
    schema_probe_ttl: int = 300  # giây
    retry_backoff_sec: float = 0.5

    @staticmethod
    def from_env() -> "WorkoutEngineConfig":
        return WorkoutEngineConfig(
            catalog_limit=int(os.getenv("WORKOUT_CATALOG_LIMIT") or 100),
            default_sets=int(os.getenv("WORKOUT_DEFAULT_SETS") or 3),
            default_reps=os.getenv("WORKOUT_DEFAULT_REPS") or "10",
            default_rest_sec=int(os.getenv("WORKOUT_DEFAULT_REST_SEC") or 60),
            schema_probe_ttl=int(os.getenv("WORKOUT_SCHEMA_PROBE_TTL") or 300),
            retry_backoff_sec=float(os.getenv("WORKOUT_MATERIALIZE_RETRY_BACKOFF") or 0.5),
        )


_CONFIG: WorkoutEngineConfig | None = None


def get_engine_config() -> WorkoutEngineConfig:
    """Lazy singleton, đọc env 1 lần."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = WorkoutEngineConfig.from_env()
    return _CONFIG
