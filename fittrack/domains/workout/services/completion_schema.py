from __future__ import annotations

import logging
from typing import FrozenSet

from django.db import DEFAULT_DB_ALIAS, connections

from fittrack.models import CompletionRecord
from fittrack.shared.simple_cache import cache_clear, cache_get, cache_set
from fittrack.domains.workout.config import get_engine_config

logger = logging.getLogger(__name__)

# Cột không đảm bảo có ở mọi deployment của workout_logs
OPTIONAL_COMPLETION_COLUMNS = ("duration", "exercises_completed", "total_exercises")

_CACHE_NAME = "completion_schema"


def detect_completion_columns(using: str = DEFAULT_DB_ALIAS) -> FrozenSet[str]:
    """
    Dò schema thật của bảng completion (introspection), trả tập cột optional đang có.
    Cache theo TTL vì schema chỉ đổi khi deploy/migrate.
    """
    cached = cache_get(_CACHE_NAME, using)
    if cached is not None:
        return cached

    conn = connections[using]
    table = CompletionRecord._meta.db_table
    with conn.cursor() as cursor:
        description = conn.introspection.get_table_description(cursor, table)

    present = {col.name.lower() for col in description}
    supported = frozenset(c for c in OPTIONAL_COMPLETION_COLUMNS if c in present)

    logger.info("[COMPLETION] schema probe table=%s optional_columns=%s", table, sorted(supported) or "none")
    cache_set(_CACHE_NAME, using, supported, ttl_seconds=get_engine_config().schema_probe_ttl)
    return supported


def reset_completion_columns_cache() -> None:
    cache_clear(_CACHE_NAME)
