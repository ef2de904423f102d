from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GraphExecutor:
    """Chạy compiled graph, log thời gian, rồi convert final state sang result"""

    @staticmethod
    def execute(
        graph: Any,
        init_state: Dict[str, Any],
        to_result: Callable[[Dict[str, Any]], T],
        tag: str = "GRAPH",
    ) -> T:
        started = time.perf_counter()
        final_state = graph.invoke(init_state)
        logger.info(
            "[%s] request=%s finished in %.0fms issues=%s warnings=%s",
            tag,
            final_state.get("request_id"),
            (time.perf_counter() - started) * 1000,
            len(final_state.get("issues") or []),
            len(final_state.get("warnings") or []),
        )
        return to_result(final_state)
