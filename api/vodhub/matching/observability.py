"""Per-provider query metrics for match fan-out and playback lookups."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, DefaultDict

logger = logging.getLogger("vodhub.matching")

OUTCOME_MATCHED = "matched"
OUTCOME_EMPTY = "empty"
OUTCOME_FAILED = "failed"


@dataclass
class OperationMetrics:
    """Aggregated counters for a provider operation."""
    started: int = 0
    matched: int = 0
    empty: int = 0
    failed: int = 0
    failure_streak: int = 0
    last_latency_ms: float | None = None
    last_error: str | None = None

    def snapshot(self) -> dict[str, Any]:
        return {
            "started": self.started,
            "matched": self.matched,
            "empty": self.empty,
            "failed": self.failed,
            "failure_streak": self.failure_streak,
            "last_latency_ms": self.last_latency_ms,
            "last_error": self.last_error,
        }


class ProviderMonitor:
    """Track provider outcomes and emit one structured log line per call.

    Counters never gate calls: a failing provider is still queried on every
    search, it just shows up as degraded in health telemetry.
    """
    def __init__(self, *, degraded_after: int = 3) -> None:
        self.degraded_after = degraded_after
        self._metrics: DefaultDict[str, DefaultDict[str, OperationMetrics]] = defaultdict(
            lambda: defaultdict(OperationMetrics)
        )
        self._lock = asyncio.Lock()

    async def record_start(self, provider: str, operation: str) -> float:
        async with self._lock:
            self._metrics[provider][operation].started += 1
        return time.monotonic()

    async def record_outcome(
        self,
        provider: str,
        operation: str,
        outcome: str,
        *,
        started_at: float,
        error: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Record a finished call; ``outcome`` is matched, empty or failed."""
        latency_ms = (time.monotonic() - started_at) * 1000
        async with self._lock:
            metrics = self._metrics[provider][operation]
            metrics.last_latency_ms = latency_ms
            if outcome == OUTCOME_FAILED:
                metrics.failed += 1
                metrics.failure_streak += 1
                metrics.last_error = error
            else:
                if outcome == OUTCOME_MATCHED:
                    metrics.matched += 1
                else:
                    metrics.empty += 1
                metrics.failure_streak = 0
                metrics.last_error = None
            payload = {
                "event": f"provider_{operation}_{outcome}",
                "provider": provider,
                "operation": operation,
                "latency_ms": round(latency_ms, 2),
                "context": context or {},
            }
            if error:
                payload["error"] = error
        if outcome == OUTCOME_FAILED:
            logger.warning(json.dumps(payload))
        else:
            logger.info(json.dumps(payload))

    def is_degraded(self, metrics: OperationMetrics) -> bool:
        return metrics.failure_streak >= self.degraded_after

    async def snapshot(self) -> dict[str, Any]:
        """Return a snapshot of all tracked provider metrics."""
        async with self._lock:
            snap: dict[str, Any] = {}
            for provider, operations in self._metrics.items():
                snap[provider] = {
                    "degraded": any(self.is_degraded(metrics) for metrics in operations.values()),
                    "operations": {name: metrics.snapshot() for name, metrics in operations.items()},
                }
            return snap

    def reset(self) -> None:
        self._metrics.clear()


provider_monitor = ProviderMonitor()
