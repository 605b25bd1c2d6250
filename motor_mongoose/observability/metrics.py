"""
In-process operation metrics for motor-mongoose.

Every connection, index and collection call records its duration and outcome
here so callers can inspect latency and error rates without an external
metrics backend.
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..constants import DEFAULT_MAX_METRICS
from .logging import log_operation

logger = logging.getLogger(__name__)


@dataclass
class OperationMetrics:
    """Aggregated timings for one operation name."""

    operation_name: str
    count: int = 0
    total_duration_ms: float = 0.0
    min_duration_ms: float = float("inf")
    max_duration_ms: float = 0.0
    error_count: int = 0
    last_execution: datetime | None = None

    @property
    def avg_duration_ms(self) -> float:
        return self.total_duration_ms / self.count if self.count > 0 else 0.0

    @property
    def error_rate(self) -> float:
        """Error rate as a percentage."""
        return (self.error_count / self.count * 100) if self.count > 0 else 0.0

    def record(self, duration_ms: float, success: bool = True) -> None:
        self.count += 1
        self.total_duration_ms += duration_ms
        self.min_duration_ms = min(self.min_duration_ms, duration_ms)
        self.max_duration_ms = max(self.max_duration_ms, duration_ms)
        if not success:
            self.error_count += 1
        self.last_execution = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation_name,
            "count": self.count,
            "avg_duration_ms": round(self.avg_duration_ms, 2),
            "min_duration_ms": (
                round(self.min_duration_ms, 2) if self.min_duration_ms != float("inf") else 0.0
            ),
            "max_duration_ms": round(self.max_duration_ms, 2),
            "error_count": self.error_count,
            "error_rate_percent": round(self.error_rate, 2),
            "last_execution": (self.last_execution.isoformat() if self.last_execution else None),
        }


class MetricsCollector:
    """
    Thread-safe store of OperationMetrics keyed by operation name and tags.

    Tags (for example ``collection="users"``) produce separate entries such as
    ``collection.find_one[collection=users]``; get_summary() folds them back
    together by base operation name. Once ``max_metrics`` keys exist, the
    least recently recorded key is evicted to make room for a new one.
    """

    def __init__(self, max_metrics: int = DEFAULT_MAX_METRICS) -> None:
        self._metrics: OrderedDict[str, OperationMetrics] = OrderedDict()
        self._lock = threading.Lock()
        self._max_metrics = max_metrics

    def record_operation(
        self, operation_name: str, duration_ms: float, success: bool = True, **tags: Any
    ) -> None:
        key = operation_name
        if tags:
            tag_str = "_".join(f"{k}={v}" for k, v in sorted(tags.items()))
            key = f"{operation_name}[{tag_str}]"

        with self._lock:
            metric = self._metrics.get(key)
            if metric is None:
                if len(self._metrics) >= self._max_metrics:
                    self._metrics.popitem(last=False)
                metric = self._metrics[key] = OperationMetrics(operation_name=operation_name)
            else:
                self._metrics.move_to_end(key)
            metric.record(duration_ms, success)

    def get_metrics(self, operation_name: str | None = None) -> dict[str, Any]:
        """Return per-key metrics, optionally filtered by operation name prefix."""
        with self._lock:
            metrics = {
                k: v.to_dict()
                for k, v in self._metrics.items()
                if operation_name is None or k.startswith(operation_name)
            }
        return {
            "timestamp": datetime.now().isoformat(),
            "metrics": metrics,
            "total_operations": len(metrics),
        }

    def get_summary(self) -> dict[str, Any]:
        """Return metrics aggregated by base operation name (tags dropped)."""
        with self._lock:
            aggregated: dict[str, OperationMetrics] = {}
            for metric in self._metrics.values():
                agg = aggregated.setdefault(
                    metric.operation_name, OperationMetrics(operation_name=metric.operation_name)
                )
                agg.count += metric.count
                agg.total_duration_ms += metric.total_duration_ms
                agg.min_duration_ms = min(agg.min_duration_ms, metric.min_duration_ms)
                agg.max_duration_ms = max(agg.max_duration_ms, metric.max_duration_ms)
                agg.error_count += metric.error_count
                if metric.last_execution and (
                    not agg.last_execution or metric.last_execution > agg.last_execution
                ):
                    agg.last_execution = metric.last_execution

        return {
            "timestamp": datetime.now().isoformat(),
            "total_operations": len(aggregated),
            "summary": {name: m.to_dict() for name, m in aggregated.items()},
        }

    def get_operation_count(self, operation_name: str) -> int:
        """Total executions of an operation across all tag combinations."""
        with self._lock:
            return sum(
                m.count for m in self._metrics.values() if m.operation_name == operation_name
            )

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get or create the global metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector


def record_operation(
    operation_name: str, duration_ms: float, success: bool = True, **tags: Any
) -> None:
    """Record an operation in the global metrics collector."""
    get_metrics_collector().record_operation(operation_name, duration_ms, success, **tags)


@contextmanager
def track_operation(operation_name: str, **tags: Any) -> Iterator[None]:
    """
    Time the enclosed block, record it and log it at DEBUG.

    The operation is marked failed if the block raises.

    Usage:
        with track_operation("collection.find_one", collection="users"):
            doc = await collection.find_one(query)
    """
    start_time = time.perf_counter()
    success = False
    try:
        yield
        success = True
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        record_operation(operation_name, duration_ms, success, **tags)
        log_operation(logger, operation_name, success=success, duration_ms=duration_ms, **tags)
