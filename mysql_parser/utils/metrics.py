"""
Metrics collection and emission for observability.

This module provides metrics tracking for:
- Parse and normalization phase timings
- Number of statements and nodes converted
- Nodes that degraded to partial information
"""

import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Iterator

from mysql_parser.utils.logging import get_logger

logger = get_logger(__name__)


class ParseMetrics:
    """
    Collects metrics for a single parse call.

    An instance lives exactly as long as the call that created it; nothing
    is shared between calls.
    """

    def __init__(self, dialect: str):
        self.dialect = dialect

        # Timing metrics
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[int] = None
        self.phase_durations: Dict[str, float] = {}

        # Tree metrics
        self.statement_count: int = 0
        self.node_count: int = 0
        self.partial_count: int = 0
        self.max_depth: int = 0

        # Status
        self.status: str = "running"
        self.error_message: Optional[str] = None

    def start(self) -> None:
        """Mark call start."""
        self.start_time = datetime.now(timezone.utc)
        self.status = "running"

    def complete(self, status: str = "completed", error_message: Optional[str] = None) -> None:
        """
        Mark call completion.

        Args:
            status: Final status ('completed' or 'rejected')
            error_message: Diagnostic text if rejected
        """
        self.end_time = datetime.now(timezone.utc)
        self.status = status
        self.error_message = error_message

        if self.start_time:
            duration = (self.end_time - self.start_time).total_seconds()
            self.duration_ms = int(duration * 1000)

        logger.debug(
            f"Parse call {status}",
            extra={"dialect": self.dialect, **self.get_metrics_summary()},
        )

    def record_phase(self, phase: str, duration_ms: float) -> None:
        """Accumulate time spent in a named phase ('parse', 'normalize')."""
        self.phase_durations[phase] = self.phase_durations.get(phase, 0.0) + duration_ms

    def record_tree(self, node_count: int, partial_count: int, max_depth: int) -> None:
        """Fold the statistics of one normalized statement into the totals."""
        self.statement_count += 1
        self.node_count += node_count
        self.partial_count += partial_count
        self.max_depth = max(self.max_depth, max_depth)

    def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of collected metrics.

        Returns:
            Dictionary of metrics
        """
        summary = {
            "status": self.status,
            "duration_ms": self.duration_ms,
            "statement_count": self.statement_count,
            "node_count": self.node_count,
            "partial_count": self.partial_count,
            "max_depth": self.max_depth,
            "phases": {
                phase: round(duration, 2)
                for phase, duration in self.phase_durations.items()
            },
        }

        if self.error_message:
            summary["error_message"] = self.error_message

        return summary


@contextmanager
def track_phase(metrics: Optional[ParseMetrics], phase: str) -> Iterator[None]:
    """
    Context manager to track phase timing.

    Usage:
        with track_phase(metrics, "parse"):
            statements = plugin.parse(sql)

    Args:
        metrics: Metrics collector (optional)
        phase: Phase name
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        if metrics is not None:
            metrics.record_phase(phase, duration_ms)


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a metric.

    Metrics are written to the structured log; a collector can scrape them
    from there.

    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.debug(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
