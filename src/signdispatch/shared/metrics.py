"""Metrics collection for dispatch runs."""

import time
from typing import Dict, Any, Callable
from collections import defaultdict


class MetricsCollector:
    """
    Collects timers and counters for a single run.
    Implements IMetricsCollector protocol.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._start_time = clock()
        self._timers: Dict[str, float] = {}
        self._metrics: Dict[str, Any] = defaultdict(list)
        self._counters: Dict[str, int] = defaultdict(int)

    def start_timer(self, name: str) -> None:
        """Start a named timer."""
        self._timers[name] = self._clock()

    def stop_timer(self, name: str) -> float:
        """
        Stop a named timer and return elapsed time.

        Args:
            name: Timer name

        Returns:
            Elapsed time in seconds

        Raises:
            KeyError: If timer was not started
        """
        if name not in self._timers:
            raise KeyError(f"Timer '{name}' was not started")

        elapsed = self._clock() - self._timers[name]
        self.record_metric(f"{name}_duration", elapsed)
        del self._timers[name]
        return elapsed

    def record_metric(self, name: str, value: Any) -> None:
        """Record a metric value."""
        self._metrics[name].append(value)

    def increment_counter(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        return self._counters.get(name, 0)

    def get_metric(self, name: str) -> list:
        """Get all values for a metric."""
        return self._metrics.get(name, [])

    def elapsed_time(self) -> float:
        """Seconds since the collector was created."""
        return self._clock() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Get a flat summary of counters and last metric values."""
        summary: Dict[str, Any] = {'elapsed_seconds': self.elapsed_time()}
        summary.update(self._counters)
        for name, values in self._metrics.items():
            if values:
                summary[name] = values[-1]
        return summary
