"""Telemetry port the pipeline reports item outcomes through."""

from __future__ import annotations

from typing import Protocol, TypeAlias, runtime_checkable

Labels: TypeAlias = tuple[tuple[str, str], ...]


@runtime_checkable
class TelemetryPort(Protocol):
    """Protocol for metric backends (Prometheus, in-memory, etc.).

    Metrics emitted by ``Pipeline``:
    - ``items_total``: counter labelled by pipeline and outcome
      (``completed``, ``rejected``, ``failed``)
    - ``item_failures_total``: counter labelled by pipeline and failing stage
    - ``item_duration_seconds``: timing of one item, success or failure
    - ``items_in_flight``: gauge of items currently inside ``process``
    """

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        """Increase a named counter by ``value`` with optional labels.

        Args:
            name: Metric name (e.g., "items_total")
            value: Amount to increment (default 1)
            labels: Optional label tuples (e.g., (("pipeline", "orders"),))
        """

    def gauge(self, name: str, value: float, labels: Labels = ()) -> None:
        """Set a gauge value."""

    def histogram(self, name: str, value: float, labels: Labels = ()) -> None:
        """Observe a histogram value."""

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        """Record the duration of an operation in seconds."""
