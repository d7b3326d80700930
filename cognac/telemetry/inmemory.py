"""In-memory telemetry backend for tests and local runs."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from cognac.telemetry.base import Labels


@dataclass
class InMemoryTelemetry:
    """Keeps every metric in plain dicts so tests can inspect them."""

    counters: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    gauges: dict[str, float] = field(default_factory=dict)
    histograms: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))
    timings: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        self.counters[self._make_key(name, labels)] += value

    def gauge(self, name: str, value: float, labels: Labels = ()) -> None:
        self.gauges[self._make_key(name, labels)] = value

    def histogram(self, name: str, value: float, labels: Labels = ()) -> None:
        self.histograms[self._make_key(name, labels)].append(value)

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        self.timings[self._make_key(name, labels)].append(value)

    @staticmethod
    def _make_key(name: str, labels: Labels) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in labels)
        return f"{name}{{{label_str}}}"

    # ── Test helpers ─────────────────────────────────────────────────────

    def get_counter(self, name: str, labels: Labels = ()) -> int:
        return int(self.counters.get(self._make_key(name, labels), 0))

    def get_gauge(self, name: str, labels: Labels = ()) -> float | None:
        return self.gauges.get(self._make_key(name, labels))

    def get_timing_values(self, name: str, labels: Labels = ()) -> list[float]:
        return list(self.timings.get(self._make_key(name, labels), []))

    def reset(self) -> None:
        self.counters.clear()
        self.gauges.clear()
        self.histograms.clear()
        self.timings.clear()
