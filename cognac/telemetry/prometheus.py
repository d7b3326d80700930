"""Prometheus metrics backend.

Usage:
    telemetry = PrometheusTelemetry(PrometheusConfig(port=9108))
    telemetry.start()
    pipeline = Pipeline(source, name="orders", telemetry=telemetry)

    # Metrics available at http://127.0.0.1:9108/metrics
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, start_http_server

from cognac.telemetry.base import Labels

_DURATION_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


@dataclass
class PrometheusConfig:
    """Configuration for the Prometheus telemetry backend."""

    enabled: bool = True
    port: int = 9108
    host: str = "127.0.0.1"  # localhost only by default
    namespace: str = "cognac"


class PrometheusTelemetry:
    """Prometheus-backed telemetry with a /metrics endpoint.

    Pipeline metrics are registered up front; any other name gets an ad-hoc
    metric whose label names are fixed by its first use.
    """

    def __init__(
        self,
        config: PrometheusConfig | None = None,
        *,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self._config = config or PrometheusConfig()
        self._registry = registry or REGISTRY
        self._metrics: dict[str, Counter | Gauge | Histogram] = {}
        self._started = False

        if not self._config.enabled:
            logger.info("Prometheus telemetry disabled")
            return

        self._register_standard_metrics()

    def _register_standard_metrics(self) -> None:
        ns = self._config.namespace
        self._metrics["items_total"] = Counter(
            f"{ns}_items_total",
            "Items processed, by outcome",
            labelnames=["pipeline", "outcome"],
            registry=self._registry,
        )
        self._metrics["item_failures_total"] = Counter(
            f"{ns}_item_failures_total",
            "Item failures, by failing stage",
            labelnames=["pipeline", "stage"],
            registry=self._registry,
        )
        self._metrics["item_duration_seconds"] = Histogram(
            f"{ns}_item_duration_seconds",
            "Time spent processing one item",
            labelnames=["pipeline"],
            buckets=_DURATION_BUCKETS,
            registry=self._registry,
        )
        self._metrics["items_in_flight"] = Gauge(
            f"{ns}_items_in_flight",
            "Items currently being processed",
            labelnames=["pipeline"],
            registry=self._registry,
        )

    def start(self) -> None:
        """Start the Prometheus HTTP server."""
        if not self._config.enabled or self._started:
            return

        try:
            start_http_server(port=self._config.port, addr=self._config.host, registry=self._registry)
            self._started = True
            logger.info(
                f"Prometheus metrics server started on "
                f"http://{self._config.host}:{self._config.port}/metrics"
            )
        except OSError as e:
            logger.error(f"Failed to start Prometheus server: {e}")
            self._config.enabled = False

    def _metric(self, kind: type[Counter | Gauge | Histogram], name: str, labels: Labels):
        metric = self._metrics.get(name)
        if metric is None:
            metric = kind(
                f"{self._config.namespace}_{name}",
                f"{kind.__name__}: {name}",
                labelnames=[k for k, _ in labels],
                registry=self._registry,
            )
            self._metrics[name] = metric
        elif not isinstance(metric, kind):
            logger.error(
                "Metric {} is a {}, not a {}; dropping sample",
                name,
                type(metric).__name__,
                kind.__name__,
            )
            return None
        if labels:
            return metric.labels(**dict(labels))
        return metric

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        if not self._config.enabled:
            return
        if (metric := self._metric(Counter, name, labels)) is not None:
            metric.inc(value)

    def gauge(self, name: str, value: float, labels: Labels = ()) -> None:
        if not self._config.enabled:
            return
        if (metric := self._metric(Gauge, name, labels)) is not None:
            metric.set(value)

    def histogram(self, name: str, value: float, labels: Labels = ()) -> None:
        if not self._config.enabled:
            return
        if (metric := self._metric(Histogram, name, labels)) is not None:
            metric.observe(value)

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        """Record timing in seconds (alias for histogram)."""
        self.histogram(name, value, labels)
