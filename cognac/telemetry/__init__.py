"""Telemetry backends for pipeline observability."""

from cognac.telemetry.base import TelemetryPort
from cognac.telemetry.inmemory import InMemoryTelemetry
from cognac.telemetry.prometheus import PrometheusConfig, PrometheusTelemetry

__all__ = [
    "TelemetryPort",
    "InMemoryTelemetry",
    "PrometheusConfig",
    "PrometheusTelemetry",
]
