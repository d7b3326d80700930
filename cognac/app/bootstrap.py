"""Wire a pipeline and its telemetry backend from configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar, assert_never

from loguru import logger

from cognac.core.pipeline import Pipeline
from cognac.telemetry import InMemoryTelemetry, PrometheusConfig, PrometheusTelemetry

if TYPE_CHECKING:
    from cognac.config.schema import PipelineConfig, TelemetryConfig
    from cognac.core.source import Source
    from cognac.telemetry import TelemetryPort


T = TypeVar("T")

# One backend per (host, port, namespace); pipelines are told apart by label.
_prometheus_backends: dict[tuple[str, int, str], PrometheusTelemetry] = {}


def build_telemetry(config: TelemetryConfig) -> TelemetryPort | None:
    match config.backend:
        case "none":
            return None
        case "memory":
            return InMemoryTelemetry()
        case "prometheus":
            key = (config.host, config.port, config.namespace)
            telemetry = _prometheus_backends.get(key)
            if telemetry is None:
                telemetry = PrometheusTelemetry(
                    PrometheusConfig(
                        host=config.host, port=config.port, namespace=config.namespace
                    )
                )
                telemetry.start()
                _prometheus_backends[key] = telemetry
            return telemetry
        case _:
            assert_never(config.backend)


def build_pipeline(
    source: Source[T],
    config: PipelineConfig,
    *,
    telemetry: TelemetryPort | None = None,
) -> Pipeline[T]:
    """Create a pipeline bound to ``source``.

    An explicit ``telemetry`` wins over the backend named in ``config``.
    """
    if telemetry is None:
        telemetry = build_telemetry(config.telemetry)
    logger.debug(
        "Building pipeline {} (telemetry={})", config.name, type(telemetry).__name__
    )
    return Pipeline(
        source,
        name=config.name,
        telemetry=telemetry,
        report_unhandled=config.report_unhandled_errors,
    )
