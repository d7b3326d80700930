from cognac.app.bootstrap import build_pipeline, build_telemetry

__all__ = ["build_pipeline", "build_telemetry"]
