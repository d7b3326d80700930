"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TelemetryConfig(BaseModel):
    """Which metrics backend a pipeline reports to."""

    model_config = ConfigDict(extra="ignore")

    backend: Literal["none", "memory", "prometheus"] = "none"
    host: str = "127.0.0.1"
    port: int = Field(default=9108, ge=1, le=65535)
    namespace: str = "cognac"


class PipelineConfig(BaseSettings):
    """Root configuration for one pipeline.

    Values come from a JSON file (see ``load_config``) or from ``COGNAC_*``
    environment variables, e.g. ``COGNAC_TELEMETRY__BACKEND=prometheus``.
    """

    model_config = SettingsConfigDict(
        extra="ignore", populate_by_name=True, env_prefix="COGNAC_", env_nested_delimiter="__"
    )

    name: str = Field(default="pipeline", min_length=1)
    report_unhandled_errors: bool = True
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
