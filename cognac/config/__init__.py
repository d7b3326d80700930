"""Configuration module for cognac."""

from cognac.config.loader import get_config_path, load_config, save_config
from cognac.config.schema import PipelineConfig, TelemetryConfig

__all__ = ["PipelineConfig", "TelemetryConfig", "load_config", "save_config", "get_config_path"]
