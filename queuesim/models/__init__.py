"""Configuration models."""

from .stage_config import InvalidConfigurationError, StageConfig, validate_config

__all__ = ["InvalidConfigurationError", "StageConfig", "validate_config"]
