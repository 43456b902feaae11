"""
Configuration and parameter loading using Pydantic.

This module provides centralized configuration management for the entire application.
All parameters are loaded from YAML and validated using Pydantic models.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tracker_interlink.utils.exceptions import ConfigurationError


class AnalysisConfig(BaseModel):
    """
    Interlink analysis configuration.

    The defaults are product-tuned constants; changing them changes which
    correlations are reported.
    """

    timezone: str = Field("UTC", description="IANA timezone used for local day boundaries")
    min_days_threshold: int = Field(14, ge=1, description="Days of history required")
    min_trackers_with_data: int = Field(2, ge=1, description="Trackers with samples required")
    min_sample_size: int = Field(6, ge=2, description="Aligned points required per lag")
    significance_threshold: float = Field(0.3, ge=0.0, le=1.0)
    max_lag_days: int = Field(3, ge=0, description="Lag search window is -N..N days")
    moderate_threshold: float = Field(0.5, ge=0.0, le=1.0)
    strong_threshold: float = Field(0.7, ge=0.0, le=1.0)
    include_intensity_field: bool = True
    timeline_max_pairs: int = Field(4, ge=1)
    suggested_pairs_limit: int = Field(3, ge=1)

    @model_validator(mode="after")
    def _check_strength_bands(self) -> "AnalysisConfig":
        if self.moderate_threshold > self.strong_threshold:
            raise ValueError("moderate_threshold must not exceed strong_threshold")
        return self


class OutputConfig(BaseModel):
    """Output configuration."""

    dir: str = "output"
    report_file: str = "interlink_report.json"
    indent: int = 2


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    console: bool = True


class AppConfig(BaseSettings):
    """Main application configuration."""

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="TIL_", case_sensitive=False)


class ParameterLoader:
    """
    Centralized parameter loader for the application.

    Loads and validates configuration from YAML files using Pydantic models.
    Provides type-safe access to all configuration parameters.
    """

    def __init__(self, config_path: str = "config/config.yaml") -> None:
        """
        Initialize parameter loader.

        Args:
            config_path: Path to the YAML configuration file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        self.config_path = Path(config_path)
        self.config: AppConfig
        self._load_config()

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid.
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}

            self.config = AppConfig(**config_dict)

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse YAML configuration: {e}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

    def get_analysis_config(self) -> AnalysisConfig:
        """Get interlink analysis configuration."""
        return self.config.analysis

    def get_output_config(self) -> OutputConfig:
        """Get output configuration."""
        return self.config.output

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        return self.config.logging
