"""
Configuration loader for the catalog sync system.

Reads the YAML configuration file, validates it against the Pydantic models
and applies command line overrides on top of the file values.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .models import CatalogSyncConfig


class ConfigLoader:
    """Loads and validates catalog sync configuration."""

    @staticmethod
    def load_from_file(config_path: Union[str, Path]) -> CatalogSyncConfig:
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file {config_path}: {e}"
            ) from e

        if raw_config is None:
            raw_config = {}
        if not isinstance(raw_config, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a mapping at the top level"
            )

        return ConfigLoader.load_from_dict(raw_config)

    @staticmethod
    def load_from_dict(raw_config: Dict[str, Any]) -> CatalogSyncConfig:
        """Validate a configuration mapping."""
        try:
            return CatalogSyncConfig.model_validate(raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @staticmethod
    def load(config_path: Optional[Union[str, Path]] = None) -> CatalogSyncConfig:
        """Load from a file when given, otherwise return the defaults."""
        if config_path is None:
            return CatalogSyncConfig()
        return ConfigLoader.load_from_file(config_path)

    @staticmethod
    def with_overrides(
        config: CatalogSyncConfig,
        store_url: Optional[str] = None,
        snapshot_path: Optional[str] = None,
        batch_size: Optional[int] = None,
        max_workers: Optional[int] = None,
        skip_malformed: Optional[bool] = None,
        generator_size: Optional[int] = None,
        generator_seed: Optional[int] = None,
        log_level: Optional[str] = None,
    ) -> CatalogSyncConfig:
        """
        Return a copy of the configuration with command line values applied.

        Only arguments that are not None replace file values. The result is
        validated again so overrides obey the same bounds as file values.
        """
        raw_config = config.model_dump()
        overrides = [
            ("store", "url", store_url),
            ("snapshot", "path", snapshot_path),
            ("snapshot", "skip_malformed_records", skip_malformed),
            ("sync", "batch_size", batch_size),
            ("concurrency", "max_workers", max_workers),
            ("generator", "size", generator_size),
            ("generator", "seed", generator_seed),
            ("logging", "level", log_level),
        ]
        for section, key, value in overrides:
            if value is not None:
                raw_config[section][key] = value

        return ConfigLoader.load_from_dict(raw_config)
