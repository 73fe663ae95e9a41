"""Configuration management for entity-checker using YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from entity_checker.checker import DEFAULT_MAX_DEPTH

logger = structlog.get_logger()

CONFIG_DIR_NAME = ".entity-checker"

SCHEMA_PATH = "schema.path"
SCHEMA_LOCALES = "schema.locales"
CHECKER_MAX_DEPTH = "checker.max_depth"


class Config:
    """Configuration manager using YAML file storage.

    Local config is stored in .entity-checker/config.yaml in the current
    directory, global config in ~/.entity-checker/config.yaml. Values are
    looked up in local config first, then in global config.
    """

    def __init__(self, use_global: bool = False, config_dir: Path | None = None, global_dir: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            use_global: If True, use global config only. If False, use local config with global fallback.
            config_dir: Custom directory to store config file (overrides use_global)
            global_dir: Custom directory of the global config used as fallback
        """
        global_dir = Path(global_dir) if global_dir is not None else Path.home() / CONFIG_DIR_NAME
        if config_dir is not None:
            self.config_dir = Path(config_dir)
            self.is_global = use_global
        elif use_global:
            self.config_dir = global_dir
            self.is_global = True
        else:
            self.config_dir = Path.cwd() / CONFIG_DIR_NAME
            self.is_global = False

        self.config_file = self.config_dir / "config.yaml"
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config: dict[str, Any] = self._load(self.config_file)

        self._global_config: dict[str, Any] = {}
        if not self.is_global:
            global_file = global_dir / "config.yaml"
            if global_file.exists() and global_file != self.config_file:
                try:
                    self._global_config = self._load(global_file)
                except ValueError as e:
                    logger.warning("Failed to load global config", error=str(e))

        logger.debug("Config initialized", config_file=str(self.config_file), is_global=self.is_global)

    @staticmethod
    def _load(config_file: Path) -> dict[str, Any]:
        """Load configuration from a YAML file.

        Returns:
            Configuration dictionary, empty if the file doesn't exist

        Raises:
            ValueError: If the file can't be read or doesn't hold a mapping
        """
        if not config_file.exists():
            logger.debug("Config file does not exist, initializing empty config", config_file=str(config_file))
            return {}

        try:
            with open(config_file, "r") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load config", error=str(e))
            raise ValueError(f"Failed to load config from {config_file}: {e}") from e
        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")
        logger.debug("Config loaded successfully", keys=list(config.keys()))
        return config

    def _save(self) -> None:
        try:
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
            logger.debug("Config saved successfully")
        except OSError as e:
            logger.error("Failed to save config", error=str(e))
            raise ValueError(f"Failed to save config to {self.config_file}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value, local first, then global.

        Args:
            key: Configuration key
            default: Default value if key doesn't exist

        Returns:
            Configuration value or default
        """
        if key in self._config:
            logger.debug("Getting config value from local", key=key)
            return self._config[key]
        if not self.is_global and key in self._global_config:
            logger.debug("Getting config value from global", key=key)
            return self._global_config[key]
        logger.debug("Config value not found", key=key)
        return default

    def set(self, key: str, value: str) -> None:
        logger.debug("Setting config value", key=key)
        self._config[key] = value
        self._save()

    def unset(self, key: str) -> None:
        logger.debug("Unsetting config value", key=key)
        if key in self._config:
            del self._config[key]
            self._save()

    def list(self) -> dict[str, Any]:
        """List all configuration settings, local ones overriding global ones."""
        if self.is_global:
            return self._config.copy()
        merged = self._global_config.copy()
        merged.update(self._config)
        return merged

    def schema_path(self) -> Path | None:
        """Path of the YAML schema file, relative paths being relative to the current directory."""
        value = self.get(SCHEMA_PATH)
        return Path(value).expanduser() if value else None

    def max_depth(self) -> int:
        """Maximum nesting of structures allowed by the checker.

        Raises:
            ValueError: If the configured value is not a positive integer
        """
        value = self.get(CHECKER_MAX_DEPTH)
        if value is None:
            return DEFAULT_MAX_DEPTH
        try:
            depth = int(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{CHECKER_MAX_DEPTH} must be an integer, got {value!r}") from e
        if depth < 1:
            raise ValueError(f"{CHECKER_MAX_DEPTH} must be positive, got {depth}")
        return depth

    def default_locales(self) -> list[str] | None:
        """Locales overriding the ones of the schema file, None if not configured."""
        value = self.get(SCHEMA_LOCALES)
        if not value:
            return None
        if isinstance(value, list):
            return [str(locale) for locale in value]
        return [locale.strip() for locale in str(value).split(",") if locale.strip()]


def get_config(use_global: bool = False) -> Config:
    """Get a configuration instance.

    Args:
        use_global: If True, return global config. If False, return local config with global fallback.

    Returns:
        Config instance
    """
    return Config(use_global=use_global)
