"""
Configuration Manager for PyUploadHub using Pydantic Settings.

This module provides a type-safe configuration system with:
- Automatic config file discovery
- Environment variable override support with proper type conversion
- Configuration validation with clear error messages
- No circular dependencies with logging
"""

from __future__ import annotations

import os
import tempfile
import yaml
import logging
from typing import Any, ClassVar
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource


# Use basic logging during config initialization (before custom logger is
# set up)
_basic_logger = logging.getLogger(__name__)


class UploadSettings(BaseModel):
    """
    Settings for the upload pipeline.

    Ownership identities are optional; leaving one unset skips that
    correction entirely.
    """
    base_path: str = Field(
        default="uploads",
        description="Root of the date-sharded storage tree")
    allowed_file_types: list[str] = Field(
        default_factory=lambda: ["jpg", "jpeg", "png", "gif", "pdf"],
        description="Accepted file extensions (case-insensitive)"
    )
    web_user: str | None = Field(
        default=None,
        description="Owner applied to created files/directories")
    web_group: str | None = Field(
        default=None,
        description="Group applied to created files/directories")
    spool_dirs: list[str] = Field(
        default_factory=lambda: [tempfile.gettempdir()],
        description="Directories the upload channel writes temporary files to"
    )

    @field_validator("allowed_file_types")
    @classmethod
    def _lowercase_extensions(cls, value: list[str]) -> list[str]:
        return [ext.lower().lstrip(".") for ext in value]

    @field_validator("web_user", "web_group")
    @classmethod
    def _blank_identity_is_unset(cls, value: str | None) -> str | None:
        return value or None


class LoggingSettings(BaseModel):
    """Logging configuration (raw dict for logging.config.dictConfig)."""
    version: int = Field(default=1)
    disable_existing_loggers: bool = Field(default=False)
    formatters: dict[str, Any] = Field(default_factory=dict)
    handlers: dict[str, Any] = Field(default_factory=dict)
    root: dict[str, Any] = Field(default_factory=dict)
    loggers: dict[str, Any] = Field(default_factory=dict)

    # Allow extra fields for logging config flexibility
    model_config = {'extra': 'allow'}


class AppSettings(BaseSettings):
    """
    Main application settings using Pydantic Settings.

    This class automatically:
    - Loads configuration from YAML files
    - Overrides values from environment variables
    - Validates all settings

    Environment variables use the format: PYUPLOADHUB_SECTION__KEY
    Example: PYUPLOADHUB_UPLOADS__BASE_PATH=/srv/uploads
    """

    uploads: UploadSettings = Field(default_factory=UploadSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="PYUPLOADHUB_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Class variable to temporarily store YAML data
    _temp_config_data: ClassVar[dict[str, Any] | None] = None
    _temp_config_path: ClassVar[str | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize the sources and their priority for loading settings.

        Priority (highest to lowest):
        1. Environment variables
        2. YAML file data (if loaded via from_yaml)
        3. Init arguments and defaults
        """
        class YamlSettingsSource(PydanticBaseSettingsSource):
            def get_field_value(
                    self, field: Any, field_name: str) -> tuple[Any, str, bool]:
                if cls._temp_config_data and field_name in cls._temp_config_data:
                    return cls._temp_config_data[field_name], field_name, False
                return None, field_name, False

            def __call__(self) -> dict[str, Any]:
                return cls._temp_config_data or {}

        return (
            env_settings,
            YamlSettingsSource(settings_cls),
            init_settings,
        )

    @classmethod
    def from_yaml(cls, config_path: str | None = None) -> 'AppSettings':
        """
        Load configuration from YAML file with fallback search strategy.

        Search order:
        1. PYUPLOADHUB_CONFIG_PATH environment variable (if set)
        2. ./config.yaml (project root)
        3. pyuploadhub/config/config.yaml (package location)

        Note: Environment variables (PYUPLOADHUB_*) always override YAML values.

        Args:
            config_path: Explicit path to config file (skips search if provided)

        Returns:
            AppSettings instance

        Raises:
            FileNotFoundError: If no config file is found in any location
            ValueError: If config file has invalid structure or values
        """
        if config_path is None:
            config_path = cls._find_config_file()

        _basic_logger.info(f"Loading configuration from: {config_path}")

        try:
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            _basic_logger.error(f"Configuration file not found: {config_path}")
            raise FileNotFoundError(
                f"Configuration file not found: {config_path}\n"
                f"Tried search paths: {cls._get_search_paths()}"
            )
        except yaml.YAMLError as e:
            _basic_logger.error(f"Invalid YAML in config file: {e}")
            raise ValueError(
                f"Invalid YAML in configuration file {config_path}: {e}")

        cls._temp_config_data = config_data
        cls._temp_config_path = config_path

        try:
            settings = cls()
            _basic_logger.info(
                "Configuration loaded and validated successfully")
            return settings
        except ValidationError as e:
            _basic_logger.error(f"Configuration validation failed: {e}")
            raise ValueError(f"Configuration validation failed:\n{e}")
        finally:
            cls._temp_config_data = None
            cls._temp_config_path = None

    @staticmethod
    def _get_search_paths() -> list[str]:
        """Get list of paths to search for config file."""
        return [
            os.getenv("PYUPLOADHUB_CONFIG_PATH", ""),
            "./config.yaml",
            os.path.join(os.path.dirname(__file__), "config.yaml"),
        ]

    @classmethod
    def _find_config_file(cls) -> str:
        """
        Search for config file in multiple locations.

        Returns:
            Path to first found config file

        Raises:
            FileNotFoundError: If no config file is found
        """
        search_paths = cls._get_search_paths()

        for path in search_paths:
            if path and os.path.isfile(path):
                _basic_logger.debug(f"Found config file at: {path}")
                return path

        error_msg = (
            "No configuration file found. Searched in:\n" +
            "\n".join(f"  - {p}" for p in search_paths if p) +
            "\n\nPlease either:\n"
            "  1. Set PYUPLOADHUB_CONFIG_PATH environment variable\n"
            "  2. Place config.yaml in project root"
        )
        _basic_logger.error(error_msg)
        raise FileNotFoundError(error_msg)


class ConfigManager:
    """Singleton wrapper around AppSettings."""

    _instance: 'ConfigManager' | None = None
    _settings: AppSettings | None = None
    _config_path: str | None = None

    @classmethod
    def get_instance(cls) -> 'ConfigManager':
        """Get singleton instance of ConfigManager."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Reset singleton instance (for testing)."""
        cls._instance = None
        cls._settings = None
        cls._config_path = None

    def load(self, config_path: str | None = None) -> dict[str, Any]:
        """
        Load configuration from file.

        Args:
            config_path: Optional path to config file

        Returns:
            Configuration as dictionary
        """
        if self._settings is not None and config_path is None:
            return self._settings.model_dump()

        self._config_path = config_path
        self._settings = AppSettings.from_yaml(config_path)

        return self._settings.model_dump()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Config key in dot notation (e.g., "uploads.base_path")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if self._settings is None:
            self.load()

        keys = key.split(".")
        value = self._settings.model_dump()

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k, default)
                if value is default:
                    break
            else:
                return default

        return value

    def get_config(self) -> dict[str, Any]:
        """Get entire configuration as dictionary."""
        if self._settings is None:
            self.load()
        return self._settings.model_dump()

    def get_config_path(self) -> str | None:
        """Get path to loaded configuration file."""
        return self._config_path

    @property
    def upload_settings(self) -> UploadSettings:
        """Get upload pipeline settings."""
        if self._settings is None:
            self.load()
        return self._settings.uploads

    @property
    def logging_config(self) -> dict[str, Any]:
        """Get logging configuration."""
        if self._settings is None:
            self.load()
        return self._settings.logging.model_dump()


def get_config_manager() -> ConfigManager:
    """
    Get the ConfigManager singleton instance.

    Returns:
        ConfigManager instance
    """
    return ConfigManager.get_instance()


__all__ = [
    'ConfigManager',
    'AppSettings',
    'get_config_manager',
    'UploadSettings',
    'LoggingSettings',
]
