"""Configuration loader for covrelay."""

import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..domain.models import CovRelayError
from .models import CovRelayConfig

logger = logging.getLogger(__name__)


class ConfigurationError(CovRelayError):
    """Raised when configuration loading or validation fails."""

    pass


class ConfigLoader:
    """Configuration loader that merges config files, environment variables, and CLI arguments."""

    DEFAULT_CONFIG_FILES = [
        ".covrelay.toml",  # TOML files (preferred)
        ".covrelay.yml",
        ".covrelay.yaml",
        "covrelay.toml",
        "covrelay.yml",
        "covrelay.yaml",
    ]

    ENV_PREFIX = "COVRELAY_"

    def __init__(
        self,
        config_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        """Initialize the configuration loader.

        Args:
            config_file: Path to configuration file. If None, will search for default files.
            environ: Environment to read overrides from (default: os.environ)
        """
        self.config_file = Path(config_file) if config_file else None
        self._environ = os.environ if environ is None else environ

    def load_config(self, cli_overrides: dict[str, Any] | None = None) -> CovRelayConfig:
        """Load configuration from all sources.

        Args:
            cli_overrides: CLI argument overrides, nested by section

        Returns:
            Validated covrelay configuration

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_dict: dict[str, Any] = {}

        file_config = self._load_config_file()
        if file_config:
            config_dict = self._deep_merge(config_dict, file_config)
            logger.debug(f"Loaded configuration from {self._get_config_file_path()}")

        env_config = self._load_env_config()
        if env_config:
            config_dict = self._deep_merge(config_dict, env_config)
            logger.debug("Applied environment variable overrides")

        if cli_overrides:
            config_dict = self._deep_merge(config_dict, cli_overrides)
            logger.debug("Applied CLI argument overrides")

        try:
            return CovRelayConfig(**config_dict)
        except ValidationError as e:
            error_msg = f"Configuration validation failed: {e}"
            logger.debug(error_msg)
            raise ConfigurationError(error_msg) from e

    def _load_config_file(self) -> dict[str, Any] | None:
        """Load configuration from TOML or YAML file."""
        config_file = self._get_config_file_path()

        if not config_file:
            logger.debug("No configuration file found, using defaults")
            return None
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file {config_file} does not exist")

        try:
            if config_file.suffix.lower() == ".toml":
                return self._load_toml_file(config_file)
            elif config_file.suffix.lower() in (".yml", ".yaml"):
                return self._load_yaml_file(config_file)
            else:
                raise ConfigurationError(
                    f"Unknown configuration file type: {config_file}"
                )

        except OSError as e:
            raise ConfigurationError(f"Failed to read {config_file}: {e}") from e

    def _load_toml_file(self, config_file: Path) -> dict[str, Any] | None:
        """Load configuration from TOML file."""
        try:
            with open(config_file, "rb") as f:
                content = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {config_file}: {e}") from e

        if not content:
            logger.warning(f"Configuration file {config_file} is empty")
            return None
        return content

    def _load_yaml_file(self, config_file: Path) -> dict[str, Any] | None:
        """Load configuration from YAML file."""
        try:
            with open(config_file, encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

        if not content:
            logger.warning(f"Configuration file {config_file} is empty")
            return None
        if not isinstance(content, dict):
            raise ConfigurationError(f"Configuration file {config_file} must be a mapping")
        return content

    def _load_env_config(self) -> dict[str, Any]:
        """Load configuration from environment variables.

        ``COVRELAY_SEND__REPO_TOKEN`` sets ``send.repo_token``. Variables that
        do not name a configuration section are not settings and are skipped.
        String settings keep their value exactly as given.
        """
        env_config: dict[str, Any] = {}

        for key, value in self._environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            config_key = key[len(self.ENV_PREFIX) :].lower()
            nested_keys = config_key.split("__")
            if len(nested_keys) < 2 or nested_keys[0] not in CovRelayConfig.model_fields:
                logger.debug(f"Ignoring environment variable {key}")
                continue
            if not self._is_string_setting(nested_keys):
                value = self._parse_env_value(value)
            self._set_nested_value(env_config, nested_keys, value)

        return env_config

    def _is_string_setting(self, keys: list[str]) -> bool:
        """Whether ``section.key`` is declared as a plain string setting."""
        if len(keys) != 2:
            return False
        section = CovRelayConfig.model_fields[keys[0]].annotation
        field = section.model_fields.get(keys[1])
        return field is not None and field.annotation in (str, str | None)

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to appropriate Python type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        elif value.lower() in ("false", "no", "off"):
            return False

        try:
            if "." not in value:
                return int(value)
            else:
                return float(value)
        except ValueError:
            pass

        if "," in value:
            return [item.strip() for item in value.split(",")]

        return value

    def _set_nested_value(self, config: dict[str, Any], keys: list, value: Any) -> None:
        """Set a nested value in the configuration dictionary."""
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _get_config_file_path(self) -> Path | None:
        """Get the path to the configuration file."""
        if self.config_file:
            return self.config_file

        for filename in self.DEFAULT_CONFIG_FILES:
            path = Path(filename)
            if path.exists():
                return path

        return None

    def _deep_merge(
        self, base: dict[str, Any], updates: dict[str, Any]
    ) -> dict[str, Any]:
        """Deeply merge updates into base dictionary."""
        result = base.copy()

        for key, value in updates.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
