import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from ec2ctl.constants import (
    DEFAULT_AWAIT_TIMEOUT_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    WAITER_DELAY_SECONDS,
    WAITER_MAX_ATTEMPTS,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EC2CTL_CONFIG"
DEFAULT_CONFIG_FILE = "ec2ctl.yaml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigLoader:
    """Load YAML configuration and merge it over built-in defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS: dict[str, Any] = {
            "region": None,
            "timeout": DEFAULT_AWAIT_TIMEOUT_SECONDS,
            "poll_interval": DEFAULT_POLL_INTERVAL_SECONDS,
            "case_sensitive": False,
            "waiter_delay": WAITER_DELAY_SECONDS,
            "waiter_max_attempts": WAITER_MAX_ATTEMPTS,
            "log_level": "WARNING",
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks EC2CTL_CONFIG env var,
            then falls back to ec2ctl.yaml

        Returns
        -------
        dict[str, Any]
            Parsed configuration with a ``defaults`` section, with all
            variable interpolations resolved

        Raises
        ------
        ValueError
            If the file is not valid YAML or interpolation fails
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)

        config_file = Path(config_path)

        if not config_file.exists():
            return {"defaults": {}}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {"defaults": {}}

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if config is None:
            return {"defaults": {}}

        if not isinstance(config, dict):
            raise ValueError(f"Configuration in {config_file} must be a mapping")

        config.setdefault("defaults", {})
        return config

    def get_settings(
        self, config: dict[str, Any], overrides: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Merge built-in defaults, YAML defaults and command-line overrides.

        Parameters
        ----------
        config : dict[str, Any]
            Full configuration from YAML
        overrides : dict[str, Any] | None
            Command-line values; None entries do not override

        Returns
        -------
        dict[str, Any]
            Validated settings
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        for key, value in (config.get("defaults") or {}).items():
            merged[key] = value

        for key, value in (overrides or {}).items():
            if value is not None:
                merged[key] = value

        self.validate_config(merged)
        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate setting types and ranges.

        Raises
        ------
        ValueError
            If a setting is invalid
        """
        unknown = sorted(set(config) - set(self.BUILT_IN_DEFAULTS))
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        if config["region"] is not None and not isinstance(config["region"], str):
            raise ValueError("region must be a string")

        for field in ("timeout", "poll_interval", "waiter_delay"):
            value = config[field]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{field} must be a number")
            if value < 0:
                raise ValueError(f"{field} must not be negative")

        if config["poll_interval"] == 0:
            raise ValueError("poll_interval must be greater than zero")

        attempts = config["waiter_max_attempts"]
        if isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 1:
            raise ValueError("waiter_max_attempts must be a positive integer")

        if not isinstance(config["case_sensitive"], bool):
            raise ValueError("case_sensitive must be a boolean")

        log_level = config["log_level"]
        if not isinstance(log_level, str) or log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
