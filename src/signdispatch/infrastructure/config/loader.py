"""Configuration loading and validation."""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field, fields

from signdispatch.domain.exceptions import ConfigurationError
from signdispatch.domain.models import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT, RunMode
from signdispatch.infrastructure.ossign.client import (
    CHECK_ENDPOINTS,
    DEFAULT_API_BASE,
    DEFAULT_REQUEST_TIMEOUT,
)
from signdispatch.shared.logging import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = ("true", "1", "yes")

# Keys read as plain strings from a config file
_STRING_KEYS = (
    "username",
    "token",
    "single_check",
    "ref",
    "repository",
    "api_base",
    "check_endpoint",
)
_FLOAT_KEYS = ("request_timeout", "poll_interval", "timeout")


def parse_flag(value: Any, name: str) -> bool:
    """Interpret a boolean setting given as a bool or a string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    raise ConfigurationError(f"{name} must be a boolean, got: {value!r}")


@dataclass
class ActionConfig:
    """Configuration for one dispatcher run."""

    # Required inputs
    username: str
    token: str = field(repr=False)

    # Mode selection
    dispatch_only: bool = False
    single_check: Optional[str] = None

    # Trigger context
    ref: Optional[str] = None
    repository: Optional[str] = None

    # Remote service
    api_base: str = DEFAULT_API_BASE
    check_endpoint: str = "check"
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    # Polling
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float = DEFAULT_TIMEOUT
    max_check_attempts: int = 5

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration values."""
        if not self.username or not str(self.username).strip():
            raise ConfigurationError("Username is required")

        if not self.token or not str(self.token).strip():
            raise ConfigurationError("Token is required")

        if not isinstance(self.dispatch_only, bool):
            raise ConfigurationError(
                f"dispatch_only must be a boolean, got: {self.dispatch_only!r}"
            )

        if self.single_check is not None:
            self.single_check = str(self.single_check).strip() or None

        if self.check_endpoint not in CHECK_ENDPOINTS:
            raise ConfigurationError(f"Invalid check_endpoint: {self.check_endpoint}")

        for name in ("poll_interval", "timeout", "request_timeout"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got: {value}")

        if self.max_check_attempts < 1:
            raise ConfigurationError(
                f"max_check_attempts must be at least 1, got: {self.max_check_attempts}"
            )

    @property
    def mode(self) -> RunMode:
        """Run mode implied by the inputs; single check wins over dispatch only."""
        if self.single_check:
            return RunMode.SINGLE_CHECK
        if self.dispatch_only:
            return RunMode.DISPATCH_ONLY
        return RunMode.FULL


class ConfigLoader:
    """Loads and validates configuration from YAML files and environment variables."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize config loader.

        Args:
            config_path: Optional path to YAML config file
        """
        self.config_path = config_path
        self._logger = get_logger(__name__)

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> ActionConfig:
        """
        Load configuration from file and environment.

        Environment variables take precedence over the config file and
        runtime overrides take precedence over both.

        Returns:
            ActionConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_dict: Dict[str, Any] = {}

        if self.config_path is not None:
            config_dict.update(self._load_from_file(self.config_path))

        config_dict.update(self._load_from_env())

        # Apply runtime overrides (from CLI) if provided
        if overrides:
            for k, v in overrides.items():
                if v is None:
                    continue
                config_dict[k] = v

        # Filter to only known ActionConfig fields
        valid_fields = {f.name for f in fields(ActionConfig)}
        unknown = sorted(set(config_dict) - valid_fields)
        if unknown:
            self._logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

        filtered_config = {k: v for k, v in config_dict.items() if k in valid_fields}

        for required in ("username", "token"):
            filtered_config.setdefault(required, "")

        try:
            return ActionConfig(**filtered_config)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    def _load_from_file(self, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML file."""
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        self._logger.info(f"Loading config from {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        return self._coerce_file_values(data, path)

    def _coerce_file_values(self, data: Dict[str, Any], path: Path) -> Dict[str, Any]:
        """Normalize YAML scalars to the types ActionConfig expects."""
        values: Dict[str, Any] = {}

        for key, value in data.items():
            if value is None:
                continue

            if key in _STRING_KEYS:
                values[key] = str(value).strip()
            elif key == "dispatch_only":
                values[key] = parse_flag(value, key)
            elif key in _FLOAT_KEYS or key == "max_check_attempts":
                cast = int if key == "max_check_attempts" else float
                try:
                    values[key] = cast(value)
                except (TypeError, ValueError):
                    self._logger.warning(f"Invalid {key} value in {path}: {value!r}")
            else:
                values[key] = value

        if "check_endpoint" in values:
            values["check_endpoint"] = values["check_endpoint"].lower()

        return values

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        # Action inputs
        if username := os.getenv("INPUT_USERNAME"):
            env_config["username"] = username

        if token := os.getenv("INPUT_TOKEN"):
            env_config["token"] = token

        if dispatch_only := os.getenv("INPUT_DISPATCH_ONLY"):
            env_config["dispatch_only"] = parse_flag(dispatch_only, "INPUT_DISPATCH_ONLY")

        if single_check := os.getenv("INPUT_SINGLE_CHECK"):
            env_config["single_check"] = single_check.strip()

        # Trigger context
        if ref := os.getenv("GITHUB_REF"):
            env_config["ref"] = ref

        if repository := os.getenv("GITHUB_REPOSITORY"):
            env_config["repository"] = repository

        # Remote service
        if api_base := os.getenv("OSSIGN_API_BASE"):
            env_config["api_base"] = api_base

        if check_endpoint := os.getenv("OSSIGN_CHECK_ENDPOINT"):
            env_config["check_endpoint"] = check_endpoint.lower()

        # Timing
        for env_name, key in (
            ("OSSIGN_REQUEST_TIMEOUT", "request_timeout"),
            ("OSSIGN_POLL_INTERVAL", "poll_interval"),
            ("OSSIGN_TIMEOUT", "timeout"),
        ):
            if value := os.getenv(env_name):
                try:
                    env_config[key] = float(value)
                except ValueError:
                    self._logger.warning(f"Invalid {env_name} value: {value}")

        if attempts := os.getenv("OSSIGN_MAX_CHECK_ATTEMPTS"):
            try:
                env_config["max_check_attempts"] = int(attempts)
            except ValueError:
                self._logger.warning(f"Invalid OSSIGN_MAX_CHECK_ATTEMPTS value: {attempts}")

        return env_config
