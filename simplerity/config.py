"""
CLI configuration module.

Manages the Simplerity API base URL, the locations of the credential
files, and runtime settings. Configuration can be loaded from a YAML file
or environment variables.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional

import yaml
from platformdirs import user_config_dir

from simplerity.exceptions import ConfigError, ConfigValidationError

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

APP_NAME = "simplerity"
APP_AUTHOR = "Simplerity"
CONFIG_FILENAME = "simplerity-config.yaml"

# Environment variable names
ENV_BASE_URL = "SIMPLERITY_BASE_URL"
ENV_SESSION_FILE = "SIMPLERITY_SESSION_FILE"
ENV_REGISTRATION_FILE = "SIMPLERITY_REGISTRATION_FILE"
ENV_LOG_LEVEL = "SIMPLERITY_LOG_LEVEL"
ENV_TIMEOUT = "SIMPLERITY_TIMEOUT"
ENV_CONFIG_PATH = "SIMPLERITY_CONFIG_PATH"

# Default values
DEFAULT_BASE_URL = "https://api.simplerity.com"
DEFAULT_SESSION_FILE = "user_credentials.json"
DEFAULT_REGISTRATION_FILE = "agent_credentials.json"
DEFAULT_LOG_LEVEL = "WARNING"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# URL validation regex
URL_PATTERN = re.compile(
    r"^https?://"  # http:// or https://
    r"(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|"  # domain
    r"localhost|"  # localhost
    r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})"  # ...or ip
    r"(?::\d+)?"  # optional port
    r"(?:/?|[/?]\S+)$",
    re.IGNORECASE,
)


# ============================================================================
# Helper Functions
# ============================================================================


def get_default_config_dir() -> Path:
    """
    Get the default configuration directory for the current platform.

    Returns:
        Path to the platform-appropriate config directory
    """
    return Path(user_config_dir(APP_NAME, APP_AUTHOR))


def get_default_config_path() -> Path:
    """
    Get the default configuration file path.

    Returns:
        Path to the default config file
    """
    return get_default_config_dir() / CONFIG_FILENAME


def _parse_timeout(value) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigValidationError(f"timeout must be a number, got: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigValidationError(f"timeout must be a number, got: {value!r}")


def _get_string(data: dict, key: str, default: str) -> str:
    """Read a string setting from the config file mapping."""
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ConfigValidationError(f"{key} must be a string, got: {value!r}")
    return value


# ============================================================================
# SimplerityConfig Class
# ============================================================================


class SimplerityConfig:
    """
    CLI configuration manager.

    Configuration sources (in priority order):
    1. Environment variables
    2. Configuration file
    3. Default values

    Attributes:
        base_url: Simplerity API base URL
        session_file: Path of the user session credentials file
        registration_file: Path of the agent registration credentials file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        timeout: HTTP timeout in seconds, None for the httpx default
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        config_dir: Optional[Path] = None,
    ):
        """
        Initialize CLI configuration.

        Args:
            config_path: Explicit path to config file (takes precedence)
            config_dir: Directory containing config file

        Raises:
            ConfigError: If the config file exists but cannot be parsed
        """
        if config_path:
            self._config_path = Path(config_path)
        elif config_dir:
            self._config_path = Path(config_dir) / CONFIG_FILENAME
        else:
            env_path = os.environ.get(ENV_CONFIG_PATH)
            if env_path:
                self._config_path = Path(env_path)
            else:
                self._config_path = get_default_config_path()

        self._base_url: str = DEFAULT_BASE_URL
        self._session_file: str = DEFAULT_SESSION_FILE
        self._registration_file: str = DEFAULT_REGISTRATION_FILE
        self._log_level: str = DEFAULT_LOG_LEVEL
        self._timeout: Optional[float] = None

        self._load()

    @property
    def config_path(self) -> Path:
        """Get the configuration file path."""
        return self._config_path

    # -------------------------------------------------------------------------
    # Configuration Properties
    # -------------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        """Get the API base URL."""
        return os.environ.get(ENV_BASE_URL, self._base_url)

    @base_url.setter
    def base_url(self, value: str) -> None:
        self._base_url = value

    @property
    def session_file(self) -> Path:
        """Get the user session credentials file path."""
        return Path(os.environ.get(ENV_SESSION_FILE, self._session_file))

    @session_file.setter
    def session_file(self, value) -> None:
        self._session_file = str(value)

    @property
    def registration_file(self) -> Path:
        """Get the agent registration credentials file path."""
        return Path(os.environ.get(ENV_REGISTRATION_FILE, self._registration_file))

    @registration_file.setter
    def registration_file(self, value) -> None:
        self._registration_file = str(value)

    @property
    def log_level(self) -> str:
        """Get the log level."""
        return os.environ.get(ENV_LOG_LEVEL, self._log_level).upper()

    @log_level.setter
    def log_level(self, value: str) -> None:
        self._log_level = value

    @property
    def timeout(self) -> Optional[float]:
        """Get the HTTP timeout in seconds."""
        env_timeout = os.environ.get(ENV_TIMEOUT)
        if env_timeout:
            return _parse_timeout(env_timeout)
        return self._timeout

    @timeout.setter
    def timeout(self, value: Optional[float]) -> None:
        self._timeout = value

    # -------------------------------------------------------------------------
    # Configuration Management
    # -------------------------------------------------------------------------

    def _load(self) -> None:
        """
        Load configuration from file.

        Raises:
            ConfigError: If the file cannot be read or parsed
            ConfigValidationError: If a setting has the wrong type
        """
        if not self._config_path.exists():
            return

        try:
            with open(self._config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to read config file: {e}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}")

        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file {self._config_path} must contain a mapping"
            )

        self._base_url = _get_string(data, "base_url", DEFAULT_BASE_URL)
        self._session_file = _get_string(data, "session_file", DEFAULT_SESSION_FILE)
        self._registration_file = _get_string(
            data, "registration_file", DEFAULT_REGISTRATION_FILE
        )
        self._log_level = _get_string(data, "log_level", DEFAULT_LOG_LEVEL)
        self._timeout = _parse_timeout(data.get("timeout"))

        logger.debug(f"Loaded configuration from {self._config_path}")

    def validate(self) -> None:
        """
        Validate the current configuration.

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        if not URL_PATTERN.match(self.base_url):
            raise ConfigValidationError(f"Invalid base_url format: {self.base_url}")

        if not os.environ.get(ENV_SESSION_FILE, self._session_file).strip():
            raise ConfigValidationError("session_file must not be empty")

        if not os.environ.get(ENV_REGISTRATION_FILE, self._registration_file).strip():
            raise ConfigValidationError("registration_file must not be empty")

        if self.log_level not in LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got: {self.log_level}"
            )

        timeout = self.timeout
        if timeout is not None and timeout <= 0:
            raise ConfigValidationError(f"timeout must be positive, got: {timeout}")
