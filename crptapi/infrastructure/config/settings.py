"""Provides functions for loading and accessing configuration settings.

Supports loading from a YAML configuration file (~/.crptapi/config.yaml),
a .env file and environment variables, plus in-memory overrides for tests.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from crptapi.domain.errors import ConfigurationError
from crptapi.domain.models.common import CREATE_DOCUMENT_PATH, DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".crptapi"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

DEFAULT_REQUEST_LIMIT = 5
DEFAULT_WINDOW_SECONDS = 1.0
DEFAULT_TIMEOUT_SECONDS = 30.0

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Test overrides
    2. Environment Variables (key upper-cased, dots replaced by underscores)
    3. .env file (exported into the environment without overriding it)
    4. YAML configuration file
    5. Defaults passed to get_config

    Args:
        config_file: Path to the YAML configuration file (DEFAULT_CONFIG_FILE if None).
        env_file: Path to the .env file (searches upwards from cwd if None).

    Raises:
        ConfigurationError: If the YAML file exists but cannot be parsed.
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load or parse YAML config {config_file}: {e}") from e
        if isinstance(yaml_config, dict):
            _config.update(_flatten(yaml_config))
            logger.info(f"Loaded configuration from YAML: {config_file}")
        elif yaml_config is not None:
            logger.warning(f"YAML config file {config_file} did not contain a mapping.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False keeps real environment variables on top
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (none found).")

    _loaded = True
    logger.debug("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() re-reads sources."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flattens nested YAML mappings into dotted keys ({'api': {'limit': 5}} -> {'api.limit': 5})."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def _env_key(key: str) -> str:
    return f"CRPTAPI_{key.upper().replace('.', '_')}"


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dotted key.

    Priority:
    1. Test configuration
    2. Environment variable CRPTAPI_<KEY> (e.g. api.request_limit -> CRPTAPI_API_REQUEST_LIMIT)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key
        default: Default value if the key is not found

    Returns:
        The configuration value (environment strings are converted to bool/int/float when possible)
    """
    if key in _test_config:
        return _test_config[key]

    env_key = _env_key(key)
    if env_key in os.environ:
        value = os.environ[env_key]
        if value.lower() == "true":
            return True
        elif value.lower() == "false":
            return False
        try:
            if "." in value:
                return float(value)
            else:
                return int(value)
        except (ValueError, TypeError):
            return value

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Typed Accessors ---

def _positive_number(key: str, default: float) -> float:
    value = get_config(key, default)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Setting '{key}' must be a number, got {value!r}.")
    if number <= 0:
        raise ConfigurationError(f"Setting '{key}' must be positive, got {value!r}.")
    return number


def get_base_url() -> str:
    """Base URL of the remote API (the create path is appended to it)."""
    return str(get_config("api.base_url", DEFAULT_BASE_URL))


def get_create_path() -> str:
    return str(get_config("api.create_path", CREATE_DOCUMENT_PATH))


def get_request_limit() -> int:
    """Maximum number of requests per window."""
    value = get_config("api.request_limit", DEFAULT_REQUEST_LIMIT)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"Setting 'api.request_limit' must be an integer, got {value!r}.")
    limit = value
    if limit <= 0:
        raise ConfigurationError(f"Setting 'api.request_limit' must be positive, got {value!r}.")
    return limit


def get_window_seconds() -> float:
    """Length of the rate-limit window in seconds."""
    return _positive_number("api.window_seconds", DEFAULT_WINDOW_SECONDS)


def get_request_timeout() -> float:
    return _positive_number("api.timeout_seconds", DEFAULT_TIMEOUT_SECONDS)


def get_api_token() -> Optional[str]:
    """Bearer token for the remote API, if configured."""
    token = get_config("api.token")
    return str(token) if token else None


def get_max_workers() -> Optional[int]:
    """Dispatcher pool size; None lets the executor pick."""
    value = get_config("dispatch.max_workers")
    if value is None:
        return None
    try:
        workers = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Setting 'dispatch.max_workers' must be an integer, got {value!r}.")
    if workers <= 0:
        raise ConfigurationError(f"Setting 'dispatch.max_workers' must be positive, got {value!r}.")
    return workers


def get_effective_settings() -> Dict[str, Any]:
    """Collects the settings used to build the client, for display."""
    token = get_api_token()
    return {
        "api.base_url": get_base_url(),
        "api.create_path": get_create_path(),
        "api.request_limit": get_request_limit(),
        "api.window_seconds": get_window_seconds(),
        "api.timeout_seconds": get_request_timeout(),
        "api.token": "***" if token else None,
        "dispatch.max_workers": get_max_workers(),
        "logging.level": str(get_config("logging.level", "INFO")).upper(),
    }


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
