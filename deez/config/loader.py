# DEEZ Configuration Loader
# Load, save, and validate YAML configuration files

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from deez.config.defaults import generate_default_config
from deez.config.schema import DeezConfig
from deez.errors import ConfigError

CONFIG_ENV = "DEEZ_CONFIG"


def get_config_dir() -> Path:
    """Get the DEEZ configuration directory."""
    return Path.home() / ".config" / "deez"


def get_config_path() -> Path:
    """Get the configuration file path, `DEEZ_CONFIG` taking precedence."""
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def _read_mapping(config_path: Path) -> dict[str, Any]:
    """
    Parse a YAML file that must hold a mapping. An empty file is an empty mapping.

    Raises:
        ConfigError: If the file is unreadable, not YAML, or not a mapping.
    """
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Could not read configuration '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in '{config_path}': {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration '{config_path}' must be a mapping.")
    return data


def _format_errors(error: ValidationError) -> list[str]:
    return [" -> ".join(str(part) for part in err["loc"]) + f": {err['msg']}" for err in error.errors()]


def load_config(config_path: Optional[Path] = None) -> DeezConfig:
    """
    Load configuration from YAML file.

    The file is optional: a missing one yields the defaults.

    Args:
        config_path: Config file. Uses the default location if not provided.

    Returns:
        DeezConfig: Validated configuration object.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation.
    """
    config_path = config_path or get_config_path()
    if not config_path.exists():
        return DeezConfig()

    data = _read_mapping(config_path)
    try:
        return DeezConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration '{config_path}': {'; '.join(_format_errors(e))}") from e


def ensure_config_exists(config_path: Optional[Path] = None, *, force: bool = False) -> tuple[Path, bool]:
    """
    Write the default configuration unless a file is already there.

    Args:
        config_path: Config file. Uses the default location if not provided.
        force: Overwrite an existing file.

    Returns:
        Tuple of (config_path, was_created).
    """
    config_path = config_path or get_config_path()
    if config_path.exists() and not force:
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Check a configuration file, collecting every problem instead of raising.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    config_path = config_path or get_config_path()
    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        DeezConfig.model_validate(_read_mapping(config_path))
    except ConfigError as e:
        return False, [e.message]
    except ValidationError as e:
        return False, _format_errors(e)
    return True, []
