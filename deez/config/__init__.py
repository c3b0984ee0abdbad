# DEEZ Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from deez.config.defaults import DEFAULT_CONFIG, generate_default_config
from deez.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from deez.config.schema import (
    CleanConfig,
    DeezConfig,
    DiffConfig,
    HooksConfig,
    OutputConfig,
)

__all__ = [
    # Schema
    "DeezConfig",
    "OutputConfig",
    "HooksConfig",
    "CleanConfig",
    "DiffConfig",
    # Loader
    "load_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
