# DEEZ Default Configuration
# Default configuration as Python dict and YAML generator

from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "root": None,
    "verbose": False,
    "ignore": [],
    "output": {
        "colored": True,
        "pager": True,
    },
    "clean": {
        "prune_empty_dirs": True,
    },
    "diff": {
        "context_lines": 3,
    },
}

_HEADER = """\
# deez configuration
#
# root:     default config root, used when neither the current directory
#           nor any of its parents contains a `.deez` file.
# ignore:   extra gitignore-style patterns, relative to the root.
# hooks:    `shell` is the interpreter prefix for hook scripts,
#           e.g. ["bash", "-c"]. Defaults to the platform shell.
#
"""


def generate_default_config() -> str:
    """
    Generate the default configuration file content.

    Returns:
        YAML document with a leading comment block.
    """
    body = yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return _HEADER + body
