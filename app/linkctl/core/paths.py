"""XDG-compliant path management for linkctl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration storage.

XDG defaults:
- Config: ~/.config/linkctl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "linkctl"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/linkctl/ (or XDG_CONFIG_HOME/linkctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_manifest_path() -> Path:
    """Get the default link manifest path.

    Returns:
        Path to ~/.config/linkctl/links.toml.
    """
    return get_config_dir() / "links.toml"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/linkctl/theme.toml.
    """
    return get_config_dir() / "theme.toml"
