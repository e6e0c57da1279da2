"""XDG-compliant path management for modsweep.

XDG defaults:
- Config: ~/.config/modsweep/
- State: ~/.local/state/modsweep/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "modsweep"


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
        Path to ~/.config/modsweep/ (or XDG_CONFIG_HOME/modsweep/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Returns:
        Path to ~/.local/state/modsweep/ (or XDG_STATE_HOME/modsweep/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/modsweep/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_default_backup_dir() -> Path:
    """Get the default folder that removed archives are moved to.

    Returns:
        Path to ~/.local/state/modsweep/backups/.
    """
    return get_state_dir() / "backups"
