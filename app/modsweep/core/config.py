"""User configuration for modsweep.

Settings live in ~/.config/modsweep/config.toml and provide defaults for
the library and modlist folders and for backup behaviour, so the CLI can
be run without repeating them.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modsweep.core.errors import ModsweepError
from modsweep.core.paths import get_config_path, get_default_backup_dir


class SweepConfig(BaseModel):
    """Configuration for library cleanup.

    Attributes:
        downloads_dir: Library root holding one folder per game.
        modlists_dir: Folder holding the active modlist containers.
        backup_dir: Where removed archives are moved (None = default).
        use_backup: Move files to the backup folder instead of deleting.
        min_size_mb: Superseded files below this size are left alone.
        max_workers: Thread pool size for scanning (None = automatic).
    """

    model_config = ConfigDict(extra="forbid")

    downloads_dir: Annotated[Path | None, Field(description="Library root")] = None
    modlists_dir: Annotated[Path | None, Field(description="Modlist folder")] = None
    backup_dir: Annotated[Path | None, Field(description="Backup folder")] = None
    use_backup: Annotated[bool, Field(description="Move instead of delete")] = True
    min_size_mb: Annotated[
        float,
        Field(ge=0, description="Minimum size of superseded files to remove"),
    ] = 0.0
    max_workers: Annotated[
        int | None,
        Field(ge=1, le=64, description="Scan thread pool size (1-64)"),
    ] = None

    @property
    def effective_backup_dir(self) -> Path | None:
        """Backup folder to use, or None when backups are disabled."""
        if not self.use_backup:
            return None
        return self.backup_dir or get_default_backup_dir()

    @property
    def min_size_bytes(self) -> int:
        """Minimum superseded file size in bytes."""
        return int(self.min_size_mb * 1024 * 1024)


class ConfigError(ModsweepError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> SweepConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated SweepConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return SweepConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> SweepConfig:
    """Load configuration, falling back to defaults if the file is absent."""
    try:
        return load_config(path)
    except ConfigNotFoundError:
        return SweepConfig()


def _config_to_dict(config: SweepConfig) -> dict[str, Any]:
    """Convert config to a TOML-serializable dict (no None values)."""
    data = config.model_dump(exclude_none=True)
    return {key: str(value) if isinstance(value, Path) else value for key, value in data.items()}


def save_config(config: SweepConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace().

    Args:
        config: The SweepConfig object to save.
        path: Path to save the config. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
