"""
Game config persistence.

Loads ForgeConfig from pretty-printed JSON once per run.

INVARIANTS:
- A missing or corrupt file never fails the run: defaults are regenerated,
  persisted, and used
- A valid file is never overwritten by load_config
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from barnacleforge.models.failure import CardIOError, ConfigCorruptError
from barnacleforge.models.tables import ForgeConfig

logger = logging.getLogger(__name__)


def dump_config(config: ForgeConfig) -> str:
    """Pretty-printed JSON for a config."""
    return config.model_dump_json(indent=2)


def parse_config(text: str, path: Path | str = "<string>") -> ForgeConfig:
    """
    Parse a config from JSON text.

    Raises:
        ConfigCorruptError: If the text is not a valid config
    """
    try:
        return ForgeConfig.model_validate_json(text)
    except ValidationError as e:
        raise ConfigCorruptError(str(path), detail=f"{e.error_count()} validation error(s)") from e


def save_config(config: ForgeConfig, path: Path) -> Path:
    """
    Write a config, replacing any existing file.

    Raises:
        CardIOError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_config(config), encoding="utf-8")
    except OSError as e:
        raise CardIOError(str(path), "write config", detail=str(e)) from e
    return path


def load_config(path: Path) -> ForgeConfig:
    """
    Load the game config, regenerating defaults when needed.

    Args:
        path: Location of config.json

    Returns:
        The stored config, or the defaults if the file was missing/corrupt
    """
    if not path.exists():
        logger.info("No config at %s, writing defaults", path)
        return _write_defaults(path)

    try:
        text = path.read_text(encoding="utf-8")
        return parse_config(text, path)
    except ConfigCorruptError as e:
        logger.warning("%s", e.describe())
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read config %s: %s", path, e)

    return _write_defaults(path)


def _write_defaults(path: Path) -> ForgeConfig:
    config = ForgeConfig()
    try:
        save_config(config, path)
    except CardIOError as e:
        logger.error("%s", e.describe())
    return config
