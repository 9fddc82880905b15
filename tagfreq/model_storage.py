"""
Location of tagfreq settings and model files.

Models live in a single directory:
  ~/.tagfreq/models/  (default)

The directory can be configured via:
  - Environment variable: TAGFREQ_MODELS_DIR
  - Config file: <config dir>/config.json (set "models_dir" key)
  - Default: <config dir>/models/

The config dir itself is TAGFREQ_CONFIG_DIR, else $XDG_DATA_HOME/tagfreq,
else ~/.tagfreq.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .config import TagFreqConfig

logger = logging.getLogger(__name__)


def get_config_dir(create: bool = True) -> Path:
    """
    Get the tagfreq configuration directory.

    Args:
        create: If True, create the directory if it doesn't exist. If False, return the path
                without creating it (useful for read-only operations).
    """
    if "TAGFREQ_CONFIG_DIR" in os.environ:
        base = Path(os.environ["TAGFREQ_CONFIG_DIR"])
    elif "XDG_DATA_HOME" in os.environ:
        base = Path(os.environ["XDG_DATA_HOME"]) / "tagfreq"
    else:
        base = Path.home() / ".tagfreq"
    if create:
        base.mkdir(parents=True, exist_ok=True)
    return base


def get_config_file(create_dir: bool = True) -> Path:
    return get_config_dir(create=create_dir) / "config.json"


def read_config() -> dict:
    """
    Read the tagfreq configuration file.

    Returns:
        Dictionary with configuration values (empty dict if the file doesn't exist
        or cannot be parsed)
    """
    config_file = get_config_file(create_dir=False)
    if not config_file.exists():
        return {}
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config file %s: %s", config_file, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", config_file)
        return {}
    return data


def write_config(config: dict) -> None:
    """Merge ``config`` into the config file, keeping other settings."""
    config_file = get_config_file()
    existing_config = read_config()
    existing_config.update(config)
    with open(config_file, "w", encoding="utf-8") as f:
        json.dump(existing_config, f, indent=2, ensure_ascii=False)


def get_models_dir(create: bool = True) -> Path:
    """
    Get the directory holding tagfreq models.

    Checks in order:
    1. TAGFREQ_MODELS_DIR environment variable
    2. config.json file (models_dir key)
    3. <config dir>/models/ (default)
    """
    if "TAGFREQ_MODELS_DIR" in os.environ:
        models_dir = Path(os.environ["TAGFREQ_MODELS_DIR"])
    else:
        config = read_config()
        if "models_dir" in config:
            models_dir = Path(config["models_dir"]).expanduser()
        else:
            models_dir = get_config_dir(create=create) / "models"
    if create:
        models_dir.mkdir(parents=True, exist_ok=True)
    return models_dir


def set_models_dir(path: str | Path) -> None:
    write_config({"models_dir": str(Path(path).expanduser().resolve())})


def default_model_path(config: "TagFreqConfig", create: bool = False) -> Path:
    """Path of the model file named by ``config``."""
    models_dir = config.models_dir if config.models_dir is not None else get_models_dir(create=create)
    return Path(models_dir) / config.model_name
