"""Read and write the on-disk client configuration."""

import json
import os
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from crawlbot.config.schema import ClientConfig

CONFIG_PATH_ENV = "CRAWLBOT_CONFIG"


def get_config_path() -> Path:
    """``$CRAWLBOT_CONFIG`` when set, else ``~/.crawlbot/config.json``."""
    override = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".crawlbot" / "config.json"


def load_config(config_path: Path | None = None) -> ClientConfig:
    """
    Load client settings, falling back to defaults.

    A missing file is not an error. A file that is not JSON, or whose values
    fail validation (unknown ``apiVersion``, non-positive timeouts), is
    reported once and ignored so callers still get a usable configuration.
    """
    path = config_path or get_config_path()
    if not path.exists():
        return ClientConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ClientConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Ignoring unreadable config {}: {}", path, e)
        return ClientConfig()


def save_config(config: ClientConfig, config_path: Path | None = None) -> Path:
    """
    Write ``config`` with camelCase keys and return the path written.

    Only values that differ from the defaults are stored, so environment
    fallbacks keep working for fields the user never set. The file is
    replaced atomically.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(by_alias=True, exclude_defaults=True)

    tmp_path = path.with_name(f"{path.name}.tmp")
    tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    tmp_path.replace(path)
    return path
