"""Configuration module for crawlbot."""

from crawlbot.config.loader import get_config_path, load_config, save_config
from crawlbot.config.schema import ClientConfig

__all__ = ["ClientConfig", "get_config_path", "load_config", "save_config"]
