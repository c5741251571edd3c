"""Layered configuration: bundled defaults, config file, environment, flags."""
from .manager import CONFIG_FILE_ENV, ENV_PREFIX, ConfigManager, coerce_env_value
from .settings import RenderSettings, load_settings

__all__ = ["CONFIG_FILE_ENV", "ENV_PREFIX", "ConfigManager", "coerce_env_value", "RenderSettings", "load_settings"]
