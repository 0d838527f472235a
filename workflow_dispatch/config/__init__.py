"""Configuration package for runtime settings, logging and startup validation."""

from .logging_config import setup_logging
from .settings import AppSettings, SettingsLoadError, config_load_settings

__all__ = ["AppSettings", "SettingsLoadError", "config_load_settings", "setup_logging"]
