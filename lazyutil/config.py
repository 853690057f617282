"""Process-wide settings and logging setup."""

import logging
from typing import Optional

from .models import LazySettings

logger = logging.getLogger(__name__)

_settings: Optional[LazySettings] = None


def get_settings() -> LazySettings:
    """Current settings, loaded from the environment on first use"""
    global _settings
    if _settings is None:
        _settings = LazySettings.from_env()
    return _settings


def configure(**overrides) -> LazySettings:
    """Replace the current settings with a validated copy carrying ``overrides``"""
    global _settings
    merged = get_settings().model_dump()
    merged.update(overrides)
    _settings = LazySettings(**merged)
    logger.debug(f"Settings updated: {overrides}")
    return _settings


def reset_settings():
    """Forget configured settings; the next access reloads from the environment"""
    global _settings
    _settings = None


def configure_logging(settings: Optional[LazySettings] = None):
    """Configure root logging at the settings' level"""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.numeric_log_level)
    logging.getLogger("lazyutil").setLevel(settings.numeric_log_level)
