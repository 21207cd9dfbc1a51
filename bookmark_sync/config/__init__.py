from __future__ import annotations

from .integrations import LinkdingConfig
from .settings import AppConfig, RuntimeConfig, Settings, load_config

__all__ = [
    "AppConfig",
    "LinkdingConfig",
    "RuntimeConfig",
    "Settings",
    "load_config",
]
