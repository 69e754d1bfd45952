"""
Configuration module for the URL search-param synchronization engine.

Submodules:
    - models: Configuration dataclasses (SyncConfig, AppConfig)
"""

from .models import (
    MINIMUM_DELAY_BETWEEN_TWO_HISTORY_PUSH_IN_MS,
    AppConfig,
    SyncConfig,
)

DEFAULT_CONFIG = AppConfig()

__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG",
    "MINIMUM_DELAY_BETWEEN_TWO_HISTORY_PUSH_IN_MS",
    "SyncConfig",
]
