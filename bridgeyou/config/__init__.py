"""Configuration module for the BridgeYou forum API."""

from .app_config import (
    AppSettings,
    CacheConfig,
    CompletionConfig,
    DatabaseConfig,
    SearchConfig,
    get_app_settings,
    load_app_config,
)

__all__ = [
    'AppSettings',
    'CacheConfig',
    'CompletionConfig',
    'DatabaseConfig',
    'SearchConfig',
    'get_app_settings',
    'load_app_config',
]
