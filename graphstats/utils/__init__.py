"""Utility helpers for graphstats."""

from .config import (
    get_stats_settings,
    load_config,
    load_config_with_overrides,
    merge_configs,
    register_config_gradients,
)

__all__ = [
    "get_stats_settings",
    "load_config",
    "load_config_with_overrides",
    "merge_configs",
    "register_config_gradients",
]
