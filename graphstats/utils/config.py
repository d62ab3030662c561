import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from graphstats.analysis.gradients import available_gradients, register_gradient
from graphstats.config_models import StatsSettings, StatsSettingsModel

# config.yaml shipped next to the graphstats package modules
PACKAGE_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

CONFIG_ENV_VAR = "GRAPHSTATS_CONFIG"

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load YAML configuration file.

    Without an explicit path the ``GRAPHSTATS_CONFIG`` environment variable is
    consulted before falling back to the packaged ``config.yaml``.
    """
    path = Path(config_path or os.environ.get(CONFIG_ENV_VAR) or PACKAGE_CONFIG_PATH)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found at {path}")
    logger.info("Loading config from: %s", path)
    return yaml.safe_load(path.read_text()) or {}


def _stats_env(field_name: str) -> Optional[str]:
    return os.environ.get("GRAPHSTATS_" + field_name.upper())


def _coerce(value: str, default: Any) -> Any:
    if isinstance(default, bool):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return type(default)(value)


def get_stats_settings(config: Dict[str, Any]) -> StatsSettings:
    """Return the ``stats`` section as validated :class:`StatsSettings`.

    Scalar fields may be overridden with ``GRAPHSTATS_<FIELD>`` environment
    variables. Gradients declared in the configuration are registered first.
    Invalid function identifiers and unknown colormaps raise ``ValueError``.
    """

    register_config_gradients(config)

    defaults = (config.get("stats") or {}).copy()
    for field_name in StatsSettings.__dataclass_fields__:
        defaults.setdefault(field_name, getattr(StatsSettings(), field_name))

    env_overrides = {
        k: _coerce(v, defaults[k])
        for k in StatsSettings.__dataclass_fields__
        if (v := _stats_env(k)) is not None
    }
    cfg = {**defaults, **env_overrides}
    # pydantic's ValidationError is a ValueError
    settings = StatsSettingsModel(**cfg).to_settings()
    known = available_gradients()
    for colormap in (settings.nodes_color_colormap, settings.links_color_colormap):
        if colormap not in known:
            raise ValueError(f"Unknown color gradient: {colormap}")
    return settings


def register_config_gradients(config: Dict[str, Any]) -> int:
    """Register the gradients declared in the ``gradients`` section."""

    gradients = config.get("gradients") or {}
    for name, stops in gradients.items():
        register_gradient(name, stops)
        logger.debug("Registered gradient %s with %d stops", name, len(stops))
    return len(gradients)


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base_config`` updated with ``override_config``.

    Nested sections are merged recursively; any other value replaces the base.
    """
    merged = dict(base_config)
    for key, override in override_config.items():
        base = merged.get(key)
        both_sections = isinstance(base, dict) and isinstance(override, dict)
        merged[key] = merge_configs(base, override) if both_sections else override
    return merged


def load_config_with_overrides(
    config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Load the configuration and merge the ``stats``/``gradients`` overrides."""
    return merge_configs(load_config(config_path), overrides or {})
