"""Named color gradients and RGB packing helpers."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import matplotlib
import numpy as np
from matplotlib.colors import Colormap, LinearSegmentedColormap, to_rgb

RGB = Tuple[int, int, int]

# Gradient name -> matplotlib colormap name
_BUILTIN_GRADIENTS: Dict[str, str] = {
    "viridis": "viridis",
    "magma": "magma",
    "inferno": "inferno",
    "plasma": "plasma",
    "cividis": "cividis",
    "greys": "Greys",
    "rainbow": "rainbow",
}

_GRADIENTS: Dict[str, Colormap] = {}


def hex_to_rgb(value: str) -> RGB:
    """Convert a matplotlib color spec such as ``#rrggbb`` to an RGB triple."""
    r, g, b = to_rgb(value)
    return round(r * 255), round(g * 255), round(b * 255)


def rgb_to_int(rgb: Sequence[int]) -> int:
    """Pack an RGB triple into a ``0xRRGGBB`` integer."""
    return int(rgb[0]) * 256 * 256 + int(rgb[1]) * 256 + int(rgb[2])


def int_to_rgb(value: int) -> RGB:
    return (value // (256 * 256)) % 256, (value // 256) % 256, value % 256


def register_gradient(name: str, stops: Sequence[str]) -> None:
    """Register a gradient from at least two evenly spaced color stops."""

    if len(stops) < 2:
        raise ValueError("a gradient needs at least two color stops")
    _GRADIENTS[name] = LinearSegmentedColormap.from_list(name, list(stops))


def available_gradients() -> List[str]:
    return sorted(_GRADIENTS)


def evaluate_gradient(t: float, name: str, reverse: bool = False) -> RGB:
    """Return the color found at position ``t`` of gradient ``name``.

    ``t`` is clamped to ``[0, 1]``; a NaN position maps to the middle of the
    gradient. The evaluation is a pure function of its arguments.
    """

    try:
        cmap = _GRADIENTS[name]
    except KeyError:
        raise ValueError(f"Unknown gradient: {name}") from None
    if reverse:
        cmap = cmap.reversed()
    if np.isnan(t):
        t = 0.5
    r, g, b, _ = cmap(float(np.clip(t, 0.0, 1.0)))
    return round(r * 255), round(g * 255), round(b * 255)


for _name, _cmap_name in _BUILTIN_GRADIENTS.items():
    _GRADIENTS[_name] = matplotlib.colormaps[_cmap_name]
