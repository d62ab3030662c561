"""Normalization of raw measures into size multipliers and packed colors.

Two steps per purpose: a linear rescale of the finite measures into a target
range, then replacement of every non-finite value by a default. For the
color purpose the cleaned value is finally looked up in a gradient.

``min`` and ``max`` are taken over the finite measures of the whole pass, so
these functions must only run once every measure has resolved. When
``max == min`` (or no measure is finite) the rescale is undefined for every
entity and all values fall back to the default.
"""

from __future__ import annotations

from typing import Callable, Dict, Hashable, Mapping, Sequence, Tuple, TypeVar

import numpy as np

from ..analysis.gradients import evaluate_gradient, rgb_to_int
from ..models import ComputedStat, StatPurpose

K = TypeVar("K", bound=Hashable)

GradientEvaluator = Callable[[float, str], Sequence[int]]

SIZE_RANGE: Tuple[float, float] = (0.5, 1.5)
SIZE_DEFAULT = 1.0
COLOR_RANGE: Tuple[float, float] = (0.0, 100.0)
COLOR_DEFAULT = 50.0


def normalize_values(raw: Mapping[K, float], lower: float, upper: float) -> Dict[K, float]:
    """Linearly map finite measures of ``raw`` onto ``[lower, upper]``.

    Non-finite measures, and every measure when the finite range is empty or
    degenerate, come out as non-finite values.
    """

    keys = list(raw)
    measures = np.fromiter((raw[k] for k in keys), dtype=float, count=len(keys))
    finite = measures[np.isfinite(measures)]
    if finite.size == 0:
        return {k: float("nan") for k in keys}
    lo = finite.min()
    hi = finite.max()
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        values = lower + (upper - lower) * ((measures - lo) / (hi - lo))
    return dict(zip(keys, values.tolist()))


def clean_non_finite(values: Mapping[K, float], default: float) -> Dict[K, float]:
    """Replace NaN and infinite values by ``default``."""

    return {k: (v if np.isfinite(v) else default) for k, v in values.items()}


def map_stats(
    raw: Mapping[K, float],
    purpose: StatPurpose,
    *,
    gradient: str = "viridis",
    evaluator: GradientEvaluator = evaluate_gradient,
) -> Dict[K, ComputedStat]:
    """Turn raw measures into :class:`ComputedStat` records for ``purpose``."""

    purpose = StatPurpose(purpose)
    if purpose is StatPurpose.SIZE:
        normalized = clean_non_finite(normalize_values(raw, *SIZE_RANGE), SIZE_DEFAULT)
        return {
            k: ComputedStat(measure=float(raw[k]), value=v, normalized=v)
            for k, v in normalized.items()
        }

    normalized = clean_non_finite(normalize_values(raw, *COLOR_RANGE), COLOR_DEFAULT)
    return {
        k: ComputedStat(
            measure=float(raw[k]),
            value=rgb_to_int(evaluator(v / 100.0, gradient)),
            normalized=v,
        )
        for k, v in normalized.items()
    }
