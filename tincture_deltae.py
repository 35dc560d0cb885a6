# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_deltae.py — Local perceptual step size along a colour path.

Given a sampled Lab path, each sample gets one non-negative value: how fast
perceived colour changes at that point.  Two formulas are supported and they
are deliberately *not* interchangeable:

  SIMPLE          Weighted Euclidean central differences of L, a, b.
                  Preferred for isoluminant maps with weights (1, 1, 1).
  PERCEPTUAL2000  CIEDE2000 between the two neighbours of each sample,
                  halved.  Weights are the reciprocals of k_L, k_C, k_H.

For maps with a real lightness gradient use weights (1, 0, 0) with either
formula; at the fine spatial frequencies colour maps are viewed at, contrast
is dominated by lightness.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Union

import numpy as np

from tincture_colorengine import ColorMetrics

__all__ = [
    "DifferenceFormula",
    "validate_weights",
    "cie76_profile",
    "ciede2000_profile",
    "difference_profile",
]

WeightsLike = Union[np.ndarray, Sequence[float]]


class DifferenceFormula(Enum):
    SIMPLE = "SIMPLE"
    PERCEPTUAL2000 = "PERCEPTUAL2000"

    @classmethod
    def parse(cls, value: Union["DifferenceFormula", str]) -> "DifferenceFormula":
        """Accepts a member, its name, or the aliases ``CIE76`` / ``CIEDE2000``."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"Difference formula must be a string or DifferenceFormula, got {type(value)}")
        key = value.strip().upper()
        member = _FORMULA_ALIASES.get(key)
        if member is None:
            raise ValueError(
                f"Unknown colour difference formula '{value}'. "
                f"Expected one of {sorted(_FORMULA_ALIASES)}"
            )
        return member


_FORMULA_ALIASES = {
    "SIMPLE": DifferenceFormula.SIMPLE,
    "CIE76": DifferenceFormula.SIMPLE,
    "PERCEPTUAL2000": DifferenceFormula.PERCEPTUAL2000,
    "CIEDE2000": DifferenceFormula.PERCEPTUAL2000,
}


def validate_weights(weights: WeightsLike) -> np.ndarray:
    w = np.asarray(weights, dtype=np.float64)
    if w.shape != (3,):
        raise ValueError(f"Weights must be a 3-vector (lightness, chroma, hue), got shape {w.shape}")
    if not np.all(np.isfinite(w)) or np.any(w < 0.0):
        raise ValueError(f"Weights must be finite and non-negative, got {w.tolist()}")
    return w


def _validate_path(lab: np.ndarray) -> np.ndarray:
    path = np.ascontiguousarray(lab, dtype=np.float64)
    if path.ndim != 2 or path.shape[1] != 3:
        raise ValueError(f"Colour path must have shape (N, 3), got {path.shape}")
    if path.shape[0] < 2:
        raise ValueError(f"Colour path needs at least 2 samples, got {path.shape[0]}")
    return path


def cie76_profile(lab: np.ndarray, weights: WeightsLike) -> np.ndarray:
    """Weighted Euclidean difference profile (central differences, one-sided at the ends)."""
    path = _validate_path(lab)
    w = validate_weights(weights)

    d = np.empty_like(path)
    d[1:-1] = (path[2:] - path[:-2]) / 2.0
    d[0] = path[1] - path[0]
    d[-1] = path[-1] - path[-2]
    return np.sqrt(d * d @ w)


def ciede2000_profile(lab: np.ndarray, weights: WeightsLike) -> np.ndarray:
    """
    CIEDE2000 difference profile.

    Interior samples use half the difference between their two neighbours;
    the end samples use the difference to their single neighbour.
    """
    path = _validate_path(lab)
    w = validate_weights(weights)
    weights_tuple = (w[0], w[1], w[2])

    profile = np.empty(path.shape[0], dtype=np.float64)
    if path.shape[0] > 2:
        profile[1:-1] = ColorMetrics.delta_E_2000_weighted(path[2:], path[:-2], weights_tuple) / 2.0
    ends = ColorMetrics.delta_E_2000_weighted(path[[1, -1]], path[[0, -2]], weights_tuple)
    profile[0] = ends[0]
    profile[-1] = ends[1]
    return profile


def difference_profile(lab: np.ndarray, formula: Union[DifferenceFormula, str],
                       weights: WeightsLike) -> np.ndarray:
    """
    Local perceptual step size at every sample of a Lab path.

    Args:
        lab: ``(N, 3)`` Lab samples, ``N >= 2``.
        formula: ``DifferenceFormula`` or one of its accepted names.
        weights: Non-negative (lightness, chroma, hue) weights.

    Returns:
        ``(N,)`` array of non-negative values.
    """
    formula = DifferenceFormula.parse(formula)
    if formula is DifferenceFormula.SIMPLE:
        return cie76_profile(lab, weights)
    elif formula is DifferenceFormula.PERCEPTUAL2000:
        return ciede2000_profile(lab, weights)
    raise ValueError(f"Unhandled colour difference formula {formula}")
