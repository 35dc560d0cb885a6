# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_filters.py — 1-D signal helpers for colour-map equalisation.

  * ``gaussian_kernel`` / ``gaussfilt1d``: truncated Gaussian smoothing.
  * ``smooth``  : Gaussian smoothing of one colour-map channel with either
                   cyclic wrap-around or slope-preserving end extension.
  * ``interp1`` : clamped piecewise-linear interpolation, used to invert
                   cumulative contrast profiles.
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np
from scipy.ndimage import convolve1d

__all__ = [
    "gaussian_kernel",
    "gaussfilt1d",
    "smooth",
    "interp1",
]

ArrayLike = Union[np.ndarray, Sequence[float]]


def gaussian_kernel(sigma: float) -> np.ndarray:
    """
    Truncated, unit-sum Gaussian of radius ``ceil(3 * sigma)``.

    Returns:
        Kernel of length ``2 * radius + 1``.
    """
    if not sigma > 0.0:
        raise ValueError(f"Gaussian sigma must be positive, got {sigma}")
    radius = math.ceil(3.0 * sigma)
    x = np.arange(-radius, radius + 1, dtype=np.float64)
    kernel = np.exp(-(x * x) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def gaussfilt1d(signal: ArrayLike, sigma: float) -> np.ndarray:
    """
    Gaussian filter of a 1-D signal.  Samples beyond either end are taken
    as zero, so an impulse well inside the signal keeps unit sum.
    """
    s = np.asarray(signal, dtype=np.float64)
    if s.ndim != 1:
        raise ValueError(f"gaussfilt1d expects a 1-D signal, got shape {s.shape}")
    return convolve1d(s, gaussian_kernel(sigma), mode="constant", cval=0.0)


def smooth(sequence: ArrayLike, sigma: float, cyclic: bool) -> np.ndarray:
    """
    Smooths one channel of a colour map without disturbing its ends.

    Args:
        sequence: 1-D channel values.
        sigma: Gaussian standard deviation in samples.  ``sigma <= 0``
               returns an unmodified copy.
        cyclic: If True the channel is treated as periodic and smoothed
                across the wrap-around point.  Otherwise each end is extended
                by the kernel radius at the slope of its last two samples, so
                a linear ramp passes through unchanged.

    Returns:
        Array with the same length as ``sequence``.
    """
    seq = np.array(sequence, dtype=np.float64)
    if seq.ndim != 1:
        raise ValueError(f"smooth expects a 1-D sequence, got shape {seq.shape}")
    if sigma <= 0.0:
        return seq

    n = seq.size
    if cyclic:
        tripled = np.concatenate([seq, seq, seq])
        return gaussfilt1d(tripled, sigma)[n:2 * n]

    if n < 2:
        raise ValueError("Non-cyclic smoothing needs at least 2 samples")
    ext = np.arange(1, math.ceil(3.0 * sigma) + 1, dtype=np.float64)
    head = seq[0] - (seq[1] - seq[0]) * ext[::-1]
    tail = seq[-1] + (seq[-1] - seq[-2]) * ext
    extended = np.concatenate([head, seq, tail])
    return gaussfilt1d(extended, sigma)[ext.size:ext.size + n]


def interp1(x: ArrayLike, y: ArrayLike, xi: ArrayLike) -> np.ndarray:
    """
    Piecewise-linear interpolation of ``y(x)`` at ``xi``.

    ``x`` must be increasing (not necessarily evenly spaced); ``xi`` need not
    be sorted.  Queries at or below ``x[0]`` return ``y[0]``, at or above
    ``x[-1]`` return ``y[-1]``.
    """
    xa = np.asarray(x, dtype=np.float64)
    ya = np.asarray(y, dtype=np.float64)
    if xa.ndim != 1 or xa.shape != ya.shape:
        raise ValueError(f"x and y must be 1-D of equal length, got {xa.shape} and {ya.shape}")
    if xa.size == 0:
        raise ValueError("Cannot interpolate from empty samples")
    if np.any(np.diff(xa) < 0.0):
        raise ValueError("x values must be increasing")
    return np.interp(np.asarray(xi, dtype=np.float64), xa, ya, left=ya[0], right=ya[-1])
