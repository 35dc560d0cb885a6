# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_imageutils.py — Preparing grey images for display with a colour map.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

__all__ = ["histtruncate", "normalise"]


def histtruncate(img: np.ndarray, lower_cut: float, upper_cut: Optional[float] = None) -> np.ndarray:
    """
    Truncates the extremes of a grey image's histogram.

    The lowest ``lower_cut`` percent and highest ``upper_cut`` percent of
    pixel values are clipped to the values at those percentiles, so a few
    outliers no longer compress the useful range of a colour map.  NaN pixels
    are ignored when finding the limits and stay NaN.

    Args:
        img: 1-D or 2-D array of grey values.
        lower_cut: Percentage (0-100) to clip at the low end.
        upper_cut: Percentage to clip at the high end; defaults to ``lower_cut``.

    Returns:
        Clipped float copy of ``img``.
    """
    if upper_cut is None:
        upper_cut = lower_cut
    for cut in (lower_cut, upper_cut):
        if not 0.0 <= cut <= 100.0:
            raise ValueError(f"Histogram cut percentages must be in the range 0-100, got {cut}")

    arr = np.array(img, dtype=np.float64)
    if arr.ndim > 2:
        raise ValueError(f"histtruncate only supports grey images (ndim <= 2), got ndim={arr.ndim}")

    values = np.sort(arr[~np.isnan(arr)], axis=None)
    n = values.size
    if n == 0:
        return arr

    # 1-based ranks into the sorted values.
    lower_rank = min(max(math.floor(1 + n * lower_cut / 100.0), 1), n)
    upper_rank = min(max(math.ceil(n - n * upper_cut / 100.0), 1), n)
    return np.clip(arr, values[lower_rank - 1], values[upper_rank - 1])


def normalise(img: np.ndarray, reqmean: Optional[float] = None,
              reqvar: Optional[float] = None) -> np.ndarray:
    """
    Rescales an image to [0, 1], or to a requested mean and variance.

    Both ``reqmean`` and ``reqvar`` must be given to use the second form.
    A constant image maps to zeros.
    """
    arr = np.array(img, dtype=np.float64)
    if (reqmean is None) != (reqvar is None):
        raise ValueError("normalise needs both reqmean and reqvar, or neither")

    if reqmean is None:
        shifted = arr - np.nanmin(arr)
        peak = np.nanmax(shifted)
        return shifted / peak if peak > 0 else shifted

    if reqvar < 0:
        raise ValueError(f"Requested variance must be non-negative, got {reqvar}")
    centred = arr - np.nanmean(arr)
    std = np.nanstd(centred)
    if std > 0:
        centred = centred / std
    return reqmean + centred * math.sqrt(reqvar)
