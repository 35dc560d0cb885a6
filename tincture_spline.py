# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_spline.py — B-spline paths through a colour space.

Colour maps are designed as a handful of control points in CIELAB (or RGB)
and densely sampled along a B-spline through them:

  * ``evaluate_open_spline``    : clamped knots, the curve starts on the
                                   first control point and ends on the last.
  * ``evaluate_periodic_spline``: uniform knots on a closed control polygon,
                                   used for cyclic colour maps.

Both share a Numba-compiled Cox–de Boor recursion that builds the basis one
order at a time in two alternating buffers.  Knot spans of zero length
(repeated knots) contribute nothing instead of dividing by zero.
"""

from __future__ import annotations

from typing import Final, Sequence, Union

import numpy as np
from numba import njit

__all__ = [
    "CLOSURE_TOLERANCE",
    "bspline_basis",
    "open_uniform_knots",
    "evaluate_open_spline",
    "evaluate_periodic_spline",
]

# Control polygons whose ends are closer than this are treated as closed.
CLOSURE_TOLERANCE: Final[float] = 0.01

_EPS: Final[float] = float(np.finfo(np.float64).eps)

PointsLike = Union[np.ndarray, Sequence[Sequence[float]]]


# ═══════════════════════════════════════════════════════════════════════════════
# 1.  Basis functions
# ═══════════════════════════════════════════════════════════════════════════════
@njit(cache=True)
def _cox_de_boor(knots: np.ndarray, order: int, t: np.ndarray) -> np.ndarray:
    n_knots = knots.shape[0]
    n_t = t.shape[0]
    prev = np.zeros((n_knots - 1, n_t))
    curr = np.zeros((n_knots - 1, n_t))

    # Order 1: indicator of the half-open span [t_i, t_{i+1}).
    for i in range(n_knots - 1):
        if knots[i] < knots[i + 1]:
            for j in range(n_t):
                if knots[i] <= t[j] and t[j] < knots[i + 1]:
                    prev[i, j] = 1.0

    for k in range(2, order + 1):
        for i in range(n_knots - k):
            left_span = knots[i + k - 1] - knots[i]
            right_span = knots[i + k] - knots[i + 1]
            for j in range(n_t):
                v = 0.0
                if left_span >= _EPS:
                    v += (t[j] - knots[i]) / left_span * prev[i, j]
                if right_span >= _EPS:
                    v += (knots[i + k] - t[j]) / right_span * prev[i + 1, j]
                curr[i, j] = v
        prev, curr = curr, prev

    return prev[: n_knots - order].copy()


def bspline_basis(knots: Sequence[float], order: int, t: Sequence[float]) -> np.ndarray:
    """
    Evaluates every B-spline basis function of ``order`` on ``knots`` at ``t``.

    Args:
        knots: Non-decreasing knot vector.
        order: Spline order (degree + 1), >= 1.
        t: Parameter values.

    Returns:
        Array of shape ``(len(knots) - order, len(t))``; row ``i`` is the
        basis function attached to control point ``i``.
    """
    knots_arr = np.ascontiguousarray(knots, dtype=np.float64)
    t_arr = np.ascontiguousarray(np.atleast_1d(t), dtype=np.float64)
    if order < 1:
        raise ValueError(f"Basis order must be >= 1, got {order}")
    if knots_arr.ndim != 1 or knots_arr.size <= order:
        raise ValueError(f"Need more than {order} knots, got {knots_arr.size}")
    if np.any(np.diff(knots_arr) < 0.0):
        raise ValueError("Knot vector must be non-decreasing")
    return _cox_de_boor(knots_arr, int(order), t_arr)


def open_uniform_knots(n_points: int, order: int) -> np.ndarray:
    """Clamped uniform knots on [0, 1] with ``order - 1`` extra copies of each end knot."""
    inner = np.linspace(0.0, 1.0, n_points - order + 2)
    return np.concatenate([np.zeros(order - 1), inner, np.ones(order - 1)])


# ═══════════════════════════════════════════════════════════════════════════════
# 2.  Spline evaluation
# ═══════════════════════════════════════════════════════════════════════════════
def _validate(control_points: PointsLike, order: int, sample_count: int) -> np.ndarray:
    pts = np.array(control_points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] == 0:
        raise ValueError(f"Control points must be an (n, dim) array, got shape {pts.shape}")
    if int(order) != order or order < 2:
        raise ValueError(f"Spline order must be an integer >= 2, got {order}")
    if pts.shape[0] < order:
        raise ValueError(
            f"Number of control points ({pts.shape[0]}) must be >= spline order ({order})"
        )
    if int(sample_count) != sample_count or sample_count < 2:
        raise ValueError(f"Spline must be evaluated at 2 or more points, got {sample_count}")
    return pts


def evaluate_open_spline(control_points: PointsLike, order: int,
                         sample_count: int = 100) -> np.ndarray:
    """
    Samples an open (clamped) B-spline through ``control_points``.

    Args:
        control_points: ``(n, dim)`` control polygon, ``n >= order``.
        order: 2 for linear segments, 3 for quadratic, ...
        sample_count: Number of equally spaced parameter values on [0, 1].

    Returns:
        ``(sample_count, dim)`` array; the first and last rows coincide with
        the first and last control points.
    """
    pts = _validate(control_points, order, sample_count)
    order = int(order)

    knots = open_uniform_knots(pts.shape[0], order)
    t = np.linspace(0.0, 1.0, int(sample_count))
    basis = _cox_de_boor(knots, order, t)
    path = basis.T @ pts

    # The half-open span convention leaves t = 1 outside every span.
    path[-1] = pts[-1]
    return path


def evaluate_periodic_spline(control_points: PointsLike, order: int,
                             sample_count: int = 100) -> np.ndarray:
    """
    Samples a closed, periodic B-spline through ``control_points``.

    The control polygon is closed if its ends differ by more than
    ``CLOSURE_TOLERANCE``, then ``order - 1`` points are wrapped around from
    the start so every span of one full period is supported by ``order``
    basis functions.  Exactly one period is sampled (end point excluded, so
    the sequence continues seamlessly from its last sample to its first) and
    the samples are rotated so that the one nearest the first control point
    comes first.

    Returns:
        ``(sample_count, dim)`` array.
    """
    pts = _validate(control_points, order, sample_count)
    order = int(order)
    n_samples = int(sample_count)

    if np.linalg.norm(pts[0] - pts[-1]) > CLOSURE_TOLERANCE:
        pts = np.vstack([pts, pts[:1]])
    n_spans = pts.shape[0] - 1

    wrapped = np.vstack([pts, pts[1:order]])
    n_knots = wrapped.shape[0] + order
    knots = np.arange(n_knots, dtype=np.float64) / (n_knots - 1)

    t_start = knots[order - 1]
    t_end = knots[order - 1 + n_spans]
    t = t_start + (t_end - t_start) * np.arange(n_samples) / n_samples

    basis = _cox_de_boor(knots, order, t)
    path = basis.T @ wrapped

    # For order >= 3 the period starts between control points; rotate so the
    # colour at the first control point leads the sequence.
    dist_sq = np.sum((path - pts[0]) ** 2, axis=1)
    return np.roll(path, -int(np.argmin(dist_sq)), axis=0)
