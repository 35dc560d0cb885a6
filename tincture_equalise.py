# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_equalise.py — Equalisation of perceptual contrast along a colour map.

A colour map is a sampled path through CIELAB.  Its perceptual contrast is
uneven wherever the path moves faster or slower through the space.  The
equaliser stretches and compresses the path so that every step along it has
the same perceptual difference:

  1.  measure the local difference profile (``tincture_deltae``),
  2.  floor it at ``DELTA_E_FLOOR`` so the running sum strictly increases,
  3.  accumulate it,
  4.  choose N equally spaced cumulative levels,
  5.  invert the cumulative profile at those levels (fractional indices),
  6.  resample L, a and b at the fractional indices.

Linear interpolation in step 6 only approximates the ideal positions, so the
whole procedure is re-applied to its own output ``EQUALISATION_ITERATIONS``
times.  Optional Gaussian smoothing is applied once at the end to soften
slope reversals (e.g. the centre of a diverging map), at the price of a small
band of reduced contrast.

Each iteration is a pure function of the previous path; nothing is modified
in place and nothing persists between calls.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final, Optional, Sequence, Union

import numpy as np

from tincture_colorengine import ColorSpaceEngine
from tincture_deltae import DifferenceFormula, difference_profile, validate_weights
from tincture_filters import interp1, smooth

__all__ = [
    "EQUALISATION_ITERATIONS",
    "DELTA_E_FLOOR",
    "SIGMA_WARNING_RATIO",
    "ColourSpace",
    "EqualisationReport",
    "equalisation_step",
    "equalise_lab",
    "equalise_colour_map",
    "equalize_color_map",
]

# ---------------------------------------------------------------------------
# Tuned constants
# ---------------------------------------------------------------------------
EQUALISATION_ITERATIONS: Final[int] = 3
DELTA_E_FLOOR: Final[float] = 0.001
# sigma above N / SIGMA_WARNING_RATIO leaves a visible low-contrast band.
SIGMA_WARNING_RATIO: Final[float] = 25.0
RGB_TOLERANCE: Final[float] = 0.01
# A Lab map whose largest component is below this was almost certainly RGB.
LAB_MIN_MAGNITUDE: Final[float] = 10.0

PathLike = Union[np.ndarray, Sequence[Sequence[float]]]
WeightsLike = Union[np.ndarray, Sequence[float]]


class ColourSpace(Enum):
    RGB = "RGB"
    LAB = "LAB"

    @classmethod
    def parse(cls, value: Union["ColourSpace", str]) -> "ColourSpace":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ValueError(f"Colour space must be 'RGB' or 'LAB', got {value!r}")


@dataclass(slots=True, frozen=True)
class EqualisationReport:
    """Intermediate data of one equalisation run, handed to a diagnostics callback."""
    formula:           DifferenceFormula
    weights:           np.ndarray
    sigma:             float
    input_lab:         np.ndarray
    output_lab:        np.ndarray
    output_rgb:        np.ndarray
    initial_delta_e:   np.ndarray   # floored profile of the input path
    initial_cum_delta: np.ndarray
    target_levels:     np.ndarray
    initial_indices:   np.ndarray   # fractional indices of the first iteration
    final_delta_e:     np.ndarray   # raw profile of the output path

    @property
    def gamut_error(self) -> np.ndarray:
        """Lab error introduced by clipping the output to the sRGB gamut."""
        return self.output_lab - ColorSpaceEngine.srgb_to_lab(self.output_rgb)


DiagnosticsHook = Callable[[EqualisationReport], None]


# ---------------------------------------------------------------------------
# Core iteration
# ---------------------------------------------------------------------------
def _reparameterise(lab: np.ndarray, formula: DifferenceFormula, weights: np.ndarray):
    n = lab.shape[0]
    delta_e = np.maximum(difference_profile(lab, formula, weights), DELTA_E_FLOOR)
    cum_delta = np.cumsum(delta_e)
    levels = np.linspace(cum_delta[0], cum_delta[-1], n)
    indices = interp1(cum_delta, np.arange(n, dtype=np.float64), levels)
    return delta_e, cum_delta, levels, indices


def _resample(lab: np.ndarray, indices: np.ndarray) -> np.ndarray:
    grid = np.arange(lab.shape[0], dtype=np.float64)
    return np.column_stack([np.interp(indices, grid, lab[:, c]) for c in range(3)])


def equalisation_step(lab: PathLike, formula: Union[DifferenceFormula, str] = DifferenceFormula.SIMPLE,
                      weights: WeightsLike = (1.0, 0.0, 0.0)) -> np.ndarray:
    """
    One pass of contrast equalisation.

    Returns:
        New ``(N, 3)`` Lab path whose cumulative difference rises in (close
        to) equal steps.  The input is left untouched.
    """
    path = _as_path(lab)
    _, _, _, indices = _reparameterise(path, DifferenceFormula.parse(formula), validate_weights(weights))
    return _resample(path, indices)


def equalise_lab(lab: PathLike, formula: Union[DifferenceFormula, str] = DifferenceFormula.SIMPLE,
                 weights: WeightsLike = (1.0, 0.0, 0.0), sigma: float = 0.0,
                 cyclic: bool = False) -> np.ndarray:
    """
    Equalises the perceptual contrast of a Lab path.

    Runs ``EQUALISATION_ITERATIONS`` passes of ``equalisation_step``, then
    smooths each channel once with ``sigma`` when ``sigma > 0``.

    Returns:
        ``(N, 3)`` Lab path of the same length.
    """
    path = _as_path(lab)
    formula = DifferenceFormula.parse(formula)
    weights = validate_weights(weights)
    for _ in range(EQUALISATION_ITERATIONS):
        path = equalisation_step(path, formula, weights)
    if sigma > 0.0:
        path = np.column_stack([smooth(path[:, c], sigma, cyclic) for c in range(3)])
    return path


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def _as_path(path: PathLike) -> np.ndarray:
    arr = np.array(path, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"Colour map must have shape (N, 3), got {arr.shape}")
    if arr.shape[0] < 2:
        raise ValueError(f"Colour map needs at least 2 entries, got {arr.shape[0]}")
    return arr


def _validate_values(space: ColourSpace, path: np.ndarray) -> None:
    if not np.all(np.isfinite(path)):
        raise ValueError("Colour map contains NaN or infinite values")
    if space is ColourSpace.RGB:
        if path.max() > 1.0 + RGB_TOLERANCE or path.min() < -RGB_TOLERANCE:
            raise ValueError("If map is RGB, values should be in the range 0-1")
    elif np.abs(path).max() < LAB_MIN_MAGNITUDE:
        raise ValueError(
            f"If map is LAB, the magnitude of values is expected to exceed {LAB_MIN_MAGNITUDE:g}"
        )


def equalise_colour_map(colour_space: Union[ColourSpace, str], path: PathLike,
                        formula: Union[DifferenceFormula, str] = DifferenceFormula.SIMPLE,
                        weights: WeightsLike = (1.0, 0.0, 0.0),
                        sigma: float = 0.0,
                        cyclic: bool = False,
                        *,
                        output_space: Optional[Union[ColourSpace, str]] = None,
                        diagnostics: Optional[DiagnosticsHook] = None) -> np.ndarray:
    """
    Equalises perceptual contrast along a colour map.

    Args:
        colour_space: ``"RGB"`` (values in [0, 1]) or ``"LAB"``.
        path: ``(N, 3)`` colour map.
        formula: ``"SIMPLE"`` or ``"PERCEPTUAL2000"`` (``"CIE76"`` /
                 ``"CIEDE2000"`` are accepted too).
        weights: Non-negative (lightness, chroma, hue) weights.  Use
                 (1, 0, 0) for maps with a lightness gradient and (1, 1, 1)
                 with SIMPLE for isoluminant maps.
        sigma: Gaussian smoothing applied after equalisation.  Around 5-7
               for a 256-entry map with a lightness slope reversal; keep
               below N/25.
        cyclic: Smooth across the ends of the map.
        output_space: Colour space of the result; defaults to the input's.
        diagnostics: Optional callable receiving an ``EqualisationReport``.

    Returns:
        ``(N, 3)`` colour map in ``output_space``.

    Raises:
        ValueError: Unknown colour space or formula, bad weights, or colour
                    values implausible for the stated colour space.
    """
    space = ColourSpace.parse(colour_space)
    out_space = space if output_space is None else ColourSpace.parse(output_space)
    formula = DifferenceFormula.parse(formula)
    weights = validate_weights(weights)
    if sigma < 0:
        raise ValueError(f"Smoothing sigma must be non-negative, got {sigma}")
    cmap = _as_path(path)
    n = cmap.shape[0]

    if sigma > n / SIGMA_WARNING_RATIO:
        warnings.warn(
            f"Smoothing sigma {sigma:g} is larger than 1/{SIGMA_WARNING_RATIO:g} of the "
            f"colour map length ({n}); expect a low-contrast band.",
            stacklevel=2,
        )

    _validate_values(space, cmap)
    lab = ColorSpaceEngine.srgb_to_lab(cmap) if space is ColourSpace.RGB else cmap

    new_lab = equalise_lab(lab, formula, weights, sigma, cyclic)
    new_rgb = ColorSpaceEngine.lab_to_srgb(new_lab)

    if diagnostics is not None:
        delta_e, cum_delta, levels, indices = _reparameterise(lab, formula, weights)
        diagnostics(EqualisationReport(
            formula=formula,
            weights=weights,
            sigma=float(sigma),
            input_lab=lab,
            output_lab=new_lab,
            output_rgb=new_rgb,
            initial_delta_e=delta_e,
            initial_cum_delta=cum_delta,
            target_levels=levels,
            initial_indices=indices,
            final_delta_e=difference_profile(new_lab, formula, weights),
        ))

    return new_rgb if out_space is ColourSpace.RGB else new_lab


def equalize_color_map(*args, **kwargs) -> np.ndarray:
    """US-spelling alias of ``equalise_colour_map``."""
    return equalise_colour_map(*args, **kwargs)
