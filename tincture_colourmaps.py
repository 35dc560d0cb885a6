# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_colourmaps.py — Turns colour map definitions into RGB tables.

    definition ──► spline path ──► equalised RGB ──► shift / reverse ──► ColourMap

``build_colour_map`` runs that pipeline for any ``ColourMapDef``; ``cmap``
does the same for a catalogue label.  Every generated map carries a
descriptive name of the form::

    <attribute>_<hues>_<lightness range>_c<mean chroma>_n<length>[_s<shift %>][_r]

e.g. ``linear_kryw_5-100_c67_n256`` or ``diverging_bwr_40-95_c42_n256``.
"""

from __future__ import annotations

import warnings
from typing import Any, Callable, Final, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from tincture_catalogue import CATALOGUE, ColourMapDef, ch2ab
from tincture_colorengine import ColorSpaceEngine
from tincture_equalise import ColourSpace, EqualisationReport, equalise_colour_map
from tincture_spline import evaluate_open_spline, evaluate_periodic_spline

__all__ = [
    "REFERENCE_MAP_LENGTH",
    "ColourMap",
    "build_colour_map",
    "cmap",
    "search_catalogue",
    "ch2ab",
    "linear_rgb_map",
    "rgb_to_uint32",
]

# Catalogue sigmas are tuned for maps of this length and scaled for others.
REFERENCE_MAP_LENGTH: Final[int] = 256


class ColourMap(NamedTuple):
    rgb:  np.ndarray   # (N, 3) floats in [0, 1]
    name: str
    desc: str


# ═══════════════════════════════════════════════════════════════════════════════
# 1.  Naming
# ═══════════════════════════════════════════════════════════════════════════════
def _lightness_range(definition: ColourMapDef, rgb: np.ndarray) -> str:
    if definition.colour_space is ColourSpace.LAB:
        lightness = np.asarray(definition.control_points[:, 0], dtype=np.float64)
    else:
        lightness = np.round(ColorSpaceEngine.srgb_to_lab(rgb)[:, 0])

    min_l, max_l = lightness.min(), lightness.max()
    attr = definition.attribute_str
    if min_l == max_l:
        return f"{int(round(min_l))}"
    if lightness[0] == max_l and ("diverging" in attr or "linear" in attr):
        return f"{int(round(max_l))}-{int(round(min_l))}"
    return f"{int(round(min_l))}-{int(round(max_l))}"


def _map_name(definition: ColourMapDef, rgb: np.ndarray, n: int,
              shift: float, reverse: bool) -> str:
    lch = ColorSpaceEngine.lab_to_lch(ColorSpaceEngine.srgb_to_lab(rgb))
    mean_chroma = np.mean(lch[:, 1])

    name = (f"{definition.attribute_str}_{definition.hue_str}_"
            f"{_lightness_range(definition, rgb)}_c{int(round(mean_chroma))}_n{n}")
    if shift != 0:
        name += f"_s{int(round(shift * 100))}"
    if reverse:
        name += "_r"
    return name


# ═══════════════════════════════════════════════════════════════════════════════
# 2.  Map generation
# ═══════════════════════════════════════════════════════════════════════════════
def build_colour_map(definition: ColourMapDef, n: int = REFERENCE_MAP_LENGTH,
                     chroma_k: float = 1.0, shift: float = 0.0, reverse: bool = False,
                     diagnostics: Optional[Callable[[EqualisationReport], None]] = None) -> ColourMap:
    """
    Generates an equalised RGB colour map from a definition.

    Args:
        definition: Control path and equalisation parameters.
        n: Number of colour map entries.
        chroma_k: Scaling of the a/b (chroma) components of LAB control
                  points.  Ignored for RGB definitions.
        shift: Fraction of the map length to rotate the entries by.  Meant
               for cyclic maps; other maps are shifted too but with a warning.
        reverse: Reverse the order of the entries.
        diagnostics: Forwarded to ``equalise_colour_map``.

    Returns:
        ``ColourMap(rgb, name, desc)``.
    """
    if int(n) != n or n < 2:
        raise ValueError(f"Colour map length must be an integer >= 2, got {n}")
    n = int(n)
    if chroma_k < 0:
        raise ValueError(f"chroma_k must be non-negative, got {chroma_k}")

    points = np.array(definition.control_points, dtype=np.float64)
    if definition.colour_space is ColourSpace.LAB:
        points[:, 1:] *= chroma_k

    if definition.is_cyclic:
        path = evaluate_periodic_spline(points, definition.spline_order, n)
    else:
        path = evaluate_open_spline(points, definition.spline_order, n)

    sigma = definition.sigma * n / REFERENCE_MAP_LENGTH
    rgb = equalise_colour_map(definition.colour_space, path, definition.formula,
                              definition.weights, sigma, definition.is_cyclic,
                              output_space=ColourSpace.RGB, diagnostics=diagnostics)

    if shift != 0:
        if not definition.is_cyclic:
            warnings.warn("Colour map shifting being applied to a non-cyclic map", stacklevel=2)
        rgb = np.roll(rgb, int(round(n * shift)), axis=0)

    if reverse:
        rgb = rgb[::-1].copy()

    return ColourMap(rgb, _map_name(definition, rgb, n, shift, reverse), definition.desc)


def cmap(label: str, **kwargs: Any) -> ColourMap:
    """
    Builds a catalogue colour map by label or alias (case-insensitive).

    Keyword arguments are passed to ``build_colour_map``.

    Raises:
        KeyError: Unknown label.
    """
    try:
        definition = CATALOGUE[label.strip().upper()]
    except KeyError:
        raise KeyError(f"Unknown colour map label '{label}'") from None
    return build_colour_map(definition, **kwargs)


def search_catalogue(text: str = "ALL", n: int = REFERENCE_MAP_LENGTH) -> List[Tuple[str, str, str]]:
    """
    Lists catalogue maps whose generated name contains ``text``.

    ``"ALL"`` matches everything.  Experimental (``X``) maps and aliases are
    not listed; each map appears once, under its primary label.

    Returns:
        List of ``(label, name, desc)``.
    """
    seen = set()
    found = []
    for label, definition in CATALOGUE.items():
        if label.startswith("X") or id(definition) in seen:
            continue
        seen.add(id(definition))
        name = build_colour_map(definition, n=n).name
        if text.upper() == "ALL" or text.lower() in name.lower():
            found.append((label, name, definition.desc))
    return found


# ═══════════════════════════════════════════════════════════════════════════════
# 3.  Helpers
# ═══════════════════════════════════════════════════════════════════════════════
def linear_rgb_map(colour: Union[np.ndarray, Sequence[float]], n: int = REFERENCE_MAP_LENGTH) -> np.ndarray:
    """Linear ramp from black to ``colour`` in RGB space, ``(n, 3)``."""
    c = np.asarray(colour, dtype=np.float64)
    if c.shape != (3,):
        raise ValueError(f"Colour must be an RGB 3-vector, got shape {c.shape}")
    return np.linspace(0.0, 1.0, n)[:, None] * c


def rgb_to_uint32(rgb: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
    """Packs RGB values in [0, 1] into ``0x00RRGGBB`` unsigned 32-bit integers."""
    arr = np.asarray(rgb, dtype=np.float64)
    if arr.ndim == 0 or arr.shape[-1] not in (3, 4):
        raise ValueError(f"Expected RGB or RGBA values along the last axis, got shape {arr.shape}")
    channels = np.round(np.clip(arr[..., :3], 0.0, 1.0) * 255.0).astype(np.uint32)
    return (channels[..., 0] << 16) | (channels[..., 1] << 8) | channels[..., 2]
