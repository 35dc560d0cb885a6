# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_catalogue.py — Named colour map definitions.

Each entry is a ``ColourMapDef``: a control path plus the parameters needed
to turn it into an equalised colour map.  Labels follow a letter/number
scheme:

    L  linear         D  diverging       C  cyclic
    R  rainbow        I  isoluminant     X  experimental (not listed)

Several labels carry friendlier aliases (``GREY``, ``HEAT``, ``COOLWARM``,
``RAINBOW``, ...).  Aliases point at the same record.

The catalogue is built once at import and exposed as a read-only mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

import numpy as np

from tincture_colorengine import ColorSpaceEngine
from tincture_deltae import DifferenceFormula
from tincture_equalise import ColourSpace

__all__ = [
    "ColourMapDef",
    "ch2ab",
    "CATALOGUE",
]


def ch2ab(chroma: float, angle_degrees: float) -> np.ndarray:
    """(a, b) coordinates of a colour with the given chroma and hue angle."""
    return ColorSpaceEngine.lch_to_lab([0.0, chroma, angle_degrees])[1:]


@dataclass(slots=True, frozen=True)
class ColourMapDef:
    desc:           str
    hue_str:        str
    attribute_str:  str
    colour_space:   ColourSpace
    control_points: np.ndarray
    spline_order:   int
    formula:        DifferenceFormula = DifferenceFormula.SIMPLE
    weights:        Tuple[float, float, float] = (1.0, 0.0, 0.0)
    sigma:          float = 0.0

    @property
    def is_cyclic(self) -> bool:
        return "cyclic" in self.attribute_str


def _points(rows: Iterable[Iterable[float]]) -> np.ndarray:
    arr = np.array([np.ravel(np.hstack(r)) for r in rows], dtype=np.float64)
    arr.flags.writeable = False
    return arr


def _lab(desc: str, hue: str, attr: str, points, order: int, **kwargs) -> ColourMapDef:
    return ColourMapDef(desc, hue, attr, ColourSpace.LAB, _points(points), order, **kwargs)


def _rgb(desc: str, hue: str, attr: str, points, order: int, **kwargs) -> ColourMapDef:
    return ColourMapDef(desc, hue, attr, ColourSpace.RGB, _points(points), order, **kwargs)


# ═══════════════════════════════════════════════════════════════════════════════
# Definitions
# ═══════════════════════════════════════════════════════════════════════════════
_CIEDE2000 = DifferenceFormula.PERCEPTUAL2000

# Anchor colours of the first cyclic map.
_MAG = (75, 60, -37)
_YEL = (75, 0, 77)
_BLU = (35, 70, -100)
_RED = (35, 60, 48)

_DEFINITIONS: Dict[Tuple[str, ...], ColourMapDef] = {
    # --- Linear ---------------------------------------------------------------
    ("L1", "L01", "GREY", "GRAY"): _lab(
        "Grey scale", "grey", "linear",
        [(0, 0, 0), (100, 0, 0)], 2),

    ("L2", "L02", "REDUCEDGREY", "REDUCEDGRAY"): _lab(
        "Grey scale with slightly reduced contrast to avoid display saturation problems",
        "grey", "linear",
        [(10, 0, 0), (95, 0, 0)], 2),

    ("L3", "L03", "HEAT"): _rgb(
        "Black-Red-Yellow-White heat colour map", "kryw", "linear",
        [(0, 0, 0), (0.85, 0, 0), (1, 0.15, 0), (1, 0.85, 0), (1, 1, 0.15), (1, 1, 1)], 3),

    ("L4", "L04", "HEATYELLOW"): _rgb(
        "Black-Red-Yellow heat colour map", "kry", "linear",
        [(0, 0, 0), (0.85, 0, 0), (1, 0.15, 0), (1, 1, 0)], 3),

    ("L5", "L05"): _lab(
        "Colour map along the green edge of CIELAB space", "green", "linear",
        [(5, -9, 5), (15, -23, 20), (25, -31, 31), (35, -39, 39), (45, -47, 47),
         (55, -55, 55), (65, -63, 63), (75, -71, 71), (85, -79, 79), (95, -38, 90)], 3),

    ("L6", "L06"): _lab(
        "Blue shades running vertically up the blue edge of CIELAB space", "blue", "linear",
        [(5, 31, -45), (15, 50, -66), (25, 65, -90), (35, 70, -100), (45, 45, -85),
         (55, 20, -70), (65, 0, -53), (75, -22, -37), (85, -38, -20), (95, -25, -3)], 3),

    ("L8", "L08", "BMY"): _lab(
        "Blue-Magenta-Orange-Yellow highly saturated colour map", "bmy", "linear",
        [(10, ch2ab(55, -58)), (20, ch2ab(75, -58)), (30, ch2ab(75, -40)),
         (40, ch2ab(73, -20)), (50, ch2ab(75, 0)), (60, ch2ab(70, 30)),
         (70, ch2ab(65, 60)), (80, ch2ab(75, 80)), (95, ch2ab(80, 105))], 3),

    ("L9", "L09", "BGYW"): _lab(
        "Blue to yellow colour map", "bgyw", "linear",
        [(20, 59, -80), (35, 28, -66), (45, -14, -29), (60, -62, 60),
         (85, -10, 85), (95, -15, 70), (98, 0, 0)], 3),

    # --- Diverging ------------------------------------------------------------
    ("D1", "D01", "COOLWARM"): _lab(
        "Diverging blue-white-red colour map", "bwr", "diverging",
        [(40, ch2ab(83, -64)), (95, 0, 0), (40, ch2ab(83, 39))], 2,
        sigma=7.0),

    # --- Cyclic ---------------------------------------------------------------
    ("C1", "C01"): _lab(
        "Cyclic magenta-red-yellow-blue-magenta colour map", "mrybm", "cyclic",
        [_MAG, (55, 70, 0), _RED, (55, 35, 62), _YEL, (50, -20, -30), _BLU,
         (55, 45, -67), _MAG], 2,
        formula=_CIEDE2000, sigma=7.0),

    ("C2", "C02", "PHASE4"): _lab(
        "Cyclic magenta-yellow-green-blue-magenta colour map", "mygbm", "cyclic",
        [(62.5, 83, -54), (80, 20, 25), (95, -20, 90), (62.5, -65, 62),
         (42, 10, -50), (30, 75, -103), (48, 70, -80), (62.5, 83, -54)], 2,
        formula=_CIEDE2000, sigma=7.0),

    # --- Rainbow --------------------------------------------------------------
    ("R1", "R01", "RAINBOW"): _lab(
        "The least worst rainbow colour map I can devise. "
        "Note there are small perceptual blind spots at yellow and red",
        "bgyrm", "rainbow",
        [(35, 63, -98), (45, -14, -30), (60, -55, 60), (85, 0, 80),
         (55, 60, 62), (75, 55, -35)], 2,
        formula=_CIEDE2000, sigma=7.0),

    # --- Isoluminant ----------------------------------------------------------
    ("I1", "I01"): _lab(
        "Isoluminant blue to green to orange at lightness 70.  "
        "Poor on its own but works well with relief shading",
        "cgo", "isoluminant",
        [(70, ch2ab(40, -115)), (70, ch2ab(50, 160)), (70, ch2ab(50, 90)),
         (70, ch2ab(50, 45))], 3,
        weights=(1.0, 1.0, 1.0)),

    # --- Experimental ---------------------------------------------------------
    ("X31",): _lab(
        "red - green - blue interpolated in CIELAB", "rgb", "linear",
        [(53, 80, 67), (88, -86, 83), (32, 79, -108)], 2,
        weights=(0.0, 0.0, 0.0)),
}


def _build_catalogue() -> Mapping[str, ColourMapDef]:
    table: Dict[str, ColourMapDef] = {}
    for labels, definition in _DEFINITIONS.items():
        for label in labels:
            if label in table:
                raise ValueError(f"Duplicate colour map label '{label}'")
            table[label] = definition
    return MappingProxyType(table)


CATALOGUE: Mapping[str, ColourMapDef] = _build_catalogue()
