# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Colour Engine
=============
The colour-space collaborator of the colour-map pipeline.  Every colour map
is designed and equalised in CIELAB and delivered as display sRGB, so this
module provides exactly the bridge between the two:

    sRGB [0..1]  <->  XYZ (D65)  <->  CIELAB  <->  CIELCh

plus the two colour-difference metrics the equaliser relies on (CIE76 and
CIEDE2000 with parametric weights).

Design points:
1. One reference white (D65) is used in both directions so that in-gamut
   sRGB survives a round trip through Lab unchanged.
2. Transfer functions run as Numba kernels.  A strict IEEE 754 variant of
   each kernel is compiled from the same Python source and selected with
   ``set_strict_ieee(True)``.
3. CIEDE2000 is evaluated with *reciprocal* parametric factors internally
   (w = 1/k).  A weight of zero removes a component cleanly, whereas the
   textbook form would need k = inf, which ``fastmath`` kernels may not
   honour.

References:
    - CIE 15:2004 "Colorimetry"
    - IEC 61966-2-1:1999 (sRGB Standard)
    - Sharma, G., Wu, W., & Dalal, E. N. (2005). "The CIEDE2000 color-difference formula".
"""

import functools
from typing import Any, Callable, Final, Tuple, TypeAlias

import numpy as np
import numpy.typing as npt
from numba import float64, njit, prange

__all__ = [
    "ArrayFloat",
    "REF_WHITE_D65",
    "LAB_EPSILON",
    "LAB_KAPPA",
    "set_strict_ieee",
    "handle_shapes",
    "ColorSpaceEngine",
    "ColorMetrics",
]

# --- Type Aliases ---
ArrayFloat: TypeAlias = npt.NDArray[np.floating]

# --- Constants ---

# D65 reference white (Y = 1.0).  Used for both Lab directions.
REF_WHITE_D65: Final[ArrayFloat] = np.array([0.95047, 1.00000, 1.08883], dtype=np.float64)

# IEC 61966-2-1 primaries.  Stored transposed for row-vector products.
_M_SRGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
], dtype=np.float64)
M_SRGB_TO_XYZ_T: Final[ArrayFloat] = _M_SRGB_TO_XYZ.T.copy()
M_XYZ_TO_SRGB_T: Final[ArrayFloat] = np.linalg.inv(_M_SRGB_TO_XYZ).T.copy()

# CIE 1976 rational constants: delta = 6/29 marks the cubic/linear switch.
_LAB_DELTA: Final[float] = 6.0 / 29.0
LAB_EPSILON: Final[float] = _LAB_DELTA ** 3                           # ~0.008856
LAB_KAPPA: Final[float] = (116.0 * 29.0 * 29.0) / (3.0 * 6.0 * 6.0)  # ~903.296

C25_7: Final[float] = 25.0 ** 7
DEG2RAD: Final[float] = np.pi / 180.0
RAD2DEG: Final[float] = 180.0 / np.pi


# --- Runtime Configuration ---
_STRICT_IEEE: bool = False


def set_strict_ieee(enabled: bool = True) -> None:
    """
    Select strict IEEE 754 transfer-function kernels.

    The default fast kernels are compiled with ``fastmath=True``; strict
    kernels keep inf/NaN propagation intact and are useful when chasing
    numerical edge cases in a colour map.
    """
    global _STRICT_IEEE
    _STRICT_IEEE = bool(enabled)


# =============================================================================
# 1. SHAPE HANDLING
# =============================================================================

def handle_shapes(func: Callable[..., ArrayFloat]) -> Callable[..., ArrayFloat]:
    """
    Normalise a colour argument to a contiguous (N, 3) float64 batch.

    A single colour ``(3,)`` comes back as ``(3,)``; a batch ``(N, 3)``
    comes back as ``(N, 3)``.  Lists and tuples are accepted.
    """
    @functools.wraps(func)
    def wrapper(arr: Any, *args: Any, **kwargs: Any) -> ArrayFloat:
        arr = np.asarray(arr, dtype=np.float64)
        batch = np.ascontiguousarray(np.atleast_2d(arr))
        if batch.ndim != 2 or batch.shape[-1] != 3:
            raise ValueError(f"Expected colours of shape (3,) or (N, 3), got {arr.shape}")

        res = func(batch, *args, **kwargs)

        if arr.ndim == 1:
            return res[0]
        return res
    return wrapper


# =============================================================================
# 2. TRANSFER-FUNCTION KERNELS
# =============================================================================
# Each kernel body is written once and compiled twice: a cached fastmath
# build for normal use and an uncached strict build.

def _compile_pair(pyfunc: Callable[[ArrayFloat], ArrayFloat]) -> Tuple[Callable, Callable]:
    fast = njit(cache=True, fastmath=True)(pyfunc)
    strict = njit(cache=False, fastmath=False)(pyfunc)
    return fast, strict


def _srgb_oetf(linear: ArrayFloat) -> ArrayFloat:
    """sRGB gamma encoding (linear light -> display value)."""
    src = linear.ravel()
    dst = np.empty(src.size, dtype=np.float64)
    for i in range(src.size):
        v = src[i]
        if v <= 0.0031308:
            dst[i] = 12.92 * v
        else:
            dst[i] = 1.055 * (v ** (1.0 / 2.4)) - 0.055
    return dst.reshape(linear.shape)


def _srgb_eotf(srgb: ArrayFloat) -> ArrayFloat:
    """sRGB gamma decoding (display value -> linear light)."""
    src = srgb.ravel()
    dst = np.empty(src.size, dtype=np.float64)
    for i in range(src.size):
        v = src[i]
        if v <= 0.04045:
            dst[i] = v / 12.92
        else:
            dst[i] = ((v + 0.055) / 1.055) ** 2.4
    return dst.reshape(srgb.shape)


def _lab_forward(t: ArrayFloat) -> ArrayFloat:
    """CIELAB f(t): cube root with a linear toe below LAB_EPSILON."""
    src = t.ravel()
    dst = np.empty(src.size, dtype=np.float64)
    for i in range(src.size):
        v = src[i]
        if v > LAB_EPSILON:
            dst[i] = v ** (1.0 / 3.0)
        else:
            dst[i] = (LAB_KAPPA * v + 16.0) / 116.0
    return dst.reshape(t.shape)


def _lab_inverse(t: ArrayFloat) -> ArrayFloat:
    """Inverse of ``_lab_forward``; the toe uses (116 t - 16) / kappa."""
    src = t.ravel()
    dst = np.empty(src.size, dtype=np.float64)
    for i in range(src.size):
        v = src[i]
        if v > _LAB_DELTA:
            dst[i] = v * v * v
        else:
            dst[i] = (116.0 * v - 16.0) / LAB_KAPPA
    return dst.reshape(t.shape)


_srgb_oetf_fast, _srgb_oetf_strict = _compile_pair(_srgb_oetf)
_srgb_eotf_fast, _srgb_eotf_strict = _compile_pair(_srgb_eotf)
_lab_forward_fast, _lab_forward_strict = _compile_pair(_lab_forward)
_lab_inverse_fast, _lab_inverse_strict = _compile_pair(_lab_inverse)


def _gamma_srgb(linear: ArrayFloat) -> ArrayFloat:
    return _srgb_oetf_strict(linear) if _STRICT_IEEE else _srgb_oetf_fast(linear)


def _inverse_gamma_srgb(srgb: ArrayFloat) -> ArrayFloat:
    return _srgb_eotf_strict(srgb) if _STRICT_IEEE else _srgb_eotf_fast(srgb)


def _lab_f(t: ArrayFloat) -> ArrayFloat:
    return _lab_forward_strict(t) if _STRICT_IEEE else _lab_forward_fast(t)


def _lab_f_inv(t: ArrayFloat) -> ArrayFloat:
    return _lab_inverse_strict(t) if _STRICT_IEEE else _lab_inverse_fast(t)


@njit(cache=True, fastmath=True)
def _lab_to_lch_kernel(lab: ArrayFloat) -> ArrayFloat:
    """(N, 3) Lab -> (N, 3) LCh with hue in degrees [0, 360)."""
    lch = np.empty_like(lab)
    for i in range(lab.shape[0]):
        a = lab[i, 1]
        b = lab[i, 2]
        h = np.arctan2(b, a) * RAD2DEG
        if h < 0.0:
            h += 360.0
        lch[i, 0] = lab[i, 0]
        lch[i, 1] = np.hypot(a, b)
        lch[i, 2] = h
    return lch


@njit(cache=True, fastmath=True)
def _lch_to_lab_kernel(lch: ArrayFloat) -> ArrayFloat:
    """(N, 3) LCh -> (N, 3) Lab."""
    lab = np.empty_like(lch)
    for i in range(lch.shape[0]):
        h = lch[i, 2] * DEG2RAD
        lab[i, 0] = lch[i, 0]
        lab[i, 1] = lch[i, 1] * np.cos(h)
        lab[i, 2] = lch[i, 1] * np.sin(h)
    return lab


# =============================================================================
# 3. COLOUR SPACE ENGINE
# =============================================================================

class ColorSpaceEngine:
    """Static sRGB / XYZ / Lab / LCh conversions.

    Public methods are shape-safe (``@handle_shapes``).  The ``_raw``
    variants assume a validated (N, 3) float64 batch and are what the
    chained conversions call internally.
    """

    @staticmethod
    def _srgb_to_xyz_raw(rgb: ArrayFloat, clip: bool = True) -> ArrayFloat:
        if clip:
            rgb = np.clip(rgb, 0.0, 1.0)
        return np.dot(_inverse_gamma_srgb(rgb), M_SRGB_TO_XYZ_T)

    @staticmethod
    def _xyz_to_srgb_raw(xyz: ArrayFloat, clip: bool = True) -> ArrayFloat:
        linear = np.dot(xyz, M_XYZ_TO_SRGB_T)
        if clip:
            linear = np.clip(linear, 0.0, 1.0)
        return _gamma_srgb(linear)

    @staticmethod
    def _xyz_to_lab_raw(xyz: ArrayFloat, illuminant: ArrayFloat = REF_WHITE_D65) -> ArrayFloat:
        f = _lab_f(np.ascontiguousarray(xyz / illuminant))
        lab = np.empty_like(xyz)
        lab[:, 0] = 116.0 * f[:, 1] - 16.0
        lab[:, 1] = 500.0 * (f[:, 0] - f[:, 1])
        lab[:, 2] = 200.0 * (f[:, 1] - f[:, 2])
        return lab

    @staticmethod
    def _lab_to_xyz_raw(lab: ArrayFloat, illuminant: ArrayFloat = REF_WHITE_D65) -> ArrayFloat:
        f = np.empty_like(lab)
        f[:, 1] = (lab[:, 0] + 16.0) / 116.0
        f[:, 0] = f[:, 1] + lab[:, 1] / 500.0
        f[:, 2] = f[:, 1] - lab[:, 2] / 200.0
        return _lab_f_inv(f) * illuminant

    @staticmethod
    @handle_shapes
    def lab_to_lch(lab_array: ArrayFloat) -> ArrayFloat:
        """Converts CIELAB to CIELCh (chroma, hue angle in degrees)."""
        return _lab_to_lch_kernel(lab_array)

    @staticmethod
    @handle_shapes
    def lch_to_lab(lch_array: ArrayFloat) -> ArrayFloat:
        """Converts CIELCh back to CIELAB."""
        return _lch_to_lab_kernel(lch_array)

    @staticmethod
    @handle_shapes
    def srgb_to_lab(rgb_array: ArrayFloat) -> ArrayFloat:
        """
        Direct conversion sRGB -> CIELAB (D65).

        Pure red ``(1, 0, 0)`` maps to approximately ``(53.24, 80.10, 67.21)``.
        """
        xyz = ColorSpaceEngine._srgb_to_xyz_raw(rgb_array)
        return ColorSpaceEngine._xyz_to_lab_raw(xyz)

    @staticmethod
    @handle_shapes
    def lab_to_srgb(lab_array: ArrayFloat) -> ArrayFloat:
        """Direct conversion CIELAB (D65) -> sRGB, clipped to the gamut."""
        xyz = ColorSpaceEngine._lab_to_xyz_raw(lab_array)
        return ColorSpaceEngine._xyz_to_srgb_raw(xyz)


# =============================================================================
# 4. COLOUR DIFFERENCE METRICS
# =============================================================================

@njit(float64(float64, float64, float64, float64, float64, float64, float64, float64, float64),
      cache=True, fastmath=True)
def _delta_e_2000_pair(L1: float, a1: float, b1: float, L2: float, a2: float, b2: float,
                       w_L: float, w_C: float, w_H: float) -> float:
    """CIEDE2000 for one colour pair.  ``w_*`` are the reciprocals of k_L, k_C, k_H."""
    C1 = np.hypot(a1, b1)
    C2 = np.hypot(a2, b2)
    C_bar_7 = ((C1 + C2) * 0.5) ** 7
    G = 0.5 * (1.0 - np.sqrt(C_bar_7 / (C_bar_7 + C25_7)))
    a1_p = (1.0 + G) * a1
    a2_p = (1.0 + G) * a2
    C1_p = np.hypot(a1_p, b1)
    C2_p = np.hypot(a2_p, b2)
    h1_p = (np.arctan2(b1, a1_p) * RAD2DEG) % 360.0
    h2_p = (np.arctan2(b2, a2_p) * RAD2DEG) % 360.0

    chromatic = C1_p * C2_p > 1e-12

    dL_p = L2 - L1
    dC_p = C2_p - C1_p
    dh_p = 0.0
    if chromatic:
        dh_p = h2_p - h1_p
        if dh_p > 180.0:
            dh_p -= 360.0
        elif dh_p < -180.0:
            dh_p += 360.0
    dH_p = 2.0 * np.sqrt(C1_p * C2_p) * np.sin(dh_p * DEG2RAD * 0.5)

    L_bar_p = (L1 + L2) * 0.5
    C_bar_p = (C1_p + C2_p) * 0.5
    h_bar_p = h1_p + h2_p
    if chromatic:
        if abs(h1_p - h2_p) <= 180.0:
            h_bar_p *= 0.5
        elif h_bar_p < 360.0:
            h_bar_p = (h_bar_p + 360.0) * 0.5
        else:
            h_bar_p = (h_bar_p - 360.0) * 0.5

    T = (1.0
         - 0.17 * np.cos((h_bar_p - 30.0) * DEG2RAD)
         + 0.24 * np.cos((2.0 * h_bar_p) * DEG2RAD)
         + 0.32 * np.cos((3.0 * h_bar_p + 6.0) * DEG2RAD)
         - 0.20 * np.cos((4.0 * h_bar_p - 63.0) * DEG2RAD))
    d_theta = 30.0 * np.exp(-((h_bar_p - 275.0) / 25.0) ** 2)
    C_bar_p_7 = C_bar_p ** 7
    R_T = -np.sin(2.0 * d_theta * DEG2RAD) * 2.0 * np.sqrt(C_bar_p_7 / (C_bar_p_7 + C25_7))

    L_term = (L_bar_p - 50.0) ** 2
    S_L = 1.0 + (0.015 * L_term) / np.sqrt(20.0 + L_term)
    S_C = 1.0 + 0.045 * C_bar_p
    S_H = 1.0 + 0.015 * C_bar_p * T

    tL = w_L * dL_p / S_L
    tC = w_C * dC_p / S_C
    tH = w_H * dH_p / S_H
    # R_T * tC * tH can push the sum fractionally below zero for tiny differences.
    return np.sqrt(max(tL * tL + tC * tC + tH * tH + R_T * tC * tH, 0.0))


@njit(cache=True, fastmath=True, parallel=True)
def _batch_delta_e_2000(lab1: ArrayFloat, lab2: ArrayFloat,
                        w_L: float, w_C: float, w_H: float) -> ArrayFloat:
    n = lab1.shape[0]
    res = np.empty(n, dtype=np.float64)
    for i in prange(n):
        res[i] = _delta_e_2000_pair(lab1[i, 0], lab1[i, 1], lab1[i, 2],
                                    lab2[i, 0], lab2[i, 1], lab2[i, 2],
                                    w_L, w_C, w_H)
    return res


@njit(cache=True, fastmath=True, parallel=True)
def _batch_delta_e_76(lab1: ArrayFloat, lab2: ArrayFloat) -> ArrayFloat:
    n = lab1.shape[0]
    res = np.empty(n, dtype=np.float64)
    for i in prange(n):
        dL = lab1[i, 0] - lab2[i, 0]
        da = lab1[i, 1] - lab2[i, 1]
        db = lab1[i, 2] - lab2[i, 2]
        res[i] = np.sqrt(dL * dL + da * da + db * db)
    return res


def _reciprocal(k: float, label: str) -> float:
    if not k > 0.0:
        raise ValueError(f"{label} must be positive (use inf to ignore the component), got {k}")
    return 0.0 if np.isinf(k) else 1.0 / k


class ColorMetrics:
    @staticmethod
    def _prepare_inputs(lab1: ArrayFloat, lab2: ArrayFloat) -> Tuple[ArrayFloat, ArrayFloat]:
        """Bring both operands to contiguous (N, 3) float64, broadcasting a single colour."""
        l1 = np.ascontiguousarray(np.atleast_2d(np.asarray(lab1, dtype=np.float64)))
        l2 = np.ascontiguousarray(np.atleast_2d(np.asarray(lab2, dtype=np.float64)))

        if l1.shape[-1] != 3 or l2.shape[-1] != 3:
            raise ValueError(f"Inputs must have shape (N, 3), got {l1.shape} and {l2.shape}")

        if l1.shape[0] != l2.shape[0]:
            if l1.shape[0] == 1:
                l1 = np.ascontiguousarray(np.broadcast_to(l1, l2.shape))
            elif l2.shape[0] == 1:
                l2 = np.ascontiguousarray(np.broadcast_to(l2, l1.shape))
            else:
                raise ValueError(f"Shapes {l1.shape} and {l2.shape} are not broadcastable.")
        return l1, l2

    @staticmethod
    def delta_E_2000_weighted(lab1: ArrayFloat, lab2: ArrayFloat,
                              weights: Tuple[float, float, float] = (1.0, 1.0, 1.0)) -> ArrayFloat:
        """
        CIEDE2000 with reciprocal parametric factors.

        ``weights[i]`` equals ``1 / k_i`` for lightness, chroma and hue, so a
        weight of 0 drops that component entirely.

        Returns:
            One value per colour pair, or a float when both inputs are (3,).
        """
        w_L, w_C, w_H = (float(w) for w in weights)
        l1, l2 = ColorMetrics._prepare_inputs(lab1, lab2)
        res = _batch_delta_e_2000(l1, l2, w_L, w_C, w_H)
        if np.ndim(lab1) == 1 and np.ndim(lab2) == 1:
            return res[0]
        return res

    @staticmethod
    def delta_E_2000(lab1: ArrayFloat, lab2: ArrayFloat,
                     k_L: float = 1.0, k_C: float = 1.0, k_H: float = 1.0) -> ArrayFloat:
        """
        Calculates the CIEDE2000 colour difference.

        Args:
            lab1: Reference colours, shape (N, 3) or (3,).
            lab2: Sample colours, shape (N, 3) or (3,).
            k_L, k_C, k_H: Parametric factors (> 0, ``inf`` allowed).
        """
        weights = (_reciprocal(k_L, "k_L"), _reciprocal(k_C, "k_C"), _reciprocal(k_H, "k_H"))
        return ColorMetrics.delta_E_2000_weighted(lab1, lab2, weights)

    @staticmethod
    def delta_E_76(lab1: ArrayFloat, lab2: ArrayFloat) -> ArrayFloat:
        """CIE 1976 colour difference (Euclidean distance in Lab)."""
        l1, l2 = ColorMetrics._prepare_inputs(lab1, lab2)
        res = _batch_delta_e_76(l1, l2)
        if np.ndim(lab1) == 1 and np.ndim(lab2) == 1:
            return res[0]
        return res
