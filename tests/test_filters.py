# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from tincture_filters import gaussfilt1d, gaussian_kernel, interp1, smooth


@pytest.mark.parametrize("sigma", [0.5, 1.0, 2.0, 7.0])
def test_gaussian_kernel_shape_and_sum(sigma):
    kernel = gaussian_kernel(sigma)
    assert kernel.size == 2 * math.ceil(3 * sigma) + 1
    assert kernel.sum() == pytest.approx(1.0)
    assert_allclose(kernel, kernel[::-1])
    assert np.argmax(kernel) == kernel.size // 2


def test_gaussian_kernel_peak_height():
    sigma = 2.0
    peak = gaussian_kernel(sigma).max()
    assert peak == pytest.approx(1.0 / (sigma * math.sqrt(2.0 * math.pi)), rel=1e-2)


@pytest.mark.parametrize("sigma", [0.0, -1.0])
def test_gaussian_kernel_rejects_non_positive_sigma(sigma):
    with pytest.raises(ValueError):
        gaussian_kernel(sigma)


def test_gaussfilt1d_impulse_keeps_unit_sum():
    signal = np.zeros(101)
    signal[50] = 1.0
    out = gaussfilt1d(signal, 3.0)
    assert out.sum() == pytest.approx(1.0)
    assert_allclose(out[41:60], gaussian_kernel(3.0), atol=1e-15)


def test_smooth_leaves_linear_ramp_unchanged():
    ramp = np.linspace(10.0, 90.0, 64)
    assert_allclose(smooth(ramp, 4.0, cyclic=False), ramp, atol=1e-9)


def test_smooth_zero_sigma_returns_copy():
    seq = np.arange(5.0)
    out = smooth(seq, 0.0, cyclic=False)
    assert_allclose(out, seq)
    assert out is not seq


def test_smooth_cyclic_commutes_with_rotation():
    rng = np.random.default_rng(3)
    seq = rng.normal(size=50)
    rotated = smooth(np.roll(seq, 7), 2.0, cyclic=True)
    assert_allclose(rotated, np.roll(smooth(seq, 2.0, cyclic=True), 7), atol=1e-12)


def test_smooth_cyclic_preserves_mean():
    seq = np.sin(np.linspace(0.0, 2.0 * np.pi, 40, endpoint=False)) + 3.0
    assert smooth(seq, 3.0, cyclic=True).mean() == pytest.approx(seq.mean())


def test_smooth_reduces_noise():
    rng = np.random.default_rng(11)
    seq = np.linspace(0.0, 1.0, 200) + rng.normal(scale=0.05, size=200)
    out = smooth(seq, 3.0, cyclic=False)
    assert out.shape == seq.shape
    assert np.std(np.diff(out)) < np.std(np.diff(seq))


def test_interp1_matches_reference_values():
    x = np.array([0.0, 2.0, 7.0])
    y = 2.0 * x
    assert_allclose(interp1(x, y, [1.1, 0.5, 6.0]), [2.2, 1.0, 12.0])


def test_interp1_clamps_outside_range():
    assert_allclose(interp1([0.0, 1.0], [5.0, 7.0], [-3.0, 4.0]), [5.0, 7.0])


def test_interp1_rejects_decreasing_x():
    with pytest.raises(ValueError):
        interp1([0.0, 2.0, 1.0], [0.0, 1.0, 2.0], [0.5])


def test_interp1_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        interp1([0.0, 1.0], [0.0, 1.0, 2.0], [0.5])


def test_smooth_impulse_response():
    sigma = 2.0
    impulse = np.zeros(101)
    impulse[50] = 1.0
    out = smooth(impulse, sigma, cyclic=False)
    assert out.max() == pytest.approx(1.0 / (sigma * math.sqrt(2.0 * math.pi)), abs=1e-3)
    assert out.sum() == pytest.approx(1.0, abs=1e-3)
