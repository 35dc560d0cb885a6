# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import numpy as np
import pytest

from tincture_imageutils import histtruncate, normalise


def test_histtruncate_clips_requested_percentages():
    img = np.random.default_rng(1).random((100, 200))
    out = histtruncate(img, 2, 4)
    assert out.shape == img.shape
    assert 100 * np.mean(out <= out.min()) == pytest.approx(2, abs=1)
    assert 100 * np.mean(out >= out.max()) == pytest.approx(4, abs=1)
    inside = (img > out.min()) & (img < out.max())
    assert np.array_equal(out[inside], img[inside])


def test_histtruncate_symmetric_default():
    img = np.arange(1000.0)
    out = histtruncate(img, 5)
    assert out.min() == 50.0
    assert out.max() == 949.0


def test_histtruncate_ignores_nan():
    img = np.arange(100.0)
    img[10] = np.nan
    out = histtruncate(img, 10)
    assert np.isnan(out[10])
    assert np.nanmin(out) > 0.0


@pytest.mark.parametrize("cuts", [(-1, 5), (5, 101)])
def test_histtruncate_rejects_bad_cut(cuts):
    with pytest.raises(ValueError):
        histtruncate(np.zeros((4, 4)), *cuts)


def test_histtruncate_rejects_colour_image():
    with pytest.raises(ValueError):
        histtruncate(np.zeros((4, 4, 3)), 1)


def test_normalise_to_unit_range():
    out = normalise(np.array([[2.0, 4.0], [6.0, 10.0]]))
    assert out.min() == 0.0
    assert out.max() == 1.0


def test_normalise_constant_image():
    assert np.all(normalise(np.full((3, 3), 7.0)) == 0.0)


def test_normalise_to_mean_and_variance():
    img = np.random.default_rng(2).normal(5.0, 3.0, size=(50, 50))
    out = normalise(img, reqmean=1.0, reqvar=4.0)
    assert out.mean() == pytest.approx(1.0)
    assert out.var() == pytest.approx(4.0)


def test_normalise_needs_both_mean_and_variance():
    with pytest.raises(ValueError):
        normalise(np.zeros(3), reqmean=1.0)
