# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from tincture_colorengine import ColorMetrics
from tincture_deltae import (
    DifferenceFormula,
    cie76_profile,
    ciede2000_profile,
    difference_profile,
    validate_weights,
)

GREY_RAMP = np.column_stack([np.linspace(0.0, 100.0, 101), np.zeros(101), np.zeros(101)])


@pytest.mark.parametrize("name, expected", [
    ("SIMPLE", DifferenceFormula.SIMPLE),
    ("cie76", DifferenceFormula.SIMPLE),
    ("PERCEPTUAL2000", DifferenceFormula.PERCEPTUAL2000),
    (" CIEDE2000 ", DifferenceFormula.PERCEPTUAL2000),
    (DifferenceFormula.SIMPLE, DifferenceFormula.SIMPLE),
])
def test_formula_parse(name, expected):
    assert DifferenceFormula.parse(name) is expected


def test_formula_parse_rejects_unknown_name():
    with pytest.raises(ValueError):
        DifferenceFormula.parse("CIE94")


def test_formula_parse_rejects_non_string():
    with pytest.raises(TypeError):
        DifferenceFormula.parse(2000)


@pytest.mark.parametrize("weights", [(1.0, 0.0), (1.0, -1.0, 0.0), (np.nan, 0.0, 0.0)])
def test_invalid_weights(weights):
    with pytest.raises(ValueError):
        validate_weights(weights)


def test_cie76_profile_of_uniform_ramp_is_constant():
    assert_allclose(cie76_profile(GREY_RAMP, (1, 0, 0)), 1.0, atol=1e-12)


def test_cie76_weights_select_channels():
    assert_allclose(cie76_profile(GREY_RAMP, (0, 1, 1)), 0.0)
    path = np.column_stack([np.full(5, 50.0), np.arange(5.0) * 3.0, np.arange(5.0) * 4.0])
    assert_allclose(cie76_profile(path, (1, 1, 1)), 5.0)
    assert_allclose(cie76_profile(path, (1, 1, 0)), 3.0)


def test_ciede2000_profile_uses_neighbours():
    rng = np.random.default_rng(5)
    path = np.column_stack([np.linspace(20.0, 80.0, 12),
                            rng.uniform(-30, 30, 12),
                            rng.uniform(-30, 30, 12)])
    profile = ciede2000_profile(path, (1, 1, 1))
    assert profile.shape == (12,)
    assert profile.min() >= 0.0
    assert profile[5] == pytest.approx(ColorMetrics.delta_E_2000(path[6], path[4]) / 2.0)
    assert profile[0] == pytest.approx(ColorMetrics.delta_E_2000(path[1], path[0]))
    assert profile[-1] == pytest.approx(ColorMetrics.delta_E_2000(path[-1], path[-2]))


def test_ciede2000_weights_are_reciprocal_factors():
    path = GREY_RAMP[::10]
    half = ciede2000_profile(path, (0.5, 1, 1))
    assert_allclose(half, ciede2000_profile(path, (1, 1, 1)) / 2.0, rtol=1e-9)
    assert_allclose(ciede2000_profile(path, (0, 1, 1)), 0.0, atol=1e-12)


def test_two_sample_path():
    path = np.array([[40.0, 0.0, 0.0], [60.0, 0.0, 0.0]])
    assert_allclose(difference_profile(path, "SIMPLE", (1, 0, 0)), [20.0, 20.0])
    de = difference_profile(path, "CIEDE2000", (1, 0, 0))
    assert de[0] == pytest.approx(de[1])


def test_difference_profile_rejects_short_path():
    with pytest.raises(ValueError):
        difference_profile(GREY_RAMP[:1], "SIMPLE", (1, 0, 0))


def test_formulas_are_not_interchangeable():
    path = np.column_stack([np.full(10, 60.0), np.linspace(-40, 40, 10), np.zeros(10)])
    simple = difference_profile(path, DifferenceFormula.SIMPLE, (1, 1, 1))
    perceptual = difference_profile(path, DifferenceFormula.PERCEPTUAL2000, (1, 1, 1))
    assert not np.allclose(simple, perceptual)
