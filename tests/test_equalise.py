# -*- coding: utf-8 -*-
"""
Tincture: Perceptually uniform colour maps
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from tincture_colorengine import ColorSpaceEngine
from tincture_deltae import DifferenceFormula
from tincture_equalise import (
    DELTA_E_FLOOR,
    ColourSpace,
    EqualisationReport,
    equalisation_step,
    equalise_colour_map,
    equalise_lab,
    equalize_color_map,
)


def grey_path(lightness):
    lightness = np.asarray(lightness, dtype=np.float64)
    return np.column_stack([lightness, np.zeros_like(lightness), np.zeros_like(lightness)])


UNEVEN_GREY = grey_path(np.concatenate([np.linspace(0, 20, 127), np.linspace(20, 100, 129)]))


def test_uneven_lightness_ramp_is_equalised():
    rgb = equalise_colour_map("LAB", UNEVEN_GREY, "SIMPLE", (1, 0, 0), 1, output_space="RGB")
    assert rgb.shape == (256, 3)
    lightness = ColorSpaceEngine.srgb_to_lab(rgb)[:, 0]
    steps = np.diff(lightness)
    assert np.ptp(steps[1:-1]) < 0.1


def test_uniform_ramp_is_a_fixed_point():
    lab = grey_path(np.linspace(10, 90, 100))
    assert_allclose(equalisation_step(lab, "SIMPLE", (1, 0, 0)), lab, atol=1e-9)
    assert_allclose(equalise_lab(lab), lab, atol=1e-9)


def test_equalisation_does_not_modify_input():
    lab = UNEVEN_GREY.copy()
    equalise_lab(lab, DifferenceFormula.SIMPLE, (1, 0, 0), sigma=2.0)
    assert_allclose(lab, UNEVEN_GREY)


def test_end_points_are_preserved_without_smoothing():
    lab = equalise_lab(UNEVEN_GREY)
    assert lab.shape == UNEVEN_GREY.shape
    assert_allclose(lab[[0, -1]], UNEVEN_GREY[[0, -1]], atol=1e-9)
    assert np.all(np.diff(lab[:, 0]) >= 0)


def test_zero_weights_leave_path_unchanged():
    # Every difference is floored to the same value, so the path is already even.
    lab = np.array([[53.0, 80.0, 67.0], [88.0, -86.0, 83.0], [32.0, 79.0, -108.0]])
    assert_allclose(equalise_lab(lab, "SIMPLE", (0, 0, 0)), lab, atol=1e-9)


def test_rgb_input_returns_rgb():
    ramp = np.linspace(0.0, 1.0, 64) ** 3
    rgb = np.column_stack([ramp, ramp, ramp])
    out = equalise_colour_map("RGB", rgb, "CIE76", (1, 0, 0))
    assert out.shape == (64, 3)
    assert out.min() >= 0.0 and out.max() <= 1.0
    lightness = ColorSpaceEngine.srgb_to_lab(out)[:, 0]
    steps = np.diff(lightness)
    assert steps.max() - steps.min() < 0.5


def test_output_space_can_be_overridden():
    lab = equalise_colour_map(ColourSpace.LAB, UNEVEN_GREY)
    rgb = equalise_colour_map(ColourSpace.LAB, UNEVEN_GREY, output_space="rgb")
    assert np.abs(lab).max() > 1.5
    assert_allclose(rgb, ColorSpaceEngine.lab_to_srgb(lab), atol=1e-12)


def test_perceptual2000_formula_runs():
    path = np.column_stack([np.linspace(30, 80, 50), np.linspace(-40, 40, 50), np.full(50, 10.0)])
    out = equalise_colour_map("LAB", path, "PERCEPTUAL2000", (1, 1, 1), 2)
    assert out.shape == path.shape
    assert np.all(np.isfinite(out))


def test_us_spelling_alias():
    assert_allclose(equalize_color_map("LAB", UNEVEN_GREY, "SIMPLE"),
                    equalise_colour_map("LAB", UNEVEN_GREY, "SIMPLE"))


def test_diagnostics_callback_receives_report():
    reports = []
    equalise_colour_map("LAB", UNEVEN_GREY, "SIMPLE", (1, 0, 0), 1, diagnostics=reports.append)
    assert len(reports) == 1
    report = reports[0]
    assert isinstance(report, EqualisationReport)
    assert report.formula is DifferenceFormula.SIMPLE
    assert report.initial_delta_e.min() >= DELTA_E_FLOOR
    assert np.all(np.diff(report.initial_cum_delta) > 0)
    assert_allclose(np.diff(report.target_levels), np.diff(report.target_levels)[0])
    assert report.initial_indices[0] == pytest.approx(0.0)
    assert report.initial_indices[-1] == pytest.approx(255.0)
    assert report.final_delta_e.shape == (256,)
    assert report.gamut_error.shape == (256, 3)


def test_large_sigma_warns():
    with pytest.warns(UserWarning, match="sigma"):
        equalise_colour_map("LAB", grey_path(np.linspace(0, 100, 100)), sigma=5)


def test_rgb_values_out_of_range():
    rgb = np.column_stack([np.linspace(0, 2, 10)] * 3)
    with pytest.raises(ValueError, match="RGB"):
        equalise_colour_map("RGB", rgb)


def test_lab_values_too_small():
    with pytest.raises(ValueError, match="LAB"):
        equalise_colour_map("LAB", np.column_stack([np.linspace(0, 1, 10)] * 3))


@pytest.mark.parametrize("kwargs", [
    {"colour_space": "HSV"},
    {"formula": "CIE94"},
    {"weights": (1, 0)},
    {"weights": (-1, 0, 0)},
])
def test_invalid_parameters(kwargs):
    args = {"colour_space": "LAB", "path": UNEVEN_GREY}
    args.update(kwargs)
    with pytest.raises(ValueError):
        equalise_colour_map(**args)


def test_single_entry_map_rejected():
    with pytest.raises(ValueError):
        equalise_colour_map("LAB", [[50.0, 0.0, 0.0]])


@pytest.mark.parametrize("space, bad", [("LAB", np.nan), ("LAB", np.inf), ("RGB", np.nan)])
def test_non_finite_values_rejected(space, bad):
    ramp = np.linspace(0.0, 1.0, 50)
    path = grey_path(100.0 * ramp) if space == "LAB" else np.column_stack([ramp] * 3)
    path[10, 1] = bad
    with pytest.raises(ValueError, match="NaN or infinite"):
        equalise_colour_map(space, path)


def test_negative_sigma_rejected():
    with pytest.raises(ValueError, match="sigma"):
        equalise_colour_map("LAB", UNEVEN_GREY, sigma=-3)
