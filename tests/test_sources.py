# test_sources.py
import numpy as np
import pytest
from numpy.testing import assert_allclose

from heatequation.exceptions import InvalidParameterError
from heatequation.model.materials import COPPER
from heatequation.model.sources import Patch, PatchSource, UniformSource, as_source


def test_uniform_source_fills_grid():
    x = np.linspace(0.0, 1.0, 4)
    X, Y = np.meshgrid(x, x)

    assert_allclose(UniformSource(2.0).get_rate(x), 2.0)
    assert UniformSource(2.0).get_rate(X, Y).shape == (4, 4)


def test_as_source_wraps_scalars():
    source = as_source(3)

    assert isinstance(source, UniformSource)
    assert source.rate == 3.0
    assert as_source(source) is source


@pytest.mark.parametrize("value", ["3", None, True, [1.0]])
def test_as_source_rejects_non_numbers(value):
    with pytest.raises(InvalidParameterError):
        as_source(value)


def test_patch_source_on_bar():
    source = PatchSource([Patch(x_range=(0.2, 0.4), rate=5.0)])
    x = np.linspace(0.0, 2.0, 11)

    # Fractions scale with the length: active on [0.4, 0.8]
    rate = source.get_rate(x, length=2.0)

    assert_allclose(rate, [0, 0, 5, 5, 5, 0, 0, 0, 0, 0, 0])


def test_first_patch_wins_on_overlap():
    source = PatchSource([
        Patch(x_range=(0.0, 0.5), rate=1.0),
        Patch(x_range=(0.4, 1.0), rate=2.0),
    ])

    rate = source.get_rate(np.array([0.45, 0.7]))

    assert_allclose(rate, [1.0, 2.0])


def test_patch_outside_domain_raises():
    with pytest.raises(InvalidParameterError):
        PatchSource([Patch(x_range=(0.5, 1.5), rate=1.0)])


def test_bar_hotspots():
    source = PatchSource.bar_hotspots(80.0, 16.0, COPPER)
    peak = 16.0 * 80.0 ** 2 / (8940.0 * 380.0)

    rate = source.get_rate(np.array([0.05, 0.15, 0.3, 0.55, 0.9]))

    assert_allclose(rate, [0.0, peak, 0.0, 0.75 * peak, 0.0])


def test_plate_hotspots_cover_four_squares():
    source = PatchSource.plate_hotspots(80.0, 16.0, COPPER)
    x = np.linspace(0.0, 1.0, 13)
    X, Y = np.meshgrid(x, x)

    rate = source.get_rate(X, Y)

    assert rate.shape == (13, 13)
    assert_allclose(rate, rate.T)
    assert rate[3, 3] > 0.0 and rate[3, 9] > 0.0 and rate[9, 3] > 0.0 and rate[9, 9] > 0.0
    assert rate[6, 6] == 0.0
    assert rate[0, 0] == 0.0
