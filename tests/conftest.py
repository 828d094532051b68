# conftest.py
import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from heatequation.model.materials import Material


@pytest.fixture
def unit_material():
    """Material with k = ρ = c = 1, so that α = 1."""
    return Material(name="Unit", conductivity=1.0, density=1.0, specific_heat=1.0)


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
