# test_main.py
import logging

import numpy as np
import pytest

from heatequation.__main__ import default_config, run_comparison
from heatequation.model.materials import COPPER, PRESET_MATERIALS
from heatequation.model.sources import PatchSource
from heatequation.model.state import SimType


@pytest.mark.parametrize("sim_type", list(SimType))
def test_default_config_uses_hotspots_and_mixed_edges(sim_type):
    sim_config = default_config(sim_type, COPPER, n=9)

    sim_config.validate()
    assert isinstance(sim_config.source, PatchSource)
    assert not sim_config.boundary_conditions.left.is_dirichlet
    assert sim_config.boundary_conditions.right.is_dirichlet


def test_run_comparison_covers_every_preset(caplog):
    with caplog.at_level(logging.INFO, logger="heatequation"):
        results = run_comparison(PRESET_MATERIALS.values(), n=13, time_steps=20)

    assert list(results) == ["Copper", "Iron", "Glass", "Polystyrene"]
    for name, snapshots in results.items():
        assert set(snapshots) == set(SimType)
        for snapshot in snapshots.values():
            assert snapshot.completed
            assert np.all(np.isfinite(snapshot.temperature))
            assert snapshot.maximum > 13.0
        assert name in caplog.text
