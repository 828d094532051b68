# test_state.py
import numpy as np
import pytest
from matplotlib.figure import Figure

from heatequation import config
from heatequation.exceptions import InvalidParameterError
from heatequation.model.bc import BoundaryCondition, BoundaryConditions1D, BoundaryConditions2D
from heatequation.model.materials import COPPER, get_material
from heatequation.model.sources import PatchSource
from heatequation.model.state import FieldSnapshot, SimType, SimulationConfig, SolverStatus


def test_grid_points_default_per_variant():
    assert SimulationConfig(sim_type=SimType.ONE_D).grid_points == config.DEFAULT_POINTS_1D
    assert SimulationConfig(sim_type=SimType.TWO_D).grid_points == config.DEFAULT_POINTS_2D
    assert SimulationConfig(sim_type=SimType.TWO_D, n=7).grid_points == 7


def test_default_config_is_valid():
    SimulationConfig().validate()
    SimulationConfig(sim_type=SimType.TWO_D).validate()


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(sim_type="3d"),
        dict(length=0.0),
        dict(tmax=-1.0),
        dict(initial_temperature=float("inf")),
        dict(n=1),
        dict(time_steps=0),
        dict(material="copper"),
        dict(boundary_conditions=BoundaryConditions2D()),
    ],
)
def test_validate_rejects_bad_configs(kwargs):
    with pytest.raises(InvalidParameterError):
        SimulationConfig(**kwargs).validate()


def test_config_dict_round_trip():
    sim_config = SimulationConfig(
        sim_type=SimType.TWO_D,
        material=get_material("iron"),
        tmax=8.0,
        source=PatchSource.plate_hotspots(80.0, 8.0, get_material("iron")),
        n=31,
        boundary_conditions=BoundaryConditions2D.mixed_layout(),
    )

    restored = SimulationConfig.from_dict(sim_config.to_dict())

    assert restored.sim_type == SimType.TWO_D
    assert restored.material == sim_config.material
    assert restored.boundary_conditions == sim_config.boundary_conditions
    assert restored.n == 31
    assert restored.source.patches == sim_config.source.patches


def test_config_dict_with_scalar_source():
    sim_config = SimulationConfig(
        source=2.5,
        boundary_conditions=BoundaryConditions1D(right=BoundaryCondition.neumann()),
    )

    data = sim_config.to_dict()
    restored = SimulationConfig.from_dict(data)

    assert data["sim_type"] == "1d"
    assert data["source"] == 2.5
    assert restored.source == 2.5
    assert restored.material == COPPER
    assert restored.boundary_conditions == sim_config.boundary_conditions


def test_from_dict_unknown_type_raises():
    with pytest.raises(InvalidParameterError):
        SimulationConfig.from_dict({"sim_type": "3d"})


def make_snapshot(values, status=SolverStatus.STEPPING):
    return FieldSnapshot(temperature=values, time=1.5, step=3, status=status, length=2.0)


def test_snapshot_copies_and_freezes_data():
    values = np.array([1.0, 2.0, 3.0])
    snapshot = make_snapshot(values)
    values[0] = 100.0

    assert snapshot.temperature[0] == 1.0
    with pytest.raises(ValueError):
        snapshot.temperature[0] = 5.0


def test_snapshot_statistics():
    snapshot = make_snapshot(np.array([[1.0, 2.0], [3.0, 6.0]]), status=SolverStatus.COMPLETED)

    assert snapshot.completed
    assert snapshot.ndim == 2
    assert snapshot.minimum == 1.0
    assert snapshot.maximum == 6.0
    assert snapshot.mean == 3.0
    np.testing.assert_allclose(snapshot.coordinates(), [0.0, 2.0])


def test_color_range_adds_margin():
    low, high = make_snapshot(np.array([0.0, 100.0])).color_range()

    assert low == pytest.approx(-5.0)
    assert high == pytest.approx(105.0)


def test_color_range_widens_flat_fields():
    low, high = make_snapshot(np.full(5, 13.0)).color_range()

    assert low == pytest.approx(12.5)
    assert high == pytest.approx(13.5)


@pytest.mark.parametrize("values", [np.linspace(0.0, 1.0, 20), np.eye(6)])
def test_plot_returns_figure(values):
    import matplotlib.pyplot as plt

    fig = make_snapshot(values).plot(show=False)

    assert isinstance(fig, Figure)
    assert fig.axes[0].get_title() == "t = 1.500 s (step 3)"
    plt.close(fig)
