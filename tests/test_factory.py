# test_factory.py
import logging

import pytest

from heatequation.exceptions import InvalidParameterError
from heatequation.model.materials import Material
from heatequation.model.state import SimType, SimulationConfig, SolverStatus
from heatequation.solvers.base import TimeState, run_simulation
from heatequation.solvers.factory import create_solver
from heatequation.solvers.heat_1d import HeatEquationSolver1D
from heatequation.solvers.heat_2d import HeatEquationSolver2D

UNIT = Material(name="Unit", conductivity=1.0, density=1.0, specific_heat=1.0)


@pytest.mark.parametrize(
    "sim_type, cls, shape",
    [
        (SimType.ONE_D, HeatEquationSolver1D, (9,)),
        (SimType.TWO_D, HeatEquationSolver2D, (9, 9)),
    ],
)
def test_create_solver_selects_variant(sim_type, cls, shape):
    solver = create_solver(SimulationConfig(sim_type=sim_type, material=UNIT, n=9, time_steps=4))

    assert isinstance(solver, cls)
    assert solver.snapshot().temperature.shape == shape


def test_create_solver_accepts_string_type():
    solver = create_solver(SimulationConfig(sim_type="2d", material=UNIT, n=5, time_steps=2))

    assert isinstance(solver, HeatEquationSolver2D)


def test_create_solver_validates_config():
    with pytest.raises(InvalidParameterError):
        create_solver(SimulationConfig(material=UNIT, n=2))


@pytest.mark.parametrize("sim_type", list(SimType))
def test_run_simulation_runs_to_completion(sim_type, caplog):
    solver = create_solver(SimulationConfig(sim_type=sim_type, material=UNIT, tmax=0.1, source=1.0, n=7, time_steps=10))
    progress = []

    with caplog.at_level(logging.INFO, logger="heatequation"):
        snapshot = run_simulation(solver, callback=progress.append)

    assert snapshot.completed
    assert snapshot.time == 0.1
    assert snapshot.step == 10
    assert progress == list(range(10, 101, 10))
    assert "Simulation completed" in caplog.text


def test_run_simulation_respects_max_steps():
    solver = create_solver(SimulationConfig(material=UNIT, n=7, time_steps=10))

    snapshot = run_simulation(solver, max_steps=4)

    assert snapshot.step == 4
    assert snapshot.status == SolverStatus.STEPPING

    snapshot = run_simulation(solver)
    assert snapshot.step == 10


def test_time_state_clock():
    clock = TimeState(tmax=1.0, time_steps=3)
    assert clock.status == SolverStatus.INITIALIZED

    clock.advance()
    assert clock.time == pytest.approx(1.0 / 3.0)
    assert clock.progress == 33

    clock.advance()
    clock.advance()
    assert clock.completed
    assert clock.time == 1.0

    clock.reset()
    assert clock.step_count == 0


def test_time_state_rejects_bad_values():
    with pytest.raises(InvalidParameterError):
        TimeState(tmax=1.0, time_steps=0)
    with pytest.raises(InvalidParameterError):
        TimeState(tmax=float("nan"), time_steps=5)
