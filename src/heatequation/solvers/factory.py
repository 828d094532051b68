from __future__ import annotations

import logging

from heatequation.model.state import SimType, SimulationConfig
from heatequation.solvers.base import HeatSolver
from heatequation.solvers.heat_1d import HeatEquationSolver1D
from heatequation.solvers.heat_2d import HeatEquationSolver2D

logger = logging.getLogger(__name__)


def create_solver(sim_config: SimulationConfig) -> HeatSolver:
    """
    Construct the solver variant selected by sim_config.sim_type.

    Raises:
        InvalidParameterError: The configuration is invalid.
    """
    sim_config.validate()
    sim_type = SimType(sim_config.sim_type)

    kwargs = dict(
        material=sim_config.material,
        length=sim_config.length,
        tmax=sim_config.tmax,
        initial_temperature=sim_config.initial_temperature,
        source=sim_config.source,
        n=sim_config.grid_points,
        time_steps=sim_config.time_steps,
        boundary_conditions=sim_config.boundary_conditions,
    )

    logger.debug(f"Creating {sim_type} solver with n={sim_config.grid_points}")
    if sim_type == SimType.ONE_D:
        return HeatEquationSolver1D(**kwargs)
    return HeatEquationSolver2D(**kwargs)
