"""
Finite-difference heat-equation solvers for a bar (1-D) and a square plate (2-D).
"""
from importlib.metadata import version, PackageNotFoundError

from heatequation.exceptions import HeatEquationError, InvalidParameterError, NumericalError
from heatequation.model.bc import BoundaryCondition, BoundaryConditions1D, BoundaryConditions2D
from heatequation.model.materials import Material, get_material
from heatequation.model.state import FieldSnapshot, SimType, SimulationConfig, SolverStatus
from heatequation.solvers.base import HeatSolver, run_simulation
from heatequation.solvers.factory import create_solver
from heatequation.solvers.heat_1d import HeatEquationSolver1D
from heatequation.solvers.heat_2d import HeatEquationSolver2D
from heatequation.solvers.tridiagonal import solve_tridiagonal

try:
    __version__ = version("heatequation")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "BoundaryCondition",
    "BoundaryConditions1D",
    "BoundaryConditions2D",
    "FieldSnapshot",
    "HeatEquationError",
    "HeatEquationSolver1D",
    "HeatEquationSolver2D",
    "HeatSolver",
    "InvalidParameterError",
    "Material",
    "NumericalError",
    "SimType",
    "SimulationConfig",
    "SolverStatus",
    "create_solver",
    "get_material",
    "run_simulation",
    "solve_tridiagonal",
]
