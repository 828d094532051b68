"""
Solver Stepping Contract
========================
Pieces shared by the 1-D and 2-D solvers without a common base class.

Classes:
    HeatSolver: Protocol every solver variant satisfies.
    TimeState: Clock and state machine (INITIALIZED -> STEPPING -> COMPLETED).

Functions:
    implicit_diffusion_coefficients: Diagonals of (I - r·δ²) on one grid line.
    second_difference: Explicit δ² with the same boundary treatment.
    run_simulation: Step a solver to completion while reporting progress.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol, runtime_checkable
import logging

import numpy as np

from heatequation.model.bc import BoundaryCondition
from heatequation.model.state import FieldSnapshot, SolverStatus, check_positive, check_time_steps

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@runtime_checkable
class HeatSolver(Protocol):
    """Capabilities shared by every solver variant."""

    @property
    def time(self) -> float: ...

    @property
    def status(self) -> SolverStatus: ...

    @property
    def progress(self) -> int: ...

    def step(self) -> bool: ...

    def is_completed(self) -> bool: ...

    def reset(self) -> None: ...

    def snapshot(self) -> FieldSnapshot: ...


@dataclass
class TimeState:
    """
    Simulated clock of a solver.

    Time is derived from the step counter (t = step_count·Δt) so that
    accumulated round-off can never add an extra step; it reads exactly
    tmax once the run is completed.
    """
    tmax: float
    time_steps: int
    step_count: int = 0

    def __post_init__(self) -> None:
        self.tmax = check_positive("tmax", self.tmax)
        self.time_steps = check_time_steps(self.time_steps)

    @property
    def dt(self) -> float:
        return self.tmax / self.time_steps

    @property
    def completed(self) -> bool:
        return self.step_count >= self.time_steps

    @property
    def time(self) -> float:
        if self.completed:
            return self.tmax
        return self.step_count * self.dt

    @property
    def status(self) -> SolverStatus:
        if self.completed:
            return SolverStatus.COMPLETED
        if self.step_count == 0:
            return SolverStatus.INITIALIZED
        return SolverStatus.STEPPING

    @property
    def progress(self) -> int:
        """Completed share of the run in percent."""
        return int(100 * self.step_count / self.time_steps)

    def advance(self) -> None:
        self.step_count += 1

    def reset(self) -> None:
        self.step_count = 0


def implicit_diffusion_coefficients(
    n: int,
    r: float,
    lower: BoundaryCondition,
    upper: BoundaryCondition,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Diagonals of the implicit operator (I - r·δ²) on a line of n nodes.

    Interior rows:  -r·u[i-1] + (1 + 2r)·u[i] - r·u[i+1]
    Dirichlet row:  u[i] (the right-hand side carries the fixed value)
    Neumann row:    mirror ghost node u[-1] = u[1], i.e. (1 + 2r)·u[0] - 2r·u[1]

    Args:
        n: Number of nodes on the line, boundaries included.
        r: Mesh ratio α·Δt/Δx² (already scaled for half steps).
        lower: Boundary condition at node 0.
        upper: Boundary condition at node n-1.

    Returns:
        (a, b, c): sub-diagonal (n-1), diagonal (n), super-diagonal (n-1).
    """
    a = np.full(n - 1, -r, dtype=np.float64)
    b = np.full(n, 1.0 + 2.0 * r, dtype=np.float64)
    c = np.full(n - 1, -r, dtype=np.float64)

    if lower.is_dirichlet:
        b[0] = 1.0
        c[0] = 0.0
    else:
        c[0] = -2.0 * r

    if upper.is_dirichlet:
        b[-1] = 1.0
        a[-1] = 0.0
    else:
        a[-1] = -2.0 * r

    return a, b, c


def second_difference(
    v: npt.NDArray[np.float64],
    lower: BoundaryCondition,
    upper: BoundaryCondition,
) -> npt.NDArray[np.float64]:
    """
    Undivided second difference δ²v along axis 0.

    Neumann edges use the mirror ghost node; Dirichlet edges get 0 since
    their values never change. A uniform v gives exactly 0 everywhere.
    """
    out = np.zeros_like(v)
    out[1:-1] = v[:-2] - 2.0 * v[1:-1] + v[2:]
    if not lower.is_dirichlet:
        out[0] = 2.0 * (v[1] - v[0])
    if not upper.is_dirichlet:
        out[-1] = 2.0 * (v[-2] - v[-1])
    return out


def run_simulation(
    solver: HeatSolver,
    max_steps: Optional[int] = None,
    callback: Optional[Callable[[int], None]] = None,
) -> FieldSnapshot:
    """
    Step a solver until it completes or max_steps steps have been taken.

    Args:
        solver: Any solver variant.
        max_steps: Optional cap on the number of steps taken by this call.
        callback: Called with the progress in percent after every step.

    Returns:
        Snapshot of the field after the last step.
    """
    taken = 0
    while not solver.is_completed():
        if max_steps is not None and taken >= max_steps:
            break
        solver.step()
        taken += 1

        logger.debug(f"Progress: {solver.progress} % - Time: {solver.time:.4f} s - Step: {taken}")
        if callback is not None:
            callback(solver.progress)

    if solver.is_completed():
        logger.info(f"Simulation completed at t = {solver.time:.4f} s after {taken} step(s) in this run.")
    return solver.snapshot()
