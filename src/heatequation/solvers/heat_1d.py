from __future__ import annotations

from typing import TYPE_CHECKING, Optional
import logging

import numpy as np

from heatequation import config
from heatequation.exceptions import InvalidParameterError, NumericalError
from heatequation.model.bc import BoundaryConditions1D
from heatequation.model.materials import Material
from heatequation.model.sources import SourceTerm, as_source
from heatequation.model.state import FieldSnapshot, SolverStatus, check_finite, check_grid_points, check_positive
from heatequation.solvers.base import TimeState, implicit_diffusion_coefficients, second_difference
from heatequation.solvers.tridiagonal import TridiagonalSystem

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class HeatEquationSolver1D:
    """
    Backward-Euler finite-difference solver for the heat equation on a bar.

        u_t = α·u_xx + g(x),   x ∈ [0, L]

    Each step solves the tridiagonal system for the increment Δu = u_new - u_old

        -r·Δu[i-1] + (1 + 2r)·Δu[i] - r·Δu[i+1] = r·δ²u_old[i] + Δt·g[i],   r = α·Δt/Δx²

    which is the backward-Euler step (I - r·δ²)·u_new = u_old + Δt·g written
    so that a field with no curvature and no source is left bit-for-bit
    unchanged. The scheme is unconditionally stable and satisfies the
    discrete maximum principle for any r.
    """

    def __init__(
        self,
        material: Material,
        length: float = config.DEFAULT_LENGTH,
        tmax: float = config.DEFAULT_TMAX,
        initial_temperature: float = config.DEFAULT_INITIAL_TEMPERATURE,
        source: float | SourceTerm = 0.0,
        n: int = config.DEFAULT_POINTS_1D,
        time_steps: int = config.DEFAULT_TIME_STEPS,
        boundary_conditions: Optional[BoundaryConditions1D] = None,
        initial_field: Optional[npt.ArrayLike] = None,
    ) -> None:
        """
        Initialize the solver.

        Args:
            material: Material of the bar.
            length: Bar length L in metres.
            tmax: Simulated time horizon in seconds.
            initial_temperature: Uniform initial temperature u0; also the
                                 default value of Dirichlet boundaries.
            source: Forcing rate (scalar) or SourceTerm.
            n: Number of grid points, boundaries included (n >= 3).
            time_steps: Number of steps of size tmax/time_steps.
            boundary_conditions: Boundary policy, Dirichlet at u0 on both ends by default.
            initial_field: Optional starting field of shape (n,), overrides u0
                           inside the bar.

        Raises:
            InvalidParameterError: Any parameter is out of range.
        """
        if not isinstance(material, Material):
            raise InvalidParameterError(f"Expected a Material, got {type(material).__name__}.")
        if boundary_conditions is None:
            boundary_conditions = BoundaryConditions1D()
        elif not isinstance(boundary_conditions, BoundaryConditions1D):
            raise InvalidParameterError(
                f"Expected BoundaryConditions1D, got {type(boundary_conditions).__name__}."
            )

        self.material = material
        self.length = check_positive("length", length)
        self.n = check_grid_points(n)
        self.initial_temperature = check_finite("initial_temperature", initial_temperature)
        self.source = as_source(source)
        self.boundary_conditions = boundary_conditions.resolved(self.initial_temperature)
        self._clock = TimeState(tmax=tmax, time_steps=time_steps)

        self.dx = self.length / (self.n - 1)
        self.x = np.linspace(0.0, self.length, self.n)
        self.r = self.material.diffusivity * self.dt / self.dx ** 2

        self._forcing = np.asarray(self.source.get_rate(self.x, length=self.length), dtype=np.float64)
        if self._forcing.shape != (self.n,) or not np.all(np.isfinite(self._forcing)):
            raise InvalidParameterError(f"Source term must produce a finite field of shape ({self.n},).")

        # The operator is constant over the run
        self._a, self._b, self._c = implicit_diffusion_coefficients(
            self.n, self.r, self.boundary_conditions.left, self.boundary_conditions.right
        )

        self._u_initial = self._build_initial_field(initial_field)
        self._u = self._u_initial.copy()

        logger.debug(
            f"Initialized 1D solver: material={material.name or '?'}, n={self.n}, "
            f"dx={self.dx:.4e} m, dt={self.dt:.4e} s, r={self.r:.4e}"
        )

    def _build_initial_field(self, initial_field: Optional[npt.ArrayLike]) -> npt.NDArray[np.float64]:
        if initial_field is None:
            u = np.full(self.n, self.initial_temperature, dtype=np.float64)
        else:
            u = np.array(initial_field, dtype=np.float64, copy=True)
            if u.shape != (self.n,):
                raise InvalidParameterError(
                    f"Initial field must have shape ({self.n},), got {u.shape}."
                )
            if not np.all(np.isfinite(u)):
                raise InvalidParameterError("Initial field must be finite.")
        self._apply_dirichlet(u)
        return u

    def _apply_dirichlet(self, u: npt.NDArray[np.float64]) -> None:
        left, right = self.boundary_conditions.left, self.boundary_conditions.right
        if left.is_dirichlet:
            u[0] = left.value
        if right.is_dirichlet:
            u[-1] = right.value

    # ---- Time state ----

    @property
    def tmax(self) -> float:
        return self._clock.tmax

    @property
    def time_steps(self) -> int:
        return self._clock.time_steps

    @property
    def dt(self) -> float:
        return self._clock.dt

    @property
    def time(self) -> float:
        return self._clock.time

    @property
    def step_count(self) -> int:
        return self._clock.step_count

    @property
    def status(self) -> SolverStatus:
        return self._clock.status

    @property
    def progress(self) -> int:
        return self._clock.progress

    def is_completed(self) -> bool:
        return self._clock.completed

    # ---- Field access ----

    @property
    def temperature(self) -> npt.NDArray[np.float64]:
        """Read-only view of the current field; valid until the next step."""
        view = self._u.view()
        view.flags.writeable = False
        return view

    def snapshot(self) -> FieldSnapshot:
        return FieldSnapshot(
            temperature=self._u,
            time=self.time,
            step=self.step_count,
            status=self.status,
            length=self.length,
        )

    # ---- Stepping ----

    def assemble_system(self) -> TridiagonalSystem:
        """
        Build the backward-Euler system for the increment of the next step.

        Right-hand side: r·δ²u_old + Δt·g on interior (and Neumann) rows,
        0 on Dirichlet rows.
        """
        left, right = self.boundary_conditions.left, self.boundary_conditions.right
        d = self.r * second_difference(self._u, left, right) + self.dt * self._forcing
        if left.is_dirichlet:
            d[0] = 0.0
        if right.is_dirichlet:
            d[-1] = 0.0
        return TridiagonalSystem(a=self._a, b=self._b, c=self._c, d=d)

    def solve_tridiagonal(self, system: TridiagonalSystem) -> npt.NDArray[np.float64]:
        """
        Solve a system assembled by assemble_system and return the new field.

        Raises:
            NumericalError: Singular pivot or non-finite solution.
        """
        u_new = self._u + system.solve()
        self._apply_dirichlet(u_new)
        if not np.all(np.isfinite(u_new)):
            raise NumericalError(f"Non-finite temperature after step {self.step_count + 1}.")
        return u_new

    def step(self) -> bool:
        """
        Advance the field by one time step.

        Returns:
            True if a step was applied, False if the simulation had already
            completed (field and time are then left unchanged).
        """
        if self.is_completed():
            return False

        u_new = self.solve_tridiagonal(self.assemble_system())

        self._u = u_new
        self._clock.advance()
        return True

    def reset(self) -> None:
        """Return to the initial field at t = 0."""
        self._u = self._u_initial.copy()
        self._clock.reset()
