from __future__ import annotations

from typing import TYPE_CHECKING, Optional
import logging

import numpy as np

from heatequation import config
from heatequation.exceptions import InvalidParameterError, NumericalError
from heatequation.model.bc import BoundaryCondition, BoundaryConditions2D
from heatequation.model.materials import Material
from heatequation.model.sources import SourceTerm, as_source
from heatequation.model.state import FieldSnapshot, SolverStatus, check_finite, check_grid_points, check_positive
from heatequation.solvers.base import TimeState, implicit_diffusion_coefficients, second_difference
from heatequation.solvers.tridiagonal import solve_tridiagonal_batch

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class HeatEquationSolver2D:
    """
    Alternating-Direction-Implicit (Peaceman-Rachford) solver on a square plate.

        u_t = α·(u_xx + u_yy) + g(x, y),   (x, y) ∈ [0, L]²

    The field is stored as u[j, i] = u(x_i, y_j). Each step is two half steps
    of Δt/2 with r = α·Δt/Δx²:

        x-sweep: (1 + r)·u*[j,i] - r/2·(u*[j,i-1] + u*[j,i+1]) = u[j,i] + r/2·δ_y²u[j,i] + Δt/2·g
        y-sweep: (1 + r)·u'[j,i] - r/2·(u'[j-1,i] + u'[j+1,i]) = u*[j,i] + r/2·δ_x²u*[j,i] + Δt/2·g

    Each half step is solved for its increment, (I - r/2·δ_line²)·Δ =
    r/2·(δ_x² + δ_y²)·u + Δt/2·g, so a field with no curvature and no source
    is left bit-for-bit unchanged.

    The lines of a sweep are independent and solved in parallel; the second
    sweep starts only after the first has finished. The scheme is
    unconditionally stable; the discrete maximum principle holds for r <= 1.
    """

    def __init__(
        self,
        material: Material,
        length: float = config.DEFAULT_LENGTH,
        tmax: float = config.DEFAULT_TMAX,
        initial_temperature: float = config.DEFAULT_INITIAL_TEMPERATURE,
        source: float | SourceTerm = 0.0,
        n: int = config.DEFAULT_POINTS_2D,
        time_steps: int = config.DEFAULT_TIME_STEPS,
        boundary_conditions: Optional[BoundaryConditions2D] = None,
        initial_field: Optional[npt.ArrayLike] = None,
    ) -> None:
        """
        Initialize the solver.

        Args:
            material: Material of the plate.
            length: Side length L of the square plate in metres.
            tmax: Simulated time horizon in seconds.
            initial_temperature: Uniform initial temperature u0; also the
                                 default value of Dirichlet edges.
            source: Forcing rate (scalar) or SourceTerm.
            n: Number of grid points per axis, boundaries included (n >= 3).
            time_steps: Number of steps of size tmax/time_steps.
            boundary_conditions: Edge policy, Dirichlet at u0 on all four edges by default.
            initial_field: Optional starting field of shape (n, n) indexed [j, i].

        Raises:
            InvalidParameterError: Any parameter is out of range.
        """
        if not isinstance(material, Material):
            raise InvalidParameterError(f"Expected a Material, got {type(material).__name__}.")
        if boundary_conditions is None:
            boundary_conditions = BoundaryConditions2D()
        elif not isinstance(boundary_conditions, BoundaryConditions2D):
            raise InvalidParameterError(
                f"Expected BoundaryConditions2D, got {type(boundary_conditions).__name__}."
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
        self.y = self.x.copy()
        self.r = self.material.diffusivity * self.dt / self.dx ** 2

        X, Y = np.meshgrid(self.x, self.y)
        self._forcing = np.asarray(self.source.get_rate(X, Y, length=self.length), dtype=np.float64)
        if self._forcing.shape != (self.n, self.n) or not np.all(np.isfinite(self._forcing)):
            raise InvalidParameterError("Source term must produce a finite (n, n) field.")
        self._forcing_t = np.ascontiguousarray(self._forcing.T)

        # Half-step operators, constant over the run
        bc = self.boundary_conditions
        self._x_coefficients = implicit_diffusion_coefficients(self.n, 0.5 * self.r, bc.left, bc.right)
        self._y_coefficients = implicit_diffusion_coefficients(self.n, 0.5 * self.r, bc.bottom, bc.top)

        self._u_initial = self._build_initial_field(initial_field)
        self._u = self._u_initial.copy()

        logger.debug(
            f"Initialized 2D solver: material={material.name or '?'}, n={self.n}x{self.n}, "
            f"dx={self.dx:.4e} m, dt={self.dt:.4e} s, r={self.r:.4e}"
        )

    def _build_initial_field(self, initial_field: Optional[npt.ArrayLike]) -> npt.NDArray[np.float64]:
        if initial_field is None:
            u = np.full((self.n, self.n), self.initial_temperature, dtype=np.float64)
        else:
            u = np.array(initial_field, dtype=np.float64, copy=True)
            if u.shape != (self.n, self.n):
                raise InvalidParameterError(
                    f"Initial field must have shape ({self.n}, {self.n}), got {u.shape}."
                )
            if not np.all(np.isfinite(u)):
                raise InvalidParameterError("Initial field must be finite.")
        self._apply_dirichlet(u)
        return u

    def _apply_dirichlet(self, u: npt.NDArray[np.float64]) -> None:
        """Impose the fixed edges; at corners the bottom/top value wins."""
        bc = self.boundary_conditions
        if bc.left.is_dirichlet:
            u[:, 0] = bc.left.value
        if bc.right.is_dirichlet:
            u[:, -1] = bc.right.value
        if bc.bottom.is_dirichlet:
            u[0, :] = bc.bottom.value
        if bc.top.is_dirichlet:
            u[-1, :] = bc.top.value

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
        """Read-only view of the current field [j, i]; valid until the next step."""
        view = self._u.view()
        view.flags.writeable = False
        return view

    def temperature_at(self, i: int, j: int) -> float:
        """Temperature at node (x_i, y_j)."""
        return float(self._u[j, i])

    def snapshot(self) -> FieldSnapshot:
        return FieldSnapshot(
            temperature=self._u,
            time=self.time,
            step=self.step_count,
            status=self.status,
            length=self.length,
        )

    # ---- Stepping ----

    def _sweep(
        self,
        v: npt.NDArray[np.float64],
        forcing: npt.NDArray[np.float64],
        coefficients: tuple[npt.NDArray[np.float64], ...],
        line_edges: tuple[BoundaryCondition, BoundaryCondition],
        cross_edges: tuple[BoundaryCondition, BoundaryCondition],
    ) -> npt.NDArray[np.float64]:
        """
        One half step, implicit along the rows of v and explicit across them.

        Args:
            v: Field oriented so that the implicit direction is axis 1.
            forcing: Source rate in the same orientation.
            coefficients: (a, b, c) of the implicit half-step operator.
            line_edges: Boundary conditions at both ends of every row.
            cross_edges: Boundary conditions of the first and last row.
        """
        lower, upper = line_edges
        first, last = cross_edges

        along = second_difference(v.T, lower, upper).T
        across = second_difference(v, first, last)
        rhs = 0.5 * self.r * (along + across) + 0.5 * self.dt * forcing
        if lower.is_dirichlet:
            rhs[:, 0] = 0.0
        if upper.is_dirichlet:
            rhs[:, -1] = 0.0

        # Rows lying on a Dirichlet edge are fixed, not solved
        start = 1 if first.is_dirichlet else 0
        stop = self.n - 1 if last.is_dirichlet else self.n

        out = v.copy()
        out[start:stop] += solve_tridiagonal_batch(*coefficients, rhs[start:stop])
        if first.is_dirichlet:
            out[0] = first.value
        if last.is_dirichlet:
            out[-1] = last.value
        return out

    def step(self) -> bool:
        """
        Advance the field by one ADI step (x-sweep then y-sweep).

        Returns:
            True if a step was applied, False if the simulation had already
            completed (field and time are then left unchanged).

        Raises:
            NumericalError: Singular pivot or non-finite result.
        """
        if self.is_completed():
            return False

        bc = self.boundary_conditions

        # Sweep 1: implicit in x for every row j, explicit in y
        u_half = self._sweep(self._u, self._forcing, self._x_coefficients, bc.x_edges, bc.y_edges)
        self._apply_dirichlet(u_half)

        # Sweep 2: implicit in y for every column i, explicit in x
        u_half_t = np.ascontiguousarray(u_half.T)
        u_new_t = self._sweep(u_half_t, self._forcing_t, self._y_coefficients, bc.y_edges, bc.x_edges)
        u_new = np.ascontiguousarray(u_new_t.T)
        self._apply_dirichlet(u_new)

        if not np.all(np.isfinite(u_new)):
            raise NumericalError(f"Non-finite temperature after step {self.step_count + 1}.")

        self._u = u_new
        self._clock.advance()
        return True

    def reset(self) -> None:
        """Return to the initial field at t = 0."""
        self._u = self._u_initial.copy()
        self._clock.reset()
