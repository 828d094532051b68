"""
Simulation State (Data Model)
=============================
This module defines the data structures exchanged between the solvers and
their callers.

Why is this file needed?
------------------------
1. Configuration: SimulationConfig holds every parameter of one run in one
   place, so the factory can construct either solver variant from it.
2. Decoupling: Readers (plots, heatmaps, reports) consume FieldSnapshot
   copies and never touch the array a solver is updating.

Classes:
    SimType: Which solver variant to construct.
    SolverStatus: Stepping state machine of a solver.
    SimulationConfig: Parameters of one run.
    FieldSnapshot: Immutable view of a solver at a step boundary.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Dict, Optional, Tuple, Union, TYPE_CHECKING
import math

import numpy as np
import matplotlib.pyplot as plt

from heatequation import config
from heatequation.exceptions import InvalidParameterError
from heatequation.model.bc import BoundaryConditions1D, BoundaryConditions2D
from heatequation.model.materials import Material, COPPER
from heatequation.model.sources import SourceTerm, UniformSource, PatchSource, Patch

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.figure import Figure


class SimType(StrEnum):
    ONE_D = "1d"
    TWO_D = "2d"


class SolverStatus(StrEnum):
    INITIALIZED = "initialized"
    STEPPING = "stepping"
    COMPLETED = "completed"


BoundaryConditions = Union[BoundaryConditions1D, BoundaryConditions2D]


@dataclass
class SimulationConfig:
    """
    Parameters of one simulation run.

    n=None selects the default grid size of the chosen variant.
    """
    sim_type: SimType = SimType.ONE_D
    material: Material = COPPER
    length: float = config.DEFAULT_LENGTH
    tmax: float = config.DEFAULT_TMAX
    initial_temperature: float = config.DEFAULT_INITIAL_TEMPERATURE
    source: Union[float, SourceTerm] = 0.0
    n: Optional[int] = None
    time_steps: int = config.DEFAULT_TIME_STEPS
    boundary_conditions: Optional[BoundaryConditions] = None

    @property
    def grid_points(self) -> int:
        if self.n is not None:
            return self.n
        return config.DEFAULT_POINTS_1D if self.sim_type == SimType.ONE_D else config.DEFAULT_POINTS_2D

    def validate(self) -> None:
        """Raise InvalidParameterError if the configuration cannot build a solver."""
        try:
            SimType(self.sim_type)
        except ValueError as e:
            raise InvalidParameterError(f"Unknown simulation type: {self.sim_type!r}") from e
        if not isinstance(self.material, Material):
            raise InvalidParameterError(f"Expected a Material, got {type(self.material).__name__}.")
        check_positive("length", self.length)
        check_positive("tmax", self.tmax)
        check_finite("initial_temperature", self.initial_temperature)
        check_grid_points(self.grid_points)
        check_time_steps(self.time_steps)

        expected = BoundaryConditions1D if self.sim_type == SimType.ONE_D else BoundaryConditions2D
        if self.boundary_conditions is not None and not isinstance(self.boundary_conditions, expected):
            raise InvalidParameterError(
                f"{self.sim_type} simulation needs {expected.__name__}, "
                f"got {type(self.boundary_conditions).__name__}."
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sim_type": SimType(self.sim_type).value,
            "material": self.material.to_dict(),
            "length": self.length,
            "tmax": self.tmax,
            "initial_temperature": self.initial_temperature,
            "source": _source_to_dict(self.source),
            "n": self.n,
            "time_steps": self.time_steps,
            "boundary_conditions": (
                self.boundary_conditions.to_dict() if self.boundary_conditions is not None else None
            ),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> SimulationConfig:
        try:
            sim_type = SimType(data.get("sim_type", SimType.ONE_D))
        except ValueError as e:
            raise InvalidParameterError(str(e)) from e

        bc_data = data.get("boundary_conditions")
        bc: Optional[BoundaryConditions] = None
        if bc_data is not None:
            bc_cls = BoundaryConditions1D if sim_type == SimType.ONE_D else BoundaryConditions2D
            bc = bc_cls.from_dict(bc_data)

        return SimulationConfig(
            sim_type=sim_type,
            material=Material.from_dict(data["material"]) if "material" in data else COPPER,
            length=data.get("length", config.DEFAULT_LENGTH),
            tmax=data.get("tmax", config.DEFAULT_TMAX),
            initial_temperature=data.get("initial_temperature", config.DEFAULT_INITIAL_TEMPERATURE),
            source=_source_from_dict(data.get("source", 0.0)),
            n=data.get("n"),
            time_steps=data.get("time_steps", config.DEFAULT_TIME_STEPS),
            boundary_conditions=bc,
        )


def _source_to_dict(source: Union[float, SourceTerm]) -> Union[float, Dict[str, Any]]:
    if isinstance(source, UniformSource):
        return source.rate
    if isinstance(source, PatchSource):
        return {
            "patches": [
                {"x_range": list(p.x_range), "y_range": list(p.y_range) if p.y_range else None, "rate": p.rate}
                for p in source.patches
            ]
        }
    if isinstance(source, SourceTerm):
        raise InvalidParameterError(f"Cannot serialize source {source!r}.")
    return float(source)


def _source_from_dict(data: Union[float, Dict[str, Any]]) -> Union[float, SourceTerm]:
    if not isinstance(data, dict):
        return float(data)
    return PatchSource([
        Patch(
            x_range=tuple(p["x_range"]),
            y_range=tuple(p["y_range"]) if p.get("y_range") else None,
            rate=p["rate"],
        )
        for p in data.get("patches", [])
    ])


# ==========================================
# PARAMETER CHECKS
# ==========================================

def check_finite(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.floating, np.integer)):
        raise InvalidParameterError(f"'{name}' must be a number, got {value!r}.")
    if not math.isfinite(value):
        raise InvalidParameterError(f"'{name}' must be finite, got {value}.")
    return float(value)


def check_positive(name: str, value: float) -> float:
    value = check_finite(name, value)
    if value <= 0:
        raise InvalidParameterError(f"'{name}' must be positive, got {value}.")
    return value


def check_grid_points(n: int) -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidParameterError(f"Number of grid points must be an integer, got {n!r}.")
    if n < config.MIN_GRID_POINTS:
        raise InvalidParameterError(
            f"At least {config.MIN_GRID_POINTS} grid points are required, got {n}."
        )
    return int(n)


def check_time_steps(time_steps: int) -> int:
    if isinstance(time_steps, bool) or not isinstance(time_steps, (int, np.integer)):
        raise InvalidParameterError(f"Number of time steps must be an integer, got {time_steps!r}.")
    if time_steps < 1:
        raise InvalidParameterError(f"Number of time steps must be at least 1, got {time_steps}.")
    return int(time_steps)


# ==========================================
# SNAPSHOT
# ==========================================

@dataclass(frozen=True, eq=False)
class FieldSnapshot:
    """
    Copy of a solver's field taken between two steps.

    Attributes:
        temperature: Field values, shape (n,) for a bar or (n, n) indexed
                     [j, i] = (y_j, x_i) for a plate. Read-only.
        time: Simulated time in seconds.
        step: Number of steps taken.
        status: Solver status at the time of the snapshot.
        length: Domain length L in metres.
    """
    temperature: npt.NDArray[np.float64]
    time: float
    step: int
    status: SolverStatus
    length: float

    def __post_init__(self) -> None:
        data = np.array(self.temperature, dtype=np.float64, copy=True)
        data.flags.writeable = False
        object.__setattr__(self, "temperature", data)

    @property
    def completed(self) -> bool:
        return self.status == SolverStatus.COMPLETED

    @property
    def ndim(self) -> int:
        return self.temperature.ndim

    @property
    def minimum(self) -> float:
        return float(self.temperature.min())

    @property
    def maximum(self) -> float:
        return float(self.temperature.max())

    @property
    def mean(self) -> float:
        return float(self.temperature.mean())

    def coordinates(self) -> npt.NDArray[np.float64]:
        """Node positions along one axis (identical for x and y on a plate)."""
        return np.linspace(0.0, self.length, self.temperature.shape[-1])

    def color_range(
        self,
        margin: float = config.COLOR_RANGE_MARGIN,
        min_span: float = config.COLOR_RANGE_MIN_SPAN,
    ) -> Tuple[float, float]:
        """
        Colour-bar limits for a heatmap of this field.

        The range is the min/max of the field widened by `margin` of its span
        on both sides; if the result is narrower than `min_span`, it is
        widened by min_span/2 on both sides.
        """
        t_min, t_max = self.minimum, self.maximum
        pad = (t_max - t_min) * margin
        low, high = t_min - pad, t_max + pad
        if high - low < min_span:
            low -= 0.5 * min_span
            high += 0.5 * min_span
        return low, high

    def plot(self, show: bool = True) -> Figure:
        """
        Plot the field: a temperature profile for a bar, a heatmap for a plate.
        """
        plt.rcParams["figure.constrained_layout.use"] = True
        fig = plt.figure(figsize=(7, 5))
        ax = fig.add_subplot()
        x = self.coordinates()
        low, high = self.color_range()

        if self.ndim == 1:
            ax.plot(x, self.temperature, 'r', lw=2)
            ax.set_xlim(0.0, self.length)
            ax.set_ylim(low, high)
            ax.set_xlabel("x (m)")
            ax.set_ylabel("Temperature")
            ax.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        else:
            image = ax.imshow(
                self.temperature,
                origin="lower",
                extent=(0.0, self.length, 0.0, self.length),
                cmap="inferno",
                vmin=low,
                vmax=high,
            )
            fig.colorbar(image, ax=ax, label="Temperature")
            ax.set_xlabel("x (m)")
            ax.set_ylabel("y (m)")

        ax.set_title(f"t = {self.time:.3f} s (step {self.step})")
        if show:
            plt.show()
        return fig
