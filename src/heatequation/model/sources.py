from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence, Tuple
import math

import numpy as np

from heatequation.exceptions import InvalidParameterError

if TYPE_CHECKING:
    import numpy.typing as npt

    from heatequation.model.materials import Material

Interval = Tuple[float, float]

# ==========================================
# ABSTRACT CLASS FOR SOURCE TERMS
# ==========================================
class SourceTerm(ABC):
    """
    Abstract base class for heat source terms.

    A source term is a forcing rate g (temperature per second) that the
    solvers add to the right-hand side as Δt·g.
    """
    NAME: str = "Source"

    @abstractmethod
    def get_rate(
        self,
        x: npt.NDArray[np.float64],
        y: Optional[npt.NDArray[np.float64]] = None,
        *,
        length: float = 1.0,
    ) -> npt.NDArray[np.float64]:
        """
        Evaluate the forcing rate on grid coordinates.

        Args:
            x: X-coordinate(s) in metres.
            y: Y-coordinate(s) in metres, broadcastable against x
               (only for plate simulations).
            length: Domain length L, used by layouts defined relative to it.

        Returns:
            Forcing rate with the broadcast shape of x and y.
        """
        pass


class UniformSource(SourceTerm):
    """Constant forcing rate everywhere in the domain."""
    NAME = "Uniform"

    def __init__(self, rate: float = 0.0) -> None:
        if not math.isfinite(rate):
            raise InvalidParameterError(f"Source rate must be finite, got {rate}.")
        self.rate = float(rate)

    def get_rate(self, x, y=None, *, length=1.0):
        shape = np.broadcast(x, y).shape if y is not None else np.shape(x)
        return np.full(shape, self.rate, dtype=np.float64)

    def __repr__(self) -> str:
        return f"UniformSource(rate={self.rate})"


@dataclass(frozen=True)
class Patch:
    """
    Axis-aligned region where a source is active.

    Intervals are closed and given as fractions of the domain length.
    A patch without y_range covers every y (and is the only form used on bars).
    """
    x_range: Interval
    rate: float
    y_range: Optional[Interval] = None

    def contains(
        self,
        x: npt.NDArray[np.float64],
        y: Optional[npt.NDArray[np.float64]],
        length: float,
    ) -> npt.NDArray[np.bool_]:
        x0, x1 = self.x_range
        mask = (x >= x0 * length) & (x <= x1 * length)
        if y is not None and self.y_range is not None:
            y0, y1 = self.y_range
            mask = mask & (y >= y0 * length) & (y <= y1 * length)
        return mask


class PatchSource(SourceTerm):
    """
    Piecewise-constant source made of rectangular patches.

    Where patches overlap, the first listed patch wins.
    """
    NAME = "Patches"

    def __init__(self, patches: Sequence[Patch]) -> None:
        for patch in patches:
            for lo, hi in filter(None, (patch.x_range, patch.y_range)):
                if not 0.0 <= lo <= hi <= 1.0:
                    raise InvalidParameterError(
                        f"Patch interval ({lo}, {hi}) must lie within [0, 1] of the domain length."
                    )
            if not math.isfinite(patch.rate):
                raise InvalidParameterError(f"Patch rate must be finite, got {patch.rate}.")
        self.patches = tuple(patches)

    def get_rate(self, x, y=None, *, length=1.0):
        x = np.asarray(x, dtype=np.float64)
        if y is not None:
            y = np.asarray(y, dtype=np.float64)
            x, y = np.broadcast_arrays(x, y)

        rate = np.zeros(x.shape, dtype=np.float64)
        assigned = np.zeros(x.shape, dtype=bool)
        for patch in self.patches:
            mask = patch.contains(x, y, length) & ~assigned
            rate[mask] = patch.rate
            assigned |= mask
        return rate

    @classmethod
    def bar_hotspots(cls, amplitude: float, tmax: float, material: Material) -> PatchSource:
        """
        Two heaters on a bar.

        F = tmax·f² on [L/10, 2L/10] and (3/4)·tmax·f² on [5L/10, 6L/10];
        the solver rate is F/(ρc).
        """
        peak = tmax * amplitude ** 2 / material.volumetric_heat_capacity
        return cls([
            Patch(x_range=(0.1, 0.2), rate=peak),
            Patch(x_range=(0.5, 0.6), rate=0.75 * peak),
        ])

    @classmethod
    def plate_hotspots(cls, amplitude: float, tmax: float, material: Material) -> PatchSource:
        """
        Four square heaters placed symmetrically on a plate.

        F = tmax·f² on [L/6, 2L/6] and [4L/6, 5L/6] in each axis;
        the solver rate is F/(ρc).
        """
        peak = tmax * amplitude ** 2 / material.volumetric_heat_capacity
        near, far = (1.0 / 6.0, 2.0 / 6.0), (4.0 / 6.0, 5.0 / 6.0)
        return cls([
            Patch(x_range=xr, y_range=yr, rate=peak)
            for yr in (near, far)
            for xr in (near, far)
        ])

    def __repr__(self) -> str:
        return f"PatchSource({len(self.patches)} patches)"


def as_source(source: float | SourceTerm) -> SourceTerm:
    """Wrap a scalar forcing value into a UniformSource."""
    if isinstance(source, SourceTerm):
        return source
    if isinstance(source, bool) or not isinstance(source, (int, float, np.floating, np.integer)):
        raise InvalidParameterError(f"Source must be a number or a SourceTerm, got {source!r}.")
    return UniformSource(float(source))
