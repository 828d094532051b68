"""
Boundary Conditions Data Model
==============================
Defines the per-edge boundary policies of the 1-D bar and the 2-D plate.

A Dirichlet edge is held at a fixed temperature (the initial temperature u0
unless a value is given). A Neumann edge is insulated (zero normal flux).
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Dict, Any, Optional, Tuple
import math
import numbers

from heatequation.exceptions import InvalidParameterError


class BoundaryKind(StrEnum):
    DIRICHLET = "dirichlet"
    NEUMANN = "neumann"


@dataclass(frozen=True)
class BoundaryCondition:
    kind: BoundaryKind = BoundaryKind.DIRICHLET
    value: Optional[float] = None  # None -> initial temperature

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "kind", BoundaryKind(self.kind))
        except ValueError as e:
            raise InvalidParameterError(
                f"Unknown boundary kind {self.kind!r}. Available: {[k.value for k in BoundaryKind]}"
            ) from e

        if self.value is None:
            return
        if isinstance(self.value, bool) or not isinstance(self.value, numbers.Real):
            raise InvalidParameterError(f"Boundary value must be a number, got {self.value!r}.")
        if not math.isfinite(self.value):
            raise InvalidParameterError(f"Boundary value must be finite, got {self.value}.")
        object.__setattr__(self, "value", float(self.value))

    @staticmethod
    def dirichlet(value: Optional[float] = None) -> BoundaryCondition:
        return BoundaryCondition(kind=BoundaryKind.DIRICHLET, value=value)

    @staticmethod
    def neumann() -> BoundaryCondition:
        return BoundaryCondition(kind=BoundaryKind.NEUMANN)

    @property
    def is_dirichlet(self) -> bool:
        return self.kind == BoundaryKind.DIRICHLET

    def resolved(self, default_value: float) -> BoundaryCondition:
        """Return a copy whose Dirichlet value is filled in with default_value."""
        if self.is_dirichlet and self.value is None:
            return replace(self, value=float(default_value))
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BoundaryCondition:
        return BoundaryCondition(kind=data.get("kind", BoundaryKind.DIRICHLET), value=data.get("value"))


@dataclass(frozen=True)
class BoundaryConditions1D:
    """Boundary policy of a bar: left is x=0, right is x=L."""
    left: BoundaryCondition = field(default_factory=BoundaryCondition)
    right: BoundaryCondition = field(default_factory=BoundaryCondition)

    @staticmethod
    def mixed_layout() -> BoundaryConditions1D:
        """Insulated at x=0, held at u0 at x=L."""
        return BoundaryConditions1D(left=BoundaryCondition.neumann(), right=BoundaryCondition.dirichlet())

    def resolved(self, default_value: float) -> BoundaryConditions1D:
        return BoundaryConditions1D(
            left=self.left.resolved(default_value),
            right=self.right.resolved(default_value),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"left": self.left.to_dict(), "right": self.right.to_dict()}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BoundaryConditions1D:
        return BoundaryConditions1D(
            left=BoundaryCondition.from_dict(data.get("left", {})),
            right=BoundaryCondition.from_dict(data.get("right", {})),
        )


@dataclass(frozen=True)
class BoundaryConditions2D:
    """Boundary policy of a plate: left/right are x=0/x=L, bottom/top are y=0/y=L."""
    left: BoundaryCondition = field(default_factory=BoundaryCondition)
    right: BoundaryCondition = field(default_factory=BoundaryCondition)
    bottom: BoundaryCondition = field(default_factory=BoundaryCondition)
    top: BoundaryCondition = field(default_factory=BoundaryCondition)

    @staticmethod
    def mixed_layout() -> BoundaryConditions2D:
        """Insulated at x=0 and y=0, held at u0 at x=L and y=L."""
        return BoundaryConditions2D(
            left=BoundaryCondition.neumann(),
            right=BoundaryCondition.dirichlet(),
            bottom=BoundaryCondition.neumann(),
            top=BoundaryCondition.dirichlet(),
        )

    @property
    def x_edges(self) -> Tuple[BoundaryCondition, BoundaryCondition]:
        return self.left, self.right

    @property
    def y_edges(self) -> Tuple[BoundaryCondition, BoundaryCondition]:
        return self.bottom, self.top

    def resolved(self, default_value: float) -> BoundaryConditions2D:
        return BoundaryConditions2D(
            left=self.left.resolved(default_value),
            right=self.right.resolved(default_value),
            bottom=self.bottom.resolved(default_value),
            top=self.top.resolved(default_value),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
            "bottom": self.bottom.to_dict(),
            "top": self.top.to_dict(),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BoundaryConditions2D:
        return BoundaryConditions2D(
            left=BoundaryCondition.from_dict(data.get("left", {})),
            right=BoundaryCondition.from_dict(data.get("right", {})),
            bottom=BoundaryCondition.from_dict(data.get("bottom", {})),
            top=BoundaryCondition.from_dict(data.get("top", {})),
        )
