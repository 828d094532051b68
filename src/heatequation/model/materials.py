"""
Material Library
================
Defines the immutable physical parameters of a conducting material and the
library of predefined materials offered by the simulator.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import StrEnum
from typing import Dict, Any
import math
import numbers

from heatequation.exceptions import InvalidParameterError


class MaterialProperty(StrEnum):
    CONDUCTIVITY = "conductivity"
    DENSITY = "density"
    SPECIFIC_HEAT = "specific_heat"


@dataclass(frozen=True, kw_only=True)
class Material:
    """
    Constant thermal properties of a homogeneous material.

    Attributes:
        conductivity: Thermal conductivity k in W/(m·K).
        density: Density ρ in kg/m³.
        specific_heat: Specific heat capacity c in J/(kg·K).
        name: Display name.
    """
    conductivity: float
    density: float
    specific_heat: float
    name: str = ""

    def __post_init__(self) -> None:
        for prop in MaterialProperty:
            value = getattr(self, prop.value)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidParameterError(
                    f"Material property '{prop}' must be a number, got {value!r}."
                )
            if not math.isfinite(value) or value <= 0:
                raise InvalidParameterError(
                    f"Material property '{prop}' must be positive and finite, got {value}."
                )

    @property
    def diffusivity(self) -> float:
        """Thermal diffusivity α = k / (ρ·c) in m²/s."""
        return self.conductivity / (self.density * self.specific_heat)

    @property
    def volumetric_heat_capacity(self) -> float:
        """Volumetric heat capacity ρ·c in J/(m³·K)."""
        return self.density * self.specific_heat

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Material:
        try:
            return Material(
                name=data.get("name", ""),
                conductivity=data[MaterialProperty.CONDUCTIVITY],
                density=data[MaterialProperty.DENSITY],
                specific_heat=data[MaterialProperty.SPECIFIC_HEAT],
            )
        except KeyError as e:
            raise InvalidParameterError(f"Missing material property {e}.") from e


COPPER = Material(name="Copper", conductivity=389.0, density=8940.0, specific_heat=380.0)
IRON = Material(name="Iron", conductivity=80.2, density=7874.0, specific_heat=440.0)
GLASS = Material(name="Glass", conductivity=1.2, density=2530.0, specific_heat=840.0)
POLYSTYRENE = Material(name="Polystyrene", conductivity=0.1, density=1040.0, specific_heat=1200.0)

PRESET_MATERIALS: Dict[str, Material] = {
    m.name.lower(): m for m in (COPPER, IRON, GLASS, POLYSTYRENE)
}


def get_material(name: str) -> Material:
    """Look up a predefined material by (case-insensitive) name."""
    try:
        return PRESET_MATERIALS[name.strip().lower()]
    except KeyError:
        raise InvalidParameterError(
            f"Unknown material '{name}'. Available: {[m.name for m in PRESET_MATERIALS.values()]}"
        ) from None
