"""Command-line interface."""
from __future__ import annotations

from typing import Dict, Iterable, Optional
import logging

from heatequation import config
from heatequation.logging_config import setup_logging
from heatequation.model.bc import BoundaryConditions1D, BoundaryConditions2D
from heatequation.model.materials import PRESET_MATERIALS, Material
from heatequation.model.sources import PatchSource
from heatequation.model.state import FieldSnapshot, SimType, SimulationConfig
from heatequation.solvers.base import run_simulation
from heatequation.solvers.factory import create_solver

logger = logging.getLogger("heatequation")


def default_config(sim_type: SimType, material: Material, **overrides) -> SimulationConfig:
    """The app's standard run: hotspot heaters, insulated at the origin, held at u0 at L."""
    if sim_type == SimType.ONE_D:
        source = PatchSource.bar_hotspots(config.DEFAULT_SOURCE_AMPLITUDE, config.DEFAULT_TMAX, material)
        bc = BoundaryConditions1D.mixed_layout()
    else:
        source = PatchSource.plate_hotspots(config.DEFAULT_SOURCE_AMPLITUDE, config.DEFAULT_TMAX, material)
        bc = BoundaryConditions2D.mixed_layout()
    return SimulationConfig(sim_type=sim_type, material=material, source=source, boundary_conditions=bc, **overrides)


def run_comparison(
    materials: Iterable[Material],
    n: Optional[int] = None,
    time_steps: int = config.DEFAULT_TIME_STEPS,
) -> Dict[str, Dict[SimType, FieldSnapshot]]:
    """
    Run the bar and the plate for every material and log a side-by-side summary.

    Returns:
        Final snapshots keyed by material name, then by simulation type.
    """
    results: Dict[str, Dict[SimType, FieldSnapshot]] = {}
    for material in materials:
        results[material.name] = {}
        for sim_type in SimType:
            sim_config = default_config(sim_type, material, n=n, time_steps=time_steps)
            logger.info(
                f"Running {sim_type} simulation: {material.name}, "
                f"n={sim_config.grid_points}, tmax={sim_config.tmax} s"
            )
            results[material.name][sim_type] = run_simulation(create_solver(sim_config))

    logger.info(f"{'Material':<12} {'Type':<4} {'min':>9} {'max':>9} {'mean':>9}")
    for name, snapshots in results.items():
        for sim_type, snapshot in snapshots.items():
            logger.info(
                f"{name:<12} {sim_type:<4} {snapshot.minimum:9.3f} {snapshot.maximum:9.3f} {snapshot.mean:9.3f}"
            )
    return results


def main() -> None:
    setup_logging(level=logging.INFO)
    run_comparison(PRESET_MATERIALS.values())


if __name__ == "__main__":
    main()
