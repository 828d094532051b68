"""
Configuration & Defaults
========================
This module serves as the central registry for global constants and default
simulation parameters.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (grid sizes, step counts, pivot
   tolerances) scattered throughout the solvers.
2. Consistency: The configuration dataclass, the solvers and the command-line
   runner all read their defaults from one place.

Exports:
    DEFAULT_LENGTH (float): Bar length / plate side in metres.
    DEFAULT_TMAX (float): Simulated time horizon in seconds.
    DEFAULT_INITIAL_TEMPERATURE (float): Uniform initial temperature.
    DEFAULT_SOURCE_AMPLITUDE (float): Heat source amplitude.
    DEFAULT_POINTS_1D / DEFAULT_POINTS_2D (int): Grid points per axis.
    DEFAULT_TIME_STEPS (int): Number of time steps covering [0, tmax].
    MIN_GRID_POINTS (int): Smallest grid with at least one interior node.
    PIVOT_TOLERANCE (float): Relative threshold for a singular Thomas pivot.
"""

# Physical domain
DEFAULT_LENGTH: float = 1.0  # m
DEFAULT_TMAX: float = 16.0  # s
DEFAULT_INITIAL_TEMPERATURE: float = 13.0
DEFAULT_SOURCE_AMPLITUDE: float = 80.0

# Discretisation
DEFAULT_POINTS_1D: int = 1001
DEFAULT_POINTS_2D: int = 51
DEFAULT_TIME_STEPS: int = 1000  # 1001 time levels
MIN_GRID_POINTS: int = 3

# Linear algebra
PIVOT_TOLERANCE: float = 1e-12

# Heatmap colour range (see FieldSnapshot.color_range)
COLOR_RANGE_MARGIN: float = 0.05
COLOR_RANGE_MIN_SPAN: float = 1.0
