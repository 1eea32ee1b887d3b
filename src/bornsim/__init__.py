"""
Top-level package for the project.

We keep three sibling subpackages:
- core: grid, ROI embedding, medium adapter, solver options
- operators: array backends + Born operator (potential, Green's function)
- algorithm: iteration engine + convergence monitor

The driver (WaveSim) lives in solver.py, callbacks and persistence in diagnostics.py.
"""

from .errors import ConfigurationError, NumericalDivergenceWarning
from .core import Grid2D, SampleMedium, SolverOptions, embed, extract
from .operators import BornOperator, build_operator
from .solver import SimulationResult, Snapshot, Status, WaveSim, solve

__all__ = [
    "core",
    "operators",
    "algorithm",
    "ConfigurationError",
    "NumericalDivergenceWarning",
    "Grid2D",
    "SampleMedium",
    "SolverOptions",
    "embed",
    "extract",
    "BornOperator",
    "build_operator",
    "SimulationResult",
    "Snapshot",
    "Status",
    "WaveSim",
    "solve",
]
