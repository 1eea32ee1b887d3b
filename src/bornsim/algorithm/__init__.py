"""
Algorithms: modified Born iteration engine + convergence monitor.
"""

from .convergence import ConvergenceMonitor, energy
from .iteration import IterationEngine, RunState

__all__ = [
    "ConvergenceMonitor",
    "IterationEngine",
    "RunState",
    "energy",
]
