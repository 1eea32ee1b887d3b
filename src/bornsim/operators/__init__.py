"""
Operators: array backends + modified Born operator.

Public API:
- build_operator, BornOperator, green_function
- load_backend, NumpyBackend, CupyBackend
"""

from .backend import CupyBackend, NumpyBackend, load_backend
from .born import EPSILON_FLOOR, BornOperator, build_operator, green_function

__all__ = [
    "BornOperator",
    "build_operator",
    "green_function",
    "EPSILON_FLOOR",
    "NumpyBackend",
    "CupyBackend",
    "load_backend",
]
