from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from ..operators.born import BornOperator
from .convergence import ConvergenceMonitor


class IterationEngine:
    """
    Modified Born series update on the padded grid:

      E' = E - (iV/eps) * (E - IFFT2(G * FFT2(V*E + S)))

    V, G and the preconditioner iV/eps are moved to the backend once and
    only read afterwards, so one engine can serve any number of runs.
    """

    def __init__(self, operator: BornOperator, backend) -> None:
        self.operator = operator
        self.backend = backend
        self.V = backend.asarray(operator.V)
        self.G = backend.asarray(operator.G)
        self.gamma = backend.asarray(1.0j * operator.V / operator.epsilon)
        self._prepared = False

    def prepare(self) -> None:
        """One-time transform setup (fft plan creation); not repeated per iteration."""
        if not self._prepared:
            self.backend.prepare(self.operator.shape)
            self._prepared = True

    def step(self, E, source):
        b = self.backend
        return E - self.gamma * (E - b.ifft2(self.G * b.fft2(self.V * E + source)))


@dataclass
class RunState:
    """Mutable per-run buffers; created fresh by every exec() call."""
    E: Any
    source: Any
    monitor: ConvergenceMonitor
    iteration: int = 0

    @property
    def threshold(self) -> float:
        return self.monitor.threshold

    def energy_array(self) -> np.ndarray:
        return np.asarray(self.monitor.history, dtype=float)
