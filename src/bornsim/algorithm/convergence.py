from __future__ import annotations

import math
from typing import List

import numpy as np

from ..core.grid import ROI


def energy(a: np.ndarray) -> float:
    """sum |a|^2 over all elements."""
    return float(np.sum(np.abs(a) ** 2))


class ConvergenceMonitor:
    """
    Energy bookkeeping for one run.

    en[0] is the source energy, en[n] the energy added in iteration n, measured
    inside the ROI only (the padding is excluded). The run has converged at the
    first n with en[n] < threshold = energy_threshold * en[0].
    """

    def __init__(
        self,
        roi: ROI,
        energy_threshold: float,
        *,
        energy_fn=energy,
        check_growth: bool = False,
        divergence_window: int = 20,
    ) -> None:
        self.roi = roi
        self.energy_threshold = float(energy_threshold)
        self.energy_fn = energy_fn
        self.check_growth = bool(check_growth)
        self.divergence_window = int(divergence_window)
        self.history: List[float] = []
        self.threshold = 0.0

    def start(self, source) -> float:
        """Record en[0] for the (padded) source and return the threshold."""
        en0 = self.energy_fn(source)
        self.history = [en0]
        self.threshold = self.energy_threshold * en0
        return self.threshold

    @property
    def null_source(self) -> bool:
        return len(self.history) > 0 and self.history[0] == 0.0

    def record(self, E_new, E_old) -> float:
        si, sj = self.roi
        en = self.energy_fn(E_new[si, sj] - E_old[si, sj])
        self.history.append(en)
        return en

    @property
    def last(self) -> float:
        return self.history[-1]

    def converged(self) -> bool:
        return abs(self.last) < self.threshold

    def diverging(self) -> bool:
        """
        True for a non-finite energy, or (when check_growth is set) when the
        added energy grew in each of the last `divergence_window` iterations.
        """
        if not math.isfinite(self.last):
            return True
        if not self.check_growth:
            return False
        w = self.divergence_window
        if len(self.history) < w + 2:
            # en[0] is the source energy, not an added energy; skip it
            return False
        tail = self.history[-(w + 1):]
        return all(b > a for a, b in zip(tail[:-1], tail[1:]))
