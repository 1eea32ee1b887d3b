# solver.py
from __future__ import annotations

import logging
import time
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

import numpy as np

from .algorithm.convergence import ConvergenceMonitor
from .algorithm.iteration import IterationEngine, RunState
from .core.config import SolverOptions
from .core.grid import ROI, embed, extract, physical_axes
from .core.medium import SampleMedium
from .errors import NumericalDivergenceWarning
from .operators.backend import load_backend
from .operators.born import BornOperator, build_operator

log = logging.getLogger(__name__)


class Status(str, Enum):
    CONVERGED = "converged"
    NOT_CONVERGED = "not_converged"
    DIVERGED = "diverged"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the solver handed to progress callbacks."""
    iteration: int
    operator: BornOperator
    options: SolverOptions
    roi: ROI


class ProgressCallback(Protocol):
    def __call__(self, snapshot: Snapshot, field: np.ndarray, energy: np.ndarray, threshold: float) -> None:
        ...


@dataclass(frozen=True)
class SimulationResult:
    """
    field:
        complex field over the ROI (host array)
    energy:
        en[0] = source energy, en[n] = energy added in iteration n (ROI only)
    iterations:
        number of iterations executed, len(energy) - 1
    time:
        wall time of exec() in seconds
    """
    field: np.ndarray
    energy: np.ndarray
    iterations: int
    time: float
    status: Status
    threshold: float

    @property
    def converged(self) -> bool:
        return self.status is Status.CONVERGED


class WaveSim:
    """
    Modified Born series solver for (∇² + k0² e_r) E = -S on a padded 2D grid.

    The operator (V, G, epsilon) and the array backend are fixed at
    construction; every exec() call works on its own field and energy buffers.
    """

    def __init__(self, medium: SampleMedium, options: Optional[SolverOptions] = None) -> None:
        self.options = SolverOptions() if options is None else options
        self.medium = medium
        self.operator = build_operator(medium, self.options)
        self.backend = load_backend(self.options.backend, fft_workers=self.options.fft_workers)
        self.engine = IterationEngine(self.operator, self.backend)
        self.x_range, self.y_range = physical_axes(medium.grid, medium.roi)

        log.info(
            "WaveSim: grid=%s roi=%s backend=%s k0=%.4g epsilon=%.4g (epsilon_min=%.4g)",
            medium.grid.shape, medium.roi_shape, self.backend.name,
            self.operator.k0, self.operator.epsilon, self.operator.epsilon_min,
        )

    @property
    def roi(self) -> ROI:
        return self.medium.roi

    @property
    def epsilon(self) -> float:
        return self.operator.epsilon

    @property
    def epsilon_min(self) -> float:
        return self.operator.epsilon_min

    def _new_state(self, source: np.ndarray) -> RunState:
        b = self.backend
        padded = embed(source, self.roi, self.operator.shape)
        monitor = ConvergenceMonitor(
            self.roi,
            self.options.energy_threshold,
            energy_fn=b.energy,
            check_growth=not self.operator.convergence_guaranteed,
            divergence_window=self.options.divergence_window,
        )
        src = b.asarray(padded)
        monitor.start(src)
        return RunState(E=b.zeros(self.operator.shape), source=src, monitor=monitor)

    def exec(
        self,
        source: np.ndarray,
        *,
        callback: Optional[ProgressCallback] = None,
        cancel: Optional[Callable[[], bool]] = None,
    ) -> SimulationResult:
        """
        Run the iteration for a ROI-shaped source.

        Stops at the first iteration whose added energy is below the threshold,
        after max_iterations, on divergence, or when cancel() returns True.
        The first iteration always runs unless the source is identically zero.
        """
        t0 = time.perf_counter()
        opts = self.options
        state = self._new_state(source)
        monitor = state.monitor

        if monitor.null_source:
            log.info("zero source: nothing to propagate")
            return self._finish(state, Status.CONVERGED, t0)

        self.engine.prepare()

        status = Status.NOT_CONVERGED
        while state.iteration < opts.max_iterations:
            E_old = state.E
            state.E = self.engine.step(state.E, state.source)
            state.iteration += 1
            if opts.differential_mode:
                state.source = 0.0

            en = monitor.record(state.E, E_old)

            if callback is not None and state.iteration % opts.callback_interval == 0:
                log.debug("iteration %d: added energy %.3e (threshold %.3e)", state.iteration, en, monitor.threshold)
                snapshot = Snapshot(state.iteration, self.operator, opts, self.roi)
                callback(snapshot, self.backend.readonly(state.E), state.energy_array(), monitor.threshold)

            if monitor.converged():
                status = Status.CONVERGED
                break
            if monitor.diverging():
                warnings.warn(
                    f"added energy is growing at iteration {state.iteration} "
                    f"(epsilon={self.epsilon:.4g}, epsilon_min={self.epsilon_min:.4g})",
                    NumericalDivergenceWarning,
                    stacklevel=2,
                )
                status = Status.DIVERGED
                break
            if cancel is not None and cancel():
                status = Status.CANCELLED
                break

        return self._finish(state, status, t0)

    def _finish(self, state: RunState, status: Status, t0: float) -> SimulationResult:
        field = np.array(self.backend.to_host(extract(state.E, self.roi)))
        elapsed = time.perf_counter() - t0

        if status is Status.CONVERGED:
            log.info("reached steady state in %d iterations (%.3f s)", state.iteration, elapsed)
        elif status is Status.DIVERGED:
            log.warning("diverged after %d iterations (%.3f s)", state.iteration, elapsed)
        elif status is Status.CANCELLED:
            log.info("cancelled after %d iterations (%.3f s)", state.iteration, elapsed)
        else:
            log.info("did not reach steady state in %d iterations (%.3f s)", state.iteration, elapsed)

        return SimulationResult(
            field=field,
            energy=state.energy_array(),
            iterations=state.iteration,
            time=elapsed,
            status=status,
            threshold=state.threshold,
        )


def solve(medium: SampleMedium, source: np.ndarray, **options) -> SimulationResult:
    """Build a WaveSim with SolverOptions(**options) and run it once."""
    return WaveSim(medium, SolverOptions(**options)).exec(source)
