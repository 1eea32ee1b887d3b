from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional

from ..errors import ConfigurationError


BackendName = Literal["cpu", "gpu"]


def default_pixel_size(wavelength: float) -> float:
    """Four pixels per free-space wavelength."""
    return float(wavelength) / 4.0


@dataclass(frozen=True)
class SolverOptions:
    """
    Options for a modified Born series run.

    wavelength:
        free-space wavelength, same unit as the grid pixel size
    epsilon:
        forced damping parameter in units of k0**2. Leave None to use
        epsilon_min, the smallest value with guaranteed convergence.
    energy_threshold:
        stop once the energy added in one iteration drops below this
        fraction of the source energy
    callback_interval:
        the progress callback is called every `callback_interval` iterations
    max_iterations:
        hard cap on the number of iterations
    differential_mode:
        when True the source is only injected in the first iteration, so later
        iterations track the incremental field only (debugging aid)
    backend:
        "cpu" (numpy + scipy.fft) or "gpu" (cupy)
    divergence_window:
        number of consecutive energy increases that flags divergence when
        epsilon was forced below epsilon_min
    fft_workers:
        scipy.fft worker count for the cpu backend (-1: all cores)
    """
    wavelength: float = 1.0
    epsilon: Optional[float] = None
    energy_threshold: float = 1e-20
    callback_interval: int = 500
    max_iterations: int = 10000
    differential_mode: bool = False
    backend: BackendName = "cpu"
    divergence_window: int = 20
    fft_workers: int = -1

    def __post_init__(self) -> None:
        if not float(self.wavelength) > 0.0:
            raise ConfigurationError(f"wavelength must be > 0, got {self.wavelength}")
        if self.epsilon is not None and not float(self.epsilon) >= 0.0:
            raise ConfigurationError(f"epsilon must be >= 0, got {self.epsilon}")
        if not float(self.energy_threshold) >= 0.0:
            raise ConfigurationError("energy_threshold must be >= 0")
        if int(self.callback_interval) < 1:
            raise ConfigurationError("callback_interval must be >= 1")
        if int(self.max_iterations) < 1:
            raise ConfigurationError("max_iterations must be >= 1")
        if int(self.divergence_window) < 2:
            raise ConfigurationError("divergence_window must be >= 2")
        if self.backend not in ("cpu", "gpu"):
            raise ConfigurationError(f"backend must be 'cpu' or 'gpu', got {self.backend!r}")

    def replace(self, **changes) -> "SolverOptions":
        return replace(self, **changes)
