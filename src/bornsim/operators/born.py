# operators/born.py
from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..core.config import SolverOptions
from ..core.grid import ROI, Grid2D
from ..core.medium import SampleMedium
from ..errors import ConfigurationError

log = logging.getLogger(__name__)

# floor on epsilon_min, avoids a degenerate operator for an empty (vacuum) medium
EPSILON_FLOOR = 1e-3


@dataclass(frozen=True)
class BornOperator:
    """
    Everything the modified Born iteration needs, built once per medium.

    k0:
        free-space wavenumber 2*pi/wavelength
    k:
        reference wavenumber sqrt(e_r_center)*k0
    epsilon, epsilon_min:
        damping parameter in use and the smallest value that guarantees convergence
    V:
        potential e_r*k0**2 - k**2 - 1j*epsilon on the padded grid
    G:
        spectral Green's function 1/(px**2 + py**2 - (k**2 + 1j*epsilon)) of the
        damped reference medium, in FFT ordering
    """
    k0: float
    k: complex
    epsilon: float
    epsilon_min: float
    epsilon_forced: bool
    V: np.ndarray
    G: np.ndarray
    grid: Grid2D
    roi: ROI

    @property
    def shape(self):
        return self.grid.shape

    @property
    def convergence_guaranteed(self) -> bool:
        return self.epsilon >= self.epsilon_min


def green_function(px: np.ndarray, py: np.ndarray, k: complex, epsilon: float) -> np.ndarray:
    """
    G(px, py) = 1 / (px^2 + py^2 - (k^2 + i*epsilon)), broadcast over the
    outer combination of the two frequency axes (shape (len(px), len(py))).
    """
    px = np.asarray(px, dtype=float)[:, None]
    py = np.asarray(py, dtype=float)[None, :]
    return 1.0 / (px**2 + py**2 - (k**2 + 1.0j * epsilon))


def build_operator(medium: SampleMedium, options: SolverOptions | None = None) -> BornOperator:
    """
    Build potential and Green's function for the modified Born series.

    Steps:
      k0 = 2*pi/lambda
      k = sqrt(e_r_center) * k0
      V_raw = e_r*k0^2 - k^2
      epsilon_min = max(max|V_raw|, 1e-3)
      epsilon = options.epsilon*k0^2 if forced, else epsilon_min
      V = V_raw - i*epsilon

    With epsilon >= epsilon_min the iteration is a contraction, so it converges.
    A smaller forced value may diverge.
    """
    options = SolverOptions() if options is None else options

    grid = medium.grid
    e_r = np.asarray(medium.e_r, dtype=np.complex128)
    if e_r.shape != grid.shape:
        raise ConfigurationError(f"e_r has shape {e_r.shape}, expected {grid.shape}")
    if not float(options.wavelength) > 0.0:
        raise ConfigurationError(f"wavelength must be > 0, got {options.wavelength}")

    k0 = 2.0 * np.pi / float(options.wavelength)
    k = complex(np.sqrt(complex(medium.e_r_center))) * k0

    V = e_r * k0**2 - k**2
    epsilon_min = max(float(np.max(np.abs(V))), EPSILON_FLOOR)

    if options.epsilon is not None:
        if float(options.epsilon) < 0.0:
            raise ConfigurationError(f"epsilon must be >= 0, got {options.epsilon}")
        epsilon = float(options.epsilon) * k0**2
        forced = True
        if epsilon < epsilon_min:
            log.warning(
                "forced epsilon=%.4g is below epsilon_min=%.4g; convergence is not guaranteed",
                epsilon, epsilon_min,
            )
    else:
        epsilon = epsilon_min
        forced = False

    if epsilon == 0.0:
        raise ConfigurationError("epsilon must be > 0 for the Born iteration (forced epsilon=0)")

    V = V - 1.0j * epsilon
    G = green_function(grid.px(), grid.py(), k, epsilon)

    log.debug("built operator: grid=%s k0=%.4g k=%s epsilon=%.4g epsilon_min=%.4g",
              grid.shape, k0, k, epsilon, epsilon_min)

    return BornOperator(
        k0=k0,
        k=k,
        epsilon=epsilon,
        epsilon_min=epsilon_min,
        epsilon_forced=forced,
        V=V,
        G=G,
        grid=grid,
        roi=medium.roi,
    )
