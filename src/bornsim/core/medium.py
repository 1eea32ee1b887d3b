from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from ..errors import ConfigurationError
from .config import default_pixel_size
from .grid import ROI, Grid2D, roi_shape


def center_permittivity(e_r: np.ndarray) -> float:
    """
    Midpoint of the real part of the permittivity range.

    The reference wavenumber only varies its real part. For purely real media
    this minimizes max|e_r - e_r_center| and hence epsilon_min; with absorption
    it is only an approximation of the optimal center.
    """
    re = np.real(e_r)
    return float(0.5 * (np.min(re) + np.max(re)))


@dataclass(frozen=True)
class SampleMedium:
    """
    Padded permittivity map plus the geometry the solver needs.

    e_r:
        relative permittivity on the full padded grid (complex)
    e_r_center:
        permittivity of the reference medium
    grid:
        padded grid
    roi:
        slices selecting the physical region inside the padding
    """
    e_r: np.ndarray
    e_r_center: complex
    grid: Grid2D
    roi: ROI
    boundary_widths: Tuple[int, int] = (0, 0)

    def __post_init__(self) -> None:
        if np.shape(self.e_r) != self.grid.shape:
            raise ConfigurationError(
                f"e_r has shape {np.shape(self.e_r)}, expected grid shape {self.grid.shape}"
            )
        roi_shape(self.roi, self.grid.shape)

    @property
    def roi_shape(self) -> Tuple[int, int]:
        return roi_shape(self.roi, self.grid.shape)

    @classmethod
    def from_permittivity(
        cls,
        e_r: np.ndarray,
        *,
        pixel_size: Optional[float] = None,
        wavelength: float = 1.0,
        boundary_widths: Sequence[int] = (0, 0),
        e_r_center: Optional[complex] = None,
    ) -> "SampleMedium":
        """
        Pad a physical permittivity map by edge replication.

        pixel_size defaults to a quarter of the wavelength.

        No absorbing profile is applied in the padding; callers that need
        absorbing boundaries build the padded array themselves and use the
        dataclass constructor directly.
        """
        e_r = np.asarray(e_r, dtype=np.complex128)
        if e_r.ndim != 2:
            raise ConfigurationError("e_r must be 2D (nx_phys, ny_phys)")

        w0, w1 = (int(w) for w in boundary_widths)
        if w0 < 0 or w1 < 0:
            raise ConfigurationError("boundary widths must be >= 0")

        if pixel_size is None:
            pixel_size = default_pixel_size(wavelength)

        padded = np.pad(e_r, ((w0, w0), (w1, w1)), mode="edge")
        grid = Grid2D(nx=padded.shape[0], ny=padded.shape[1], pixel_size=float(pixel_size))
        roi = grid.roi_slices((w0, w1))

        if e_r_center is None:
            e_r_center = center_permittivity(padded)

        return cls(e_r=padded, e_r_center=e_r_center, grid=grid, roi=roi, boundary_widths=(w0, w1))
