# core/grid.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple
import numpy as np

from ..errors import ConfigurationError


ROI = Tuple[slice, slice]


@dataclass(frozen=True)
class Grid2D:
    """
    Padded simulation grid with uniform pixel spacing.

    Sample points are x[i] = i * pixel_size along axis 0 and
    y[j] = j * pixel_size along axis 1 (indexing="ij").
    The spatial-frequency axes follow FFT ordering (no fftshift), so they
    line up with np.fft.fft2 / scipy.fft.fft2 of a (nx, ny) array.
    """
    nx: int
    ny: int
    pixel_size: float

    def __post_init__(self) -> None:
        if int(self.nx) < 1 or int(self.ny) < 1:
            raise ConfigurationError("Grid2D requires nx, ny >= 1.")
        if not float(self.pixel_size) > 0.0:
            raise ConfigurationError("Grid2D requires pixel_size > 0.")

    @property
    def shape(self) -> Tuple[int, int]:
        return int(self.nx), int(self.ny)

    def x(self) -> np.ndarray:
        return np.arange(self.nx) * float(self.pixel_size)

    def y(self) -> np.ndarray:
        return np.arange(self.ny) * float(self.pixel_size)

    def px(self) -> np.ndarray:
        return 2.0 * np.pi * np.fft.fftfreq(self.nx, d=float(self.pixel_size))

    def py(self) -> np.ndarray:
        return 2.0 * np.pi * np.fft.fftfreq(self.ny, d=float(self.pixel_size))

    def mesh(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.meshgrid(self.x(), self.y(), indexing="ij")

    def roi_slices(self, boundary_widths: Sequence[int]) -> ROI:
        """
        For a grid built by adding w0 (w1) padding pixels on each side of the
        physical region along axis 0 (1), the physical region corresponds to:
            [w0 : nx-w0] x [w1 : ny-w1]
        """
        if len(boundary_widths) != 2:
            raise ConfigurationError("boundary_widths must have two entries (axis 0, axis 1).")
        w0, w1 = (int(w) for w in boundary_widths)
        if w0 < 0 or w1 < 0:
            raise ConfigurationError("boundary widths must be >= 0")
        if 2 * w0 >= self.nx or 2 * w1 >= self.ny:
            raise ConfigurationError("boundary widths too large for this grid.")
        return slice(w0, self.nx - w0), slice(w1, self.ny - w1)


def roi_shape(roi: ROI, grid_shape: Tuple[int, int]) -> Tuple[int, int]:
    """Shape of the ROI inside an array of grid_shape; rejects strided or out-of-range slices."""
    if len(roi) != 2 or not all(isinstance(s, slice) for s in roi):
        raise ConfigurationError("roi must be a pair of slices")
    dims = []
    for s, n in zip(roi, grid_shape):
        start, stop, step = s.indices(int(n))
        if step != 1:
            raise ConfigurationError("roi slices must have unit step")
        if (s.stop is not None and s.stop > n) or stop <= start:
            raise ConfigurationError(f"roi {roi} does not fit in grid of shape {tuple(grid_shape)}")
        dims.append(stop - start)
    return dims[0], dims[1]


def embed(
    source: np.ndarray,
    roi: ROI,
    grid_shape: Tuple[int, int],
    *,
    dtype=np.complex128,
) -> np.ndarray:
    """
    Embed a physical (ROI-shaped) array into a zero-padded array of grid_shape.

    Every entry outside the ROI is exactly zero.
    """
    source = np.asarray(source)
    if source.ndim != 2:
        raise ConfigurationError("source must be 2D")
    expected = roi_shape(roi, grid_shape)
    if source.shape != expected:
        raise ConfigurationError(f"source has shape {source.shape}, expected ROI shape {expected}")

    out = np.zeros(tuple(grid_shape), dtype=dtype)
    si, sj = roi
    out[si, sj] = source
    return out


def extract(field: np.ndarray, roi: ROI) -> np.ndarray:
    """
    Extract the physical region from a padded field.
    """
    if field.ndim != 2:
        raise ConfigurationError("field must be 2D")
    si, sj = roi
    return field[si, sj]


def physical_axes(grid: Grid2D, roi: ROI) -> Tuple[np.ndarray, np.ndarray]:
    """Axis vectors of the ROI, shifted so both start at zero."""
    x = grid.x()[roi[0]]
    y = grid.y()[roi[1]]
    return x - x[0], y - y[0]
