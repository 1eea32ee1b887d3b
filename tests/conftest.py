import numpy as np
import pytest

from bornsim.core.medium import SampleMedium


# 16x16 with pixel_size 0.2 (lambda = 1): no grid frequency satisfies
# px^2 + py^2 == k0^2 exactly, so the homogeneous iteration contracts quickly.
N = 16
PIXEL = 0.2


def point_source(shape, value=1.0):
    s = np.zeros(shape, dtype=complex)
    s[shape[0] // 2, shape[1] // 2] = value
    return s


def free_space_solution(medium: SampleMedium, k: complex, source_padded: np.ndarray) -> np.ndarray:
    """Fixed point of the homogeneous iteration: (px^2 + py^2 - k^2) E = S in Fourier space."""
    px = medium.grid.px()[:, None]
    py = medium.grid.py()[None, :]
    return np.fft.ifft2(np.fft.fft2(source_padded) / (px**2 + py**2 - k**2))


@pytest.fixture
def vacuum():
    return SampleMedium.from_permittivity(np.ones((N, N)), pixel_size=PIXEL)


@pytest.fixture
def contrast_medium():
    e_r = np.ones((N, N), dtype=complex)
    e_r[6:10, 6:10] = 1.5 + 0.05j
    return SampleMedium.from_permittivity(e_r, pixel_size=PIXEL)
