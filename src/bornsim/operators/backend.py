# operators/backend.py
from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import scipy.fft

from ..errors import ConfigurationError

log = logging.getLogger(__name__)


class NumpyBackend:
    """
    Host arrays (numpy) with scipy.fft transforms.

    scipy.fft keeps an internal plan cache; prepare() runs one transform pair
    on a grid-shaped array so plan creation is paid once, before iterating.
    """
    name = "cpu"

    def __init__(self, workers: int = -1) -> None:
        self.workers = int(workers)
        self.xp = np

    def asarray(self, a, dtype=np.complex128):
        return np.asarray(a, dtype=dtype)

    def to_host(self, a) -> np.ndarray:
        return np.asarray(a)

    def zeros(self, shape: Tuple[int, int], dtype=np.complex128):
        return np.zeros(shape, dtype=dtype)

    def fft2(self, a):
        return scipy.fft.fft2(a, workers=self.workers)

    def ifft2(self, a):
        return scipy.fft.ifft2(a, workers=self.workers)

    def energy(self, a) -> float:
        return float(np.sum(np.abs(a) ** 2))

    def readonly(self, a) -> np.ndarray:
        view = a.view()
        view.flags.writeable = False
        return view

    def prepare(self, shape: Tuple[int, int], dtype=np.complex128) -> None:
        probe = self.zeros(shape, dtype=dtype)
        self.ifft2(self.fft2(probe))


class CupyBackend:
    """
    Device arrays (cupy) with cuFFT transforms. Fields stay on the GPU
    for the whole run and are copied to the host only for callbacks and the result.
    """
    name = "gpu"

    def __init__(self) -> None:
        try:
            import cupy
        except ImportError as exc:
            raise ConfigurationError(
                "backend='gpu' requires cupy (pip install 'bornsim[gpu]')"
            ) from exc
        self.xp = cupy

    def asarray(self, a, dtype=np.complex128):
        return self.xp.asarray(a, dtype=dtype)

    def to_host(self, a) -> np.ndarray:
        return self.xp.asnumpy(a)

    def zeros(self, shape: Tuple[int, int], dtype=np.complex128):
        return self.xp.zeros(shape, dtype=dtype)

    def fft2(self, a):
        return self.xp.fft.fft2(a)

    def ifft2(self, a):
        return self.xp.fft.ifft2(a)

    def energy(self, a) -> float:
        return float(self.xp.sum(self.xp.abs(a) ** 2))

    def readonly(self, a) -> np.ndarray:
        return self.to_host(a)

    def prepare(self, shape: Tuple[int, int], dtype=np.complex128) -> None:
        # cupy caches cuFFT plans per shape/dtype after the first call
        probe = self.zeros(shape, dtype=dtype)
        self.ifft2(self.fft2(probe))
        self.xp.cuda.Device().synchronize()


def load_backend(name: str, *, fft_workers: int = -1):
    """Pick the array backend once, at solver construction."""
    if name == "cpu":
        return NumpyBackend(workers=fft_workers)
    if name == "gpu":
        return CupyBackend()
    raise ConfigurationError(f"unknown backend {name!r}; use 'cpu' or 'gpu'")
