# diagnostics.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from .solver import SimulationResult, Snapshot


# -----------------------------
# Progress callbacks
# -----------------------------

class ProgressBar:
    """
    Progress callback that advances a tqdm bar and shows the added energy
    against the stopping threshold.

        with ProgressBar(total=opts.max_iterations) as bar:
            sim.exec(source, callback=bar)
    """

    def __init__(self, total: Optional[int] = None, *, desc: str = "Born series", **tqdm_kwargs) -> None:
        self.bar = tqdm(total=total, desc=desc, unit="it", **tqdm_kwargs)

    def __call__(self, snapshot: Snapshot, field: np.ndarray, energy: np.ndarray, threshold: float) -> None:
        if snapshot.iteration < self.bar.n:
            # new run on the same bar
            self.bar.reset(total=self.bar.total)
        self.bar.update(snapshot.iteration - self.bar.n)
        self.bar.set_postfix(added=f"{energy[-1]:.2e}", threshold=f"{threshold:.2e}", refresh=False)

    def close(self) -> None:
        self.bar.close()

    def __enter__(self) -> "ProgressBar":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class EnergyTrace:
    """Keep (iteration, added energy, ROI field energy) at every callback."""

    def __init__(self) -> None:
        self.checkpoints: List[Tuple[int, float, float]] = []

    def __call__(self, snapshot: Snapshot, field: np.ndarray, energy: np.ndarray, threshold: float) -> None:
        si, sj = snapshot.roi
        roi_energy = float(np.sum(np.abs(field[si, sj]) ** 2))
        self.checkpoints.append((snapshot.iteration, float(energy[-1]), roi_energy))

    @property
    def iterations(self) -> np.ndarray:
        return np.array([c[0] for c in self.checkpoints], dtype=int)

    @property
    def added_energy(self) -> np.ndarray:
        return np.array([c[1] for c in self.checkpoints], dtype=float)

    @property
    def field_energy(self) -> np.ndarray:
        return np.array([c[2] for c in self.checkpoints], dtype=float)


# -----------------------------
# I/O helpers
# -----------------------------

def save_npz(path: Path, **arrays: np.ndarray) -> None:
    """Save compressed .npz (creates parent dirs)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(path, **arrays)


def save_result(path: Path, result: SimulationResult, **extra: np.ndarray) -> None:
    """Persist a SimulationResult (plus optional extra arrays) as compressed .npz."""
    save_npz(
        path,
        field=result.field,
        energy=result.energy,
        iterations=np.array(result.iterations),
        time=np.array(result.time),
        status=np.array(result.status.value),
        threshold=np.array(result.threshold),
        **extra,
    )
