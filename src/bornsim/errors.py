# errors.py
from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid solver input: bad option values or inconsistent array shapes."""


class NumericalDivergenceWarning(RuntimeWarning):
    """
    Added energy keeps growing between iterations.

    Only expected when the damping parameter was forced below epsilon_min.
    Advisory: the run stops with Status.DIVERGED instead of raising.
    """
