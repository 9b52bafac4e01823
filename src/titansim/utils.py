"""
Utility functions and classes for the TitanSim package.
"""

import logging
from time import perf_counter

import numpy as np

logger = logging.getLogger(__name__)


class Timer:
    """
    Context manager for timing code execution.

    Examples
    --------
    >>> from titansim.utils import Timer
    >>> with Timer("Trajectory"):
    ...     positions = sim.trajectory(p0, v0, [0, 86400])

    >>> with Timer(verbose=False) as t:
    ...     # ... code ...
    >>> print(f"Took {t.elapsed:.6f} seconds")
    """
    def __init__(self, name="Operation", verbose=True, log=None):
        """
        Parameters
        ----------
        name : str, optional
            Name to report when timing completes (default: "Operation")
        verbose : bool, optional
            Whether to log the timing automatically (default: True)
        log : logging.Logger, optional
            Logger receiving the timing line (default: this module's logger)
        """
        self.name = name
        self.verbose = verbose
        self.log = log if log is not None else logger
        self.elapsed = None

    def __enter__(self):
        self.start = perf_counter()
        return self

    def __exit__(self, *args):
        self.end = perf_counter()
        self.elapsed = self.end - self.start
        if self.verbose:
            self.log.info("%s: %.6f s", self.name, self.elapsed)


def as_vector_array(value, name="vector") -> np.ndarray:
    """
    Coerce a Vector3d or length-3 sequence to a finite float array.

    Raises
    ------
    ValueError
        If the value does not have exactly three finite components.
    """
    if hasattr(value, "to_array"):
        return value.to_array()
    arr = np.asarray(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} must be finite, got {arr}")
    return arr
