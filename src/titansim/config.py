"""
Global Configuration for TitanSim Package
=========================================

This module provides package-wide configuration settings that users can modify
to control physical constants, integrator defaults and numerical tolerances.

Examples
--------
View current configuration:

>>> import titansim
>>> print(titansim.config)

Modify settings:

>>> titansim.config.DEFAULT_INTEGRATOR = 'verlet'  # Symplectic stepping
>>> titansim.config.DEFAULT_MAX_STEP = 600.0       # Finer sub-steps [s]

Reset to defaults:

>>> titansim.config.reset()

Temporarily modify settings:

>>> with titansim.temp_config(G=1.0):
...     # Normalised units for this block only
...     field = titansim.GravityField([1.0, 1e-3])

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset. Objects that read
a default at construction (GravityField, Solver, ProbeSimulator) keep the
value they were built with.
"""

from dataclasses import dataclass
from contextlib import contextmanager


@dataclass
class TitanSimConfig:
    """
    Global configuration for TitanSim package.

    Attributes
    ----------
    G : float
        Newtonian gravitational constant [m^3 kg^-1 s^-2].
        Default: 6.674e-11
    EARTH_KEY : str
        Tag or name used to resolve the launch body in a Catalog.
        Default: 'earth'
    DEFAULT_PROBE_MASS : float
        Mass assigned to a probe when none is given [kg].
        Default: 15000.0
    DEFAULT_INTEGRATOR : str
        Stepping discipline used when a Solver is built without one,
        either 'rk4' or 'verlet'.
        Default: 'rk4'
    DEFAULT_MAX_STEP : float
        Largest internal sub-step taken between requested sample times [s].
        Default: 1000.0
    EQUALITY_RTOL : float
        Relative tolerance for floating-point equality comparisons.
        Default: 1e-12
    EQUALITY_ATOL : float
        Absolute tolerance for floating-point equality comparisons.
        Default: 1e-14
    PROBE_MASS_WARNING_RATIO : float
        Warn when the probe mass exceeds this fraction of the lightest
        catalog body, since the probe is then no longer negligible.
        Default: 1e-6
    SUBSTEP_WARNING_THRESHOLD : int
        Warn when a single solve needs more sub-steps than this.
        Default: 10_000_000
    DEFAULT_PLOT_POINTS : int
        Maximum number of samples per body drawn by history plots.
        Default: 1000
    DEFAULT_TRAJ_COLOR : str
        Default color for the probe trajectory in plots.
        Default: 'red'
    """

    # Physical constants
    G: float = 6.674e-11

    # Catalog lookup
    EARTH_KEY: str = 'earth'
    DEFAULT_PROBE_MASS: float = 15000.0

    # Integration
    DEFAULT_INTEGRATOR: str = 'rk4'
    DEFAULT_MAX_STEP: float = 1000.0

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-14

    # Warning thresholds
    PROBE_MASS_WARNING_RATIO: float = 1e-6
    SUBSTEP_WARNING_THRESHOLD: int = 10_000_000

    # Plotting defaults
    DEFAULT_PLOT_POINTS: int = 1000
    DEFAULT_TRAJ_COLOR: str = 'red'

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import titansim
        >>> titansim.config.DEFAULT_MAX_STEP = 10.0  # Modify
        >>> titansim.config.reset()  # Back to defaults
        >>> titansim.config.DEFAULT_MAX_STEP
        1000.0
        """
        defaults = TitanSimConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["TitanSimConfig:"]
        lines.append("  Physics:")
        lines.append(f"    G = {self.G}")
        lines.append("  Catalog:")
        lines.append(f"    EARTH_KEY = '{self.EARTH_KEY}'")
        lines.append(f"    DEFAULT_PROBE_MASS = {self.DEFAULT_PROBE_MASS}")
        lines.append("  Integration:")
        lines.append(f"    DEFAULT_INTEGRATOR = '{self.DEFAULT_INTEGRATOR}'")
        lines.append(f"    DEFAULT_MAX_STEP = {self.DEFAULT_MAX_STEP}")
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append("  Warnings:")
        lines.append(f"    PROBE_MASS_WARNING_RATIO = {self.PROBE_MASS_WARNING_RATIO}")
        lines.append(f"    SUBSTEP_WARNING_THRESHOLD = {self.SUBSTEP_WARNING_THRESHOLD}")
        lines.append("  Plotting:")
        lines.append(f"    DEFAULT_PLOT_POINTS = {self.DEFAULT_PLOT_POINTS}")
        lines.append(f"    DEFAULT_TRAJ_COLOR = '{self.DEFAULT_TRAJ_COLOR}'")
        return "\n".join(lines)


# Global configuration instance
config = TitanSimConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import titansim
    >>> with titansim.temp_config(DEFAULT_INTEGRATOR='verlet'):
    ...     solver = titansim.Solver()
    >>> solver.integrator.name
    'verlet'
    >>> titansim.config.DEFAULT_INTEGRATOR
    'rk4'

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"TitanSimConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
