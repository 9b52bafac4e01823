'''ProbeSimulator: seeds a probe launched from Earth and extracts its trajectory.'''

import logging
import warnings
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .bodies import Body, Catalog, Probe
from .config import config
from .errors import ConfigurationError
from .field import GravityField
from .history import SimulationHistory
from .solver import Integrator, Solver
from .state import SystemState
from .utils import Timer, as_vector_array
from .vector import Vector3d

logger = logging.getLogger(__name__)

VectorLike = Union[Vector3d, Sequence[float], np.ndarray]


class ProbeSimulator:
    """
    Simulates the catalog bodies together with a probe launched from Earth.

    The probe's initial condition is given relative to Earth and converted to
    the catalog's barycentric frame. The catalog bodies keep their catalog
    order and the probe always takes the last index.

    Every state produced by ``trajectory`` is appended to ``history`` once
    the run has completed, so repeated calls build up a longer playback
    record. A failed run appends nothing.

    Parameters
    ----------
    catalog : Catalog or iterable of Body
        Bodies at the simulation epoch. Must contain a body tagged or named
        ``config.EARTH_KEY``.
    integrator : str or Integrator, optional
        'rk4' or 'verlet' (default: ``config.DEFAULT_INTEGRATOR``)
    max_step : float, optional
        Largest sub-step between requested sample times [s]
        (default: ``config.DEFAULT_MAX_STEP``)
    probe_mass : float, optional
        Probe mass [kg] (default: ``config.DEFAULT_PROBE_MASS``)
    probe_name : str, optional
        Name of the probe in the history (default: 'Probe')
    G : float, optional
        Gravitational constant (default: ``config.G``)

    Raises
    ------
    ConfigurationError
        If the catalog is empty or has no Earth

    Notes
    -----
    An instance is meant for sequential use. Two runs must not append to the
    same history concurrently; use one simulator per thread instead.

    Examples
    --------
    >>> from titansim import ProbeSimulator, SOLAR_SYSTEM
    >>> sim = ProbeSimulator(SOLAR_SYSTEM)
    >>> path = sim.trajectory([6.371e6, 0, 0], [0, 11.2e3, 0], [0, 86400])
    >>> len(path), len(sim.history)
    (2, 2)
    """
    def __init__(self, catalog: Union[Catalog, Sequence[Body]],
                 integrator: Union[str, Integrator, None] = None,
                 max_step: Optional[float] = None,
                 probe_mass: Optional[float] = None,
                 probe_name: str = 'Probe',
                 G: Optional[float] = None):
        if not isinstance(catalog, Catalog):
            catalog = Catalog(catalog)
        self._catalog = catalog
        self._earth = catalog.earth  # ConfigurationError if absent

        probe_mass = config.DEFAULT_PROBE_MASS if probe_mass is None else float(probe_mass)
        if not np.isfinite(probe_mass) or probe_mass <= 0:
            raise ConfigurationError(f"Probe mass must be positive, got {probe_mass}")
        if probe_name in catalog.names:
            raise ConfigurationError(
                f"Probe name '{probe_name}' clashes with a catalog body"
            )
        lightest = float(np.min(catalog.masses))
        if probe_mass > config.PROBE_MASS_WARNING_RATIO * lightest:
            warnings.warn(
                f"Probe mass {probe_mass} kg is not negligible compared to the "
                f"lightest catalog body ({lightest} kg)",
                UserWarning,
                stacklevel=2,
            )
        self._probe_mass = probe_mass
        self._probe_name = probe_name

        # index -> mass/name mapping of the run: catalog order, probe last
        self._run_catalog = catalog.with_body(
            Probe(probe_name, probe_mass, Vector3d(), Vector3d())
        )
        self._solver = Solver(integrator, max_step)
        self._field = GravityField(self._run_catalog, G)
        self._history = SimulationHistory(self._run_catalog.names)

    # ========== PROPERTY ACCESS ==========
    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def earth(self) -> Body:
        return self._earth

    @property
    def solver(self) -> Solver:
        return self._solver

    @property
    def field(self) -> GravityField:
        """Force model over catalog bodies plus the probe"""
        return self._field

    @property
    def run_catalog(self) -> Catalog:
        """Catalog bodies followed by the probe, defining the run's index order"""
        return self._run_catalog

    @property
    def names(self) -> Tuple[str, ...]:
        """Body names in state index order, probe last"""
        return self._run_catalog.names

    @property
    def masses(self) -> np.ndarray:
        return self._field.masses

    @property
    def probe_index(self) -> int:
        return len(self._catalog)

    @property
    def history(self) -> SimulationHistory:
        return self._history

    def states(self) -> Tuple[SystemState, ...]:
        """Snapshot of every state recorded so far."""
        return self._history.snapshot()

    # ========== SETUP ==========
    def make_probe(self, p0: VectorLike, v0: VectorLike) -> Probe:
        """
        Probe with an Earth-relative initial condition converted to the
        barycentric frame.
        """
        p = as_vector_array(p0, "p0") + self._earth.position.to_array()
        v = as_vector_array(v0, "v0") + self._earth.velocity.to_array()
        return Probe(self._probe_name, self._probe_mass,
                     Vector3d.from_array(p), Vector3d.from_array(v))

    def build_initial_state(self, probe: Probe) -> SystemState:
        """Catalog bodies in order followed by ``probe``, at time 0."""
        positions = [b.position.to_array() for b in self._catalog]
        velocities = [b.velocity.to_array() for b in self._catalog]
        positions.append(probe.position.to_array())
        velocities.append(probe.velocity.to_array())
        return SystemState(positions, velocities, 0.0)

    # ========== SIMULATION ==========
    def trajectory(self, p0: VectorLike, v0: VectorLike,
                   ts_or_tf: Union[Sequence[float], np.ndarray, float],
                   h: Optional[float] = None) -> List[Vector3d]:
        """
        Simulate the solar system with a probe fired from Earth.

        ``trajectory(p0, v0, ts)`` returns the probe position at each time in
        ``ts`` (``ts[0]`` must be 0). ``trajectory(p0, v0, tf, h)`` returns
        the probe position on a grid of step ``h`` from 0 to ``tf``, with a
        shorter final step if ``h`` does not divide ``tf``.

        Parameters
        ----------
        p0 : Vector3d or array_like
            Probe position relative to Earth [m]
        v0 : Vector3d or array_like
            Probe velocity relative to Earth [m/s]
        ts_or_tf : array_like or float
            Sample times [s], or the final time when ``h`` is given
        h : float, optional
            Fixed step size [s]

        Returns
        -------
        list of Vector3d
            Barycentric probe positions, one per produced state
        """
        probe = self.make_probe(p0, v0)
        y0 = self.build_initial_state(probe)

        mode = 'sample times' if h is None else 'fixed step'
        with Timer(f"Trajectory ({mode}, {self._solver.integrator.name})", log=logger):
            states = self._solver.solve(self._field, y0, ts_or_tf, h, stacklevel=2)

        self._history.extend(states)
        logger.debug("Appended %d states, history now holds %d",
                     len(states), len(self._history))
        return [s.position_of(self.probe_index) for s in states]

    def __repr__(self):
        return (f"ProbeSimulator(n_bodies={len(self._catalog)}, "
                f"integrator='{self._solver.integrator.name}', "
                f"history={len(self._history)})")
