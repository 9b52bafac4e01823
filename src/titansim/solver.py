'''Step-advancing solvers for SystemState.

Two stepping disciplines are provided as Integrator strategies:

- ``RK4Integrator``: classical 4th order Runge-Kutta, self-starting.
- ``VerletIntegrator``: velocity Verlet, symplectic. It keeps the
  previous position sample and current accelerations inside its own cursor
  rather than on the state.

The Solver drives either strategy over caller-specified sample times or a
uniform step grid.'''

import logging
import math
import warnings
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional, Sequence, Union

import numpy as np

from .config import config
from .errors import InputValidationError
from .field import GravityField
from .state import SystemState

logger = logging.getLogger(__name__)


class RK4Cursor(NamedTuple):
    state: SystemState


class VerletCursor(NamedTuple):
    state: SystemState
    prev_positions: np.ndarray
    prev_step: float
    accelerations: np.ndarray


class Integrator(ABC):
    """
    A stepping discipline.

    Integrators advance an opaque *cursor* rather than a bare state so that
    disciplines needing extra history (Verlet) can carry it privately. Every
    cursor exposes the current state as ``cursor.state``.
    """
    name = 'base'

    @abstractmethod
    def start(self, field: GravityField, state: SystemState, h: float):
        """Create a cursor positioned at ``state`` for steps of about ``h``."""

    @abstractmethod
    def advance(self, field: GravityField, cursor, h: float):
        """Return a new cursor ``h`` seconds after ``cursor``."""

    def step(self, field: GravityField, state: SystemState, h: float) -> SystemState:
        """Advance ``state`` by a single step of size ``h``."""
        return self.advance(field, self.start(field, state, h), h).state

    def __repr__(self):
        return f"{type(self).__name__}()"


class RK4Integrator(Integrator):
    """
    Classical 4th order Runge-Kutta.

    Evaluates the field at the current state, twice at the half step and once
    at the full step, then combines the four rates with weights
    1/6, 1/3, 1/3, 1/6.
    """
    name = 'rk4'

    def start(self, field, state, h):
        return RK4Cursor(state)

    def advance(self, field, cursor, h):
        y = cursor.state
        k1 = field.evaluate(y)
        k2 = field.evaluate(y.add_mul(0.5 * h, k1))
        k3 = field.evaluate(y.add_mul(0.5 * h, k2))
        k4 = field.evaluate(y.add_mul(h, k3))
        rate = (k1 + 2.0 * k2 + 2.0 * k3 + k4) * (1.0 / 6.0)
        return RK4Cursor(y.add_mul(h, rate))


class VerletIntegrator(Integrator):
    """
    Verlet stepping in velocity form (kick-drift-kick), symplectic.

    For a step ``h``::

        x+ = x + h v + a h^2 / 2
        a+ = a(x+)
        v+ = v + h (a + a+) / 2

    Positions are advanced from the carried velocity, never from a
    difference of two nearby positions, so very short steps (e.g. two sample
    times a microsecond apart) lose no precision on large coordinates. One
    field evaluation per step; the accelerations at the current positions
    ride along in the cursor.

    The cursor also records the previous position sample. At the start of a
    run it is synthesised from a single derivative evaluation::

        x- = x - h v + a h^2 / 2

    It is bookkeeping only and never feeds back into the update.
    """
    name = 'verlet'

    def start(self, field, state, h):
        h = float(h)
        a0 = field.evaluate(state).accelerations
        prev = state.positions - h * state.velocities + 0.5 * h * h * a0
        return VerletCursor(state, prev, h, a0)

    def advance(self, field, cursor, h):
        y = cursor.state
        x, v, a = y.positions, y.velocities, cursor.accelerations
        x_next = x + h * v + (0.5 * h * h) * a

        # velocities don't enter the force model, so the old ones are fine here
        a_next = field.evaluate(SystemState(x_next, v, y.time + h)).accelerations
        v_next = v + (0.5 * h) * (a + a_next)
        return VerletCursor(SystemState(x_next, v_next, y.time + h), x, h, a_next)


INTEGRATORS = {
    RK4Integrator.name: RK4Integrator,
    VerletIntegrator.name: VerletIntegrator,
}


def make_integrator(integrator: Union[str, Integrator, None] = None) -> Integrator:
    """
    Resolve an integrator name or instance.

    Parameters
    ----------
    integrator : str, Integrator or None
        'rk4', 'verlet', an Integrator instance, or None for
        ``config.DEFAULT_INTEGRATOR``
    """
    if integrator is None:
        integrator = config.DEFAULT_INTEGRATOR
    if isinstance(integrator, Integrator):
        return integrator
    if isinstance(integrator, str):
        try:
            return INTEGRATORS[integrator.lower()]()
        except KeyError:
            raise ValueError(
                f"Unknown integrator '{integrator}'. "
                f"Valid options: {list(INTEGRATORS)}"
            ) from None
    raise TypeError(
        f"integrator must be a name or Integrator instance, got {type(integrator).__name__}"
    )


class Solver:
    """
    Drives an Integrator to produce a sequence of SystemStates.

    Parameters
    ----------
    integrator : str or Integrator, optional
        Stepping discipline (default: ``config.DEFAULT_INTEGRATOR``)
    max_step : float, optional
        Largest internal sub-step between requested sample times [s]
        (default: ``config.DEFAULT_MAX_STEP``)

    Examples
    --------
    >>> solver = Solver('verlet')
    >>> states = solver.solve(field, y0, [0, 3600, 7200])   # sample times
    >>> states = solver.solve(field, y0, 86400, 60)          # fixed grid
    """
    def __init__(self, integrator: Union[str, Integrator, None] = None,
                 max_step: Optional[float] = None):
        self._integrator = make_integrator(integrator)
        max_step = config.DEFAULT_MAX_STEP if max_step is None else float(max_step)
        if not np.isfinite(max_step) or max_step <= 0:
            raise InputValidationError(f"max_step must be positive, got {max_step}")
        self._max_step = max_step

    @property
    def integrator(self) -> Integrator:
        return self._integrator

    @property
    def max_step(self) -> float:
        return self._max_step

    # ========== PUBLIC INTERFACE ==========
    def solve(self, field: GravityField, y0: SystemState,
              ts_or_tf: Union[Sequence[float], np.ndarray, float],
              h: Optional[float] = None, stacklevel: int = 1) -> List[SystemState]:
        """
        Integrate ``y0`` forward.

        ``solve(field, y0, ts)`` returns one state per requested time;
        ``solve(field, y0, tf, h)`` returns states on a uniform grid of
        step ``h`` ending exactly at ``tf``.

        ``stacklevel`` follows ``warnings.warn``: 1 attributes the long-run
        warning to the caller of this method, and wrappers add one per frame
        they put in between.
        """
        if h is None:
            return self.solve_times(field, y0, ts_or_tf, stacklevel=stacklevel + 1)
        return self.solve_fixed(field, y0, ts_or_tf, h, stacklevel=stacklevel + 1)

    def step(self, field: GravityField, y: SystemState, h: float) -> SystemState:
        """Single step of size ``h`` with the configured discipline."""
        self._validate_state(y)
        if not np.isfinite(h) or h <= 0:
            raise InputValidationError(f"Step size must be positive, got {h}")
        return self._integrator.step(field, y, float(h))

    def solve_times(self, field: GravityField, y0: SystemState,
                    ts: Union[Sequence[float], np.ndarray],
                    stacklevel: int = 1) -> List[SystemState]:
        """
        States at the requested times ``ts``.

        ``ts[0]`` must equal ``y0.time`` and is returned as ``y0`` itself.
        Each following interval is covered by equal sub-steps no larger than
        ``max_step``; the recorded state carries exactly the requested time.

        Raises
        ------
        InputValidationError
            Empty state, malformed or decreasing ``ts``, or ``ts[0]`` not at
            the initial time. Raised before any stepping.
        """
        self._validate_state(y0)
        ts = np.asarray(ts, dtype=float)
        if ts.ndim != 1:
            raise InputValidationError(
                "Sample times must be a 1-D sequence; use solve(field, y0, tf, h) "
                "for a fixed-step grid"
            )
        if ts.size == 0:
            raise InputValidationError("At least one sample time is required")
        if not np.all(np.isfinite(ts)):
            raise InputValidationError(f"Sample times must be finite, got {ts}")
        decreasing = np.flatnonzero(np.diff(ts) < 0)
        if decreasing.size:
            k = int(decreasing[0])
            raise InputValidationError(
                f"Sample times must be non-decreasing, got ts[{k}] = {ts[k]} "
                f"followed by ts[{k + 1}] = {ts[k + 1]}"
            )
        if not np.isclose(ts[0], y0.time, rtol=config.EQUALITY_RTOL,
                          atol=config.EQUALITY_ATOL):
            raise InputValidationError(
                f"First sample time {ts[0]} must equal the initial state time {y0.time}"
            )

        counts = [int(math.ceil(dt / self._max_step)) for dt in np.diff(ts)]
        self._check_workload(sum(counts), stacklevel + 2)
        logger.debug("Solving %d sample times with %s (%d sub-steps)",
                     ts.size, self._integrator.name, sum(counts))

        states = [y0]
        cursor = None
        for target, n in zip(ts[1:], counts):
            if n == 0:
                states.append(states[-1])
                continue
            current = states[-1]
            h = (float(target) - current.time) / n
            if cursor is None:
                cursor = self._integrator.start(field, current, h)
            for _ in range(n):
                cursor = self._integrator.advance(field, cursor, h)
            cursor = cursor._replace(state=cursor.state.with_time(target))
            states.append(cursor.state)
        return states

    def solve_fixed(self, field: GravityField, y0: SystemState,
                    tf: float, h: float, stacklevel: int = 1) -> List[SystemState]:
        """
        States on the grid ``y0.time, y0.time + h, ...`` ending at ``tf``.

        Produces ``ceil((tf - y0.time) / h) + 1`` states; the last step is
        shortened to land exactly on ``tf`` when ``h`` does not divide the
        span.

        Raises
        ------
        InputValidationError
            Empty state, ``h <= 0``, ``tf < 0`` or ``tf`` before the initial
            time. Raised before any stepping.
        """
        self._validate_state(y0)
        tf = float(tf)
        h = float(h)
        if not np.isfinite(h) or h <= 0:
            raise InputValidationError(f"Step size must be positive, got {h}")
        if not np.isfinite(tf) or tf < 0:
            raise InputValidationError(f"Final time must be non-negative, got {tf}")
        if tf < y0.time:
            raise InputValidationError(
                f"Final time {tf} is before the initial state time {y0.time}"
            )

        span = tf - y0.time
        n_steps = int(math.ceil(span / h))
        # round-off in span / h must not create a vanishing last step
        if n_steps > 0 and np.isclose((n_steps - 1) * h, span,
                                      rtol=config.EQUALITY_RTOL, atol=0.0):
            n_steps -= 1
        self._check_workload(n_steps, stacklevel + 2)
        logger.debug("Solving %d fixed steps of %g s with %s",
                     n_steps, h, self._integrator.name)

        states = [y0]
        if n_steps == 0:
            return states
        cursor = self._integrator.start(field, y0, h)
        for k in range(1, n_steps + 1):
            t_next = y0.time + k * h if k < n_steps else tf
            cursor = self._integrator.advance(field, cursor, t_next - cursor.state.time)
            cursor = cursor._replace(state=cursor.state.with_time(t_next))
            states.append(cursor.state)
        return states

    # ========== VALIDATION ==========
    @staticmethod
    def _validate_state(y0: SystemState):
        if not isinstance(y0, SystemState):
            raise InputValidationError(
                f"Initial state must be a SystemState, got {type(y0).__name__}"
            )
        if y0.n_bodies == 0:
            raise InputValidationError("Initial state contains no bodies")

    @staticmethod
    def _check_workload(n_steps: int, stacklevel: int):
        if n_steps > config.SUBSTEP_WARNING_THRESHOLD:
            warnings.warn(
                f"Integration requires {n_steps} steps, which may take a long "
                f"time. Consider a larger step size.",
                UserWarning,
                stacklevel=stacklevel,
            )

    def __repr__(self):
        return f"Solver(integrator='{self._integrator.name}', max_step={self._max_step})"
