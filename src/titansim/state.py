'''SystemState and Rate definitions.

A SystemState is one time-stamped snapshot of every tracked body. States are
immutable: every operation returns a new instance and the underlying arrays
are read-only, so a history of past states stays valid indefinitely.'''

from typing import Sequence

import numpy as np

from .vector import Vector3d


def _frozen_copy(values, label: str) -> np.ndarray:
    arr = np.array(values, dtype=float)  # always copies
    if arr.size == 0:
        arr = arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"{label} must have shape (n, 3), got {arr.shape}")
    arr.flags.writeable = False
    return arr


class Rate:
    """
    Time derivative of a SystemState.

    Parallel-indexed with the state it was evaluated on: ``velocities[i]`` is
    the rate of change of body i's position and ``accelerations[i]`` the rate
    of change of its velocity.

    Rates support ``+`` and scalar ``*`` so that Runge-Kutta stages can be
    combined with fixed weights.
    """
    def __init__(self, velocities, accelerations):
        self._velocities = _frozen_copy(velocities, "Rate velocities")
        self._accelerations = _frozen_copy(accelerations, "Rate accelerations")
        if self._velocities.shape != self._accelerations.shape:
            raise ValueError(
                f"Rate arrays must match, got {self._velocities.shape} "
                f"and {self._accelerations.shape}"
            )

    @property
    def velocities(self) -> np.ndarray:
        return self._velocities

    @property
    def accelerations(self) -> np.ndarray:
        return self._accelerations

    def velocity_of(self, i: int) -> Vector3d:
        return Vector3d.from_array(self._velocities[i])

    def acceleration_of(self, i: int) -> Vector3d:
        return Vector3d.from_array(self._accelerations[i])

    def __add__(self, other):
        if not isinstance(other, Rate):
            return NotImplemented
        return Rate(self._velocities + other._velocities,
                    self._accelerations + other._accelerations)

    def __mul__(self, scalar):
        if not isinstance(scalar, (int, float, np.floating, np.integer)):
            return NotImplemented
        return Rate(scalar * self._velocities, scalar * self._accelerations)

    __rmul__ = __mul__

    def __len__(self):
        return self._velocities.shape[0]

    def __repr__(self):
        return f"Rate(n_bodies={len(self)})"


class SystemState:
    """
    Positions and velocities of every tracked body at one instant.

    Parameters
    ----------
    positions : array_like, shape (n, 3)
        Barycentric positions [m]
    velocities : array_like, shape (n, 3)
        Barycentric velocities [m/s]
    time : float
        Time since simulation start [s]

    Notes
    -----
    The index of each body is fixed by whoever builds the initial state
    (see ProbeSimulator.build_initial_state) and every state derived from
    it keeps the same index assignment.
    """
    def __init__(self, positions, velocities, time: float = 0.0):
        self._positions = _frozen_copy(positions, "positions")
        self._velocities = _frozen_copy(velocities, "velocities")
        if self._positions.shape != self._velocities.shape:
            raise ValueError(
                f"positions and velocities must have the same length, got "
                f"{len(self._positions)} and {len(self._velocities)}"
            )
        time = float(time)
        if not np.isfinite(time):
            raise ValueError(f"State time must be finite, got {time}")
        self._time = time

    @classmethod
    def from_vectors(cls, positions: Sequence[Vector3d],
                     velocities: Sequence[Vector3d],
                     time: float = 0.0) -> "SystemState":
        """Build a state from sequences of Vector3d."""
        pos = [p.to_array() for p in positions]
        vel = [v.to_array() for v in velocities]
        return cls(pos, vel, time)

    # ========== PROPERTY ACCESS ==========
    @property
    def positions(self) -> np.ndarray:
        """Body positions, shape (n, 3) (read-only)"""
        return self._positions

    @property
    def velocities(self) -> np.ndarray:
        """Body velocities, shape (n, 3) (read-only)"""
        return self._velocities

    @property
    def time(self) -> float:
        return self._time

    @property
    def n_bodies(self) -> int:
        return self._positions.shape[0]

    def position_of(self, i: int) -> Vector3d:
        return Vector3d.from_array(self._positions[i])

    def velocity_of(self, i: int) -> Vector3d:
        return Vector3d.from_array(self._velocities[i])

    # ========== DERIVED STATES ==========
    def add_mul(self, step: float, rate: Rate) -> "SystemState":
        """
        Advance by ``step`` along ``rate``.

        Returns a new state with positions + step * rate.velocities,
        velocities + step * rate.accelerations and time + step.
        """
        if len(rate) != self.n_bodies:
            raise ValueError(
                f"Rate has {len(rate)} bodies but state has {self.n_bodies}"
            )
        return SystemState(self._positions + step * rate.velocities,
                           self._velocities + step * rate.accelerations,
                           self._time + step)

    def advance_positions(self, step: float, velocity_field) -> "SystemState":
        """
        Move positions by ``step * velocity_field``, keeping velocities.

        The caller's array is only read; the returned state owns new buffers.
        """
        velocity_field = np.asarray(velocity_field, dtype=float)
        if velocity_field.shape != self._positions.shape:
            raise ValueError(
                f"velocity field must have shape {self._positions.shape}, "
                f"got {velocity_field.shape}"
            )
        return SystemState(self._positions + step * velocity_field,
                           self._velocities, self._time)

    def with_time(self, time: float) -> "SystemState":
        """Same positions and velocities, relabelled to ``time``."""
        return SystemState(self._positions, self._velocities, time)

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        return self.n_bodies

    def __eq__(self, other):
        if not isinstance(other, SystemState):
            return NotImplemented
        return (self._time == other._time
                and np.array_equal(self._positions, other._positions)
                and np.array_equal(self._velocities, other._velocities))

    __hash__ = None

    def __repr__(self):
        return f"SystemState(n_bodies={self.n_bodies}, time={self._time})"

    def __str__(self):
        lines = [f"SystemState at t = {self._time} s"]
        for i in range(self.n_bodies):
            x, y, z = self._positions[i]
            vx, vy, vz = self._velocities[i]
            lines.append(f"  [{i}] r = ({x:.6e}, {y:.6e}, {z:.6e}) m, "
                         f"v = ({vx:.6e}, {vy:.6e}, {vz:.6e}) m/s")
        return "\n".join(lines)
