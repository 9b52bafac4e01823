'''SimulationHistory: append-only record of SystemStates for playback.'''

from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .config import config
from .state import SystemState


class SimulationHistory:
    """
    Ordered, append-only sequence of SystemStates.

    Every state must have one entry per name in ``names``. States are
    immutable, so entries stay valid snapshots for as long as the history
    exists. A history is written by a single ProbeSimulator and has no
    internal locking.

    Parameters
    ----------
    names : sequence of str
        Body names in state index order
    """
    def __init__(self, names: Sequence[str]):
        self._names: Tuple[str, ...] = tuple(names)
        self._states = []

    # ========== PROPERTY ACCESS ==========
    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def n_bodies(self) -> int:
        return len(self._names)

    @property
    def latest(self) -> Optional[SystemState]:
        """Most recently appended state, or None if empty."""
        return self._states[-1] if self._states else None

    @property
    def times(self) -> np.ndarray:
        return np.array([s.time for s in self._states], dtype=float)

    # ========== MUTATION ==========
    def append(self, state: SystemState):
        self._check(state)
        self._states.append(state)

    def extend(self, states: Iterable[SystemState]):
        """
        Append a whole run of states.

        All states are checked first; if any is rejected nothing is appended.
        """
        states = list(states)
        for state in states:
            self._check(state)
        self._states.extend(states)

    def _check(self, state: SystemState):
        if not isinstance(state, SystemState):
            raise TypeError(f"History entries must be SystemState, got {type(state).__name__}")
        if state.n_bodies != self.n_bodies:
            raise ValueError(
                f"State has {state.n_bodies} bodies but history tracks {self.n_bodies}"
            )

    # ========== ACCESS ==========
    def snapshot(self) -> Tuple[SystemState, ...]:
        """Immutable view of the states recorded so far."""
        return tuple(self._states)

    def index_of(self, key: Union[int, str]) -> int:
        if isinstance(key, (int, np.integer)):
            if not -self.n_bodies <= key < self.n_bodies:
                raise IndexError(f"Body index {key} out of range for {self.n_bodies} bodies")
            return int(key) % self.n_bodies
        try:
            return self._names.index(key)
        except ValueError:
            raise KeyError(f"No body named '{key}'. Available: {list(self._names)}") from None

    def positions_of(self, key: Union[int, str]) -> np.ndarray:
        """Positions of one body across the history, shape (m, 3)."""
        i = self.index_of(key)
        if not self._states:
            return np.empty((0, 3))
        return np.array([s.positions[i] for s in self._states])

    def velocities_of(self, key: Union[int, str]) -> np.ndarray:
        """Velocities of one body across the history, shape (m, 3)."""
        i = self.index_of(key)
        if not self._states:
            return np.empty((0, 3))
        return np.array([s.velocities[i] for s in self._states])

    def to_dataframe(self) -> pd.DataFrame:
        """
        Export the history to a long-format pandas DataFrame.

        Returns
        -------
        pd.DataFrame
            Columns step, time, body, x, y, z, vx, vy, vz with one row per
            (state, body) pair, in history order.
        """
        columns = ['step', 'time', 'body', 'x', 'y', 'z', 'vx', 'vy', 'vz']
        if not self._states:
            return pd.DataFrame(columns=columns)

        positions = np.concatenate([s.positions for s in self._states])
        velocities = np.concatenate([s.velocities for s in self._states])
        n = self.n_bodies
        data = {
            'step': np.repeat(np.arange(len(self._states)), n),
            'time': np.repeat(self.times, n),
            'body': np.tile(np.array(self._names, dtype=object), len(self._states)),
            'x': positions[:, 0],
            'y': positions[:, 1],
            'z': positions[:, 2],
            'vx': velocities[:, 0],
            'vy': velocities[:, 1],
            'vz': velocities[:, 2],
        }
        return pd.DataFrame(data, columns=columns)

    # ========== PLOTTING ==========
    def plot_3d(self, bodies: Optional[Sequence[Union[int, str]]] = None,
                n_points: Optional[int] = None,
                highlight: Union[int, str, None] = -1,
                highlight_color: Optional[str] = None) -> go.Figure:
        """
        Plot body paths recorded in the history.

        Parameters
        ----------
        bodies : sequence of int or str, optional
            Bodies to draw (default: all)
        n_points : int, optional
            Maximum samples per body (default: config.DEFAULT_PLOT_POINTS)
        highlight : int or str, optional
            Body drawn in ``highlight_color``, by default the last index
            (the probe). None disables highlighting.
        highlight_color : str, optional
            Default: config.DEFAULT_TRAJ_COLOR

        Returns
        -------
        go.Figure
        """
        if not self._states:
            raise ValueError("History is empty, nothing to plot")
        n_points = config.DEFAULT_PLOT_POINTS if n_points is None else n_points
        if n_points < 2:
            raise ValueError("n_points must be at least 2")
        highlight_color = highlight_color or config.DEFAULT_TRAJ_COLOR

        indices = (range(self.n_bodies) if bodies is None
                   else [self.index_of(b) for b in bodies])
        highlighted = None if highlight is None else self.index_of(highlight)
        stride = max(1, int(np.ceil(len(self._states) / n_points)))

        fig = go.Figure()
        for i in indices:
            path = self.positions_of(i)[::stride]
            line = dict(width=3 if i == highlighted else 2)
            if i == highlighted:
                line['color'] = highlight_color
            fig.add_trace(go.Scatter3d(
                x=path[:, 0],
                y=path[:, 1],
                z=path[:, 2],
                mode='lines',
                line=line,
                name=self._names[i],
                hovertemplate='x: %{x:.3e}<br>y: %{y:.3e}<br>z: %{z:.3e}<extra></extra>'
            ))

        fig.update_layout(
            scene=dict(
                xaxis_title='X [m]',
                yaxis_title='Y [m]',
                zaxis_title='Z [m]',
                aspectmode='data'
            ),
            title='Barycentric Trajectories',
            showlegend=True
        )
        return fig

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        return len(self._states)

    def __getitem__(self, index):
        return self._states[index]

    def __iter__(self):
        return iter(self.snapshot())

    def __repr__(self):
        return f"SimulationHistory(n_states={len(self)}, n_bodies={self.n_bodies})"
