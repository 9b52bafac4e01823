'''Newtonian N-body derivative field.'''

from typing import Optional, Sequence, Union, TYPE_CHECKING

import numpy as np

from .config import config
from .errors import NumericalError
from .state import Rate, SystemState
if TYPE_CHECKING:
    from .bodies import Catalog


class GravityField:
    """
    Time derivative of a SystemState under pairwise Newtonian gravity.

    Every body both feels and exerts gravity on every other body (full
    N-body coupling). The field holds only the body masses and G; it has no
    other state, so one instance may be evaluated on any number of states.

    Parameters
    ----------
    masses : sequence of float or Catalog
        Mass of each body [kg], in state index order. A Catalog is accepted
        directly.
    G : float, optional
        Gravitational constant (default: ``config.G``)

    Examples
    --------
    >>> field = GravityField(catalog.masses)
    >>> rate = field.evaluate(state)
    >>> rate.accelerations.shape
    (11, 3)
    """
    def __init__(self, masses: Union[Sequence[float], np.ndarray, "Catalog"],
                 G: Optional[float] = None):
        if hasattr(masses, 'masses'):
            masses = masses.masses
        masses = np.array(masses, dtype=float)
        if masses.ndim != 1:
            raise ValueError(f"masses must be one-dimensional, got shape {masses.shape}")
        if np.any(~np.isfinite(masses)) or np.any(masses <= 0):
            raise ValueError(f"All masses must be positive and finite, got {masses}")
        G = config.G if G is None else float(G)
        if G <= 0:
            raise ValueError(f"Gravitational constant must be positive, got {G}")

        masses.flags.writeable = False
        self._masses = masses
        self._G = G

    @property
    def masses(self) -> np.ndarray:
        return self._masses

    @property
    def G(self) -> float:
        return self._G

    @property
    def n_bodies(self) -> int:
        return self._masses.shape[0]

    # ========== EVALUATION ==========
    def evaluate(self, state: SystemState) -> Rate:
        """
        Compute velocities and gravitational accelerations for ``state``.

        Raises
        ------
        ValueError
            If the state does not have one entry per mass
        NumericalError
            If two bodies share a position or any value is non-finite
        """
        diff, dist = self._separations(state)
        # overflow is caught by the finiteness check below
        with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
            inv_r3 = 1.0 / dist**3
            np.fill_diagonal(inv_r3, 0.0)

            # a_i = G * sum_j m_j (p_j - p_i) / |p_j - p_i|^3
            weights = self._G * self._masses[np.newaxis, :] * inv_r3
            accelerations = np.einsum('ij,ijk->ik', weights, diff)

        if not np.all(np.isfinite(accelerations)):
            bad = sorted(set(np.argwhere(~np.isfinite(accelerations))[:, 0].tolist()))
            raise NumericalError(
                f"Non-finite acceleration for bodies {bad} at t = {state.time}"
            )
        return Rate(state.velocities, accelerations)

    __call__ = evaluate

    def _separations(self, state: SystemState):
        """Pairwise ``p_j - p_i`` vectors and their lengths, shape (n, n[, 3])."""
        if state.n_bodies != self.n_bodies:
            raise ValueError(
                f"State has {state.n_bodies} bodies but field has "
                f"{self.n_bodies} masses"
            )
        positions = state.positions
        if not np.all(np.isfinite(positions)):
            raise NumericalError(f"Non-finite position in state at t = {state.time}")

        diff = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        dist = np.linalg.norm(diff, axis=2)

        off_diagonal = ~np.eye(self.n_bodies, dtype=bool)
        coincident = np.argwhere((dist == 0.0) & off_diagonal)
        if coincident.size:
            pairs = sorted({(int(min(i, j)), int(max(i, j))) for i, j in coincident})
            raise NumericalError(
                f"Coincident bodies {pairs} at t = {state.time}: "
                f"gravitational force is singular",
                pairs=pairs,
            )
        return diff, dist

    # ========== DIAGNOSTICS ==========
    def kinetic_energy(self, state: SystemState) -> float:
        """Total kinetic energy [J]."""
        v2 = np.sum(state.velocities**2, axis=1)
        return float(0.5 * np.sum(self._masses * v2))

    def potential_energy(self, state: SystemState) -> float:
        """Total gravitational potential energy [J]."""
        _, dist = self._separations(state)
        i, j = np.triu_indices(self.n_bodies, k=1)
        return float(-self._G * np.sum(self._masses[i] * self._masses[j] / dist[i, j]))

    def total_energy(self, state: SystemState) -> float:
        """Kinetic plus potential energy [J]."""
        return self.kinetic_energy(state) + self.potential_energy(state)

    def linear_momentum(self, state: SystemState) -> np.ndarray:
        """Total linear momentum [kg m/s], shape (3,)."""
        return self._masses @ state.velocities

    def centre_of_mass(self, state: SystemState) -> np.ndarray:
        """Mass-weighted mean position [m], shape (3,)."""
        return self._masses @ state.positions / np.sum(self._masses)

    def __repr__(self):
        return f"GravityField(n_bodies={self.n_bodies}, G={self._G})"
