'''Body, Probe and Catalog definitions.

Bodies are immutable records loaded once from an external catalog. The
Catalog is the explicit index -> attribute mapping (mass, name, radius) shared
by every state of a run.'''

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .config import config
from .errors import ConfigurationError
from .vector import Vector3d

logger = logging.getLogger(__name__)

_DATAFRAME_COLUMNS = ['name', 'mass', 'radius', 'x', 'y', 'z', 'vx', 'vy', 'vz']


def _coerce_vector(value, label: str) -> Vector3d:
    if isinstance(value, Vector3d):
        return value
    try:
        return Vector3d.from_array(value)
    except ValueError as exc:
        raise ValueError(f"{label}: {exc}") from exc


@dataclass(frozen=True)
class Body:
    """
    Immutable description of one massive object at catalog epoch.

    Attributes
    ----------
    name : str
        Unique body name, e.g. 'Earth'
    mass : float
        Mass [kg], must be positive
    radius : float
        Mean radius [m], must be non-negative
    position : Vector3d
        Barycentric position at catalog epoch [m]
    velocity : Vector3d
        Barycentric velocity at catalog epoch [m/s]
    tags : frozenset of str
        Lookup keys used by Catalog.find (e.g. {'earth'})
    """
    name: str
    mass: float
    radius: float
    position: Vector3d
    velocity: Vector3d
    tags: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Body name must be a non-empty string")
        if not np.isfinite(self.mass) or self.mass <= 0:
            raise ValueError(f"Mass must be positive, got {self.mass}")
        if not np.isfinite(self.radius) or self.radius < 0:
            raise ValueError(f"Radius must be non-negative, got {self.radius}")
        object.__setattr__(self, 'mass', float(self.mass))
        object.__setattr__(self, 'radius', float(self.radius))
        object.__setattr__(self, 'position',
                           _coerce_vector(self.position, f"{self.name} position"))
        object.__setattr__(self, 'velocity',
                           _coerce_vector(self.velocity, f"{self.name} velocity"))
        object.__setattr__(self, 'tags',
                           frozenset(tag.lower() for tag in self.tags))

    def matches(self, key: str) -> bool:
        """True if key is one of the tags or equals the name (case-insensitive)."""
        key = key.lower()
        return key in self.tags or key == self.name.lower()


@dataclass(frozen=True)
class Probe:
    """
    Spacecraft injected into a run with a caller-chosen initial condition.

    The probe is treated like any other body by the force model; its mass
    is expected to be negligible next to the catalog bodies.
    """
    name: str
    mass: float
    position: Vector3d
    velocity: Vector3d

    def __post_init__(self):
        if not np.isfinite(self.mass) or self.mass <= 0:
            raise ValueError(f"Probe mass must be positive, got {self.mass}")
        object.__setattr__(self, 'mass', float(self.mass))
        object.__setattr__(self, 'position',
                           _coerce_vector(self.position, "Probe position"))
        object.__setattr__(self, 'velocity',
                           _coerce_vector(self.velocity, "Probe velocity"))

    @property
    def radius(self) -> float:
        return 0.0

    def as_body(self) -> Body:
        """Return the probe as a Body record, tagged 'probe'."""
        return Body(self.name, self.mass, 0.0, self.position, self.velocity,
                    tags=frozenset({'probe'}))


class Catalog:
    """
    Immutable ordered collection of Bodies.

    Index order is fixed at construction and defines the index -> mass,
    name and radius mapping for every SystemState built from this catalog.

    Parameters
    ----------
    bodies : iterable of Body
        Bodies in catalog order

    Raises
    ------
    ConfigurationError
        If no bodies are given or two bodies share a name
    """
    def __init__(self, bodies: Iterable[Body]):
        bodies = tuple(bodies)
        if not bodies:
            raise ConfigurationError("Catalog must contain at least one body")
        for body in bodies:
            if not isinstance(body, Body):
                raise TypeError(f"Catalog entries must be Body, got {type(body).__name__}")

        names = [b.name for b in bodies]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate body names in catalog: {duplicates}")

        self._bodies: Tuple[Body, ...] = bodies
        self._masses = np.array([b.mass for b in bodies], dtype=float)
        self._masses.flags.writeable = False
        self._radii = np.array([b.radius for b in bodies], dtype=float)
        self._radii.flags.writeable = False

    # ========== PROPERTY ACCESS ==========
    @property
    def bodies(self) -> Tuple[Body, ...]:
        return self._bodies

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(b.name for b in self._bodies)

    @property
    def masses(self) -> np.ndarray:
        """Body masses [kg] in catalog order (read-only)"""
        return self._masses

    @property
    def radii(self) -> np.ndarray:
        """Body radii [m] in catalog order (read-only)"""
        return self._radii

    @property
    def earth(self) -> Body:
        """The launch body, resolved by ``config.EARTH_KEY``."""
        return self.find(config.EARTH_KEY)

    # ========== LOOKUP ==========
    def index_of(self, key: str) -> int:
        """
        Index of the first body matching key.

        Tags are checked before names, so a body tagged 'earth' wins over a
        later body merely named 'Earth'.

        Raises
        ------
        TypeError
            If key is not a string
        ConfigurationError
            If no body matches
        """
        if not isinstance(key, str):
            raise TypeError(f"Catalog keys must be str, got {type(key).__name__}")
        key_lower = key.lower()
        for i, body in enumerate(self._bodies):
            if key_lower in body.tags:
                return i
        for i, body in enumerate(self._bodies):
            if body.name.lower() == key_lower:
                return i
        raise ConfigurationError(
            f"Catalog has no body tagged or named '{key}'. "
            f"Available bodies: {list(self.names)}"
        )

    def find(self, key: str) -> Body:
        """Body matching key by tag or name (see index_of)."""
        return self._bodies[self.index_of(key)]

    def with_body(self, body: Union[Body, "Probe"]) -> "Catalog":
        """Return a new Catalog with body appended as the last index."""
        if isinstance(body, Probe):
            body = body.as_body()
        return Catalog(self._bodies + (body,))

    # ========== PANDAS ADAPTERS ==========
    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "Catalog":
        """
        Build a Catalog from a DataFrame.

        Parameters
        ----------
        df : pd.DataFrame
            Columns name, mass, radius, x, y, z, vx, vy, vz and optionally
            tags (a comma separated string or an iterable per row).
            Row order becomes catalog order.
        """
        missing = [c for c in _DATAFRAME_COLUMNS if c not in df.columns]
        if missing:
            raise ConfigurationError(f"Catalog DataFrame is missing columns: {missing}")

        bodies = []
        for row in df.itertuples(index=False):
            tags = getattr(row, 'tags', None) if 'tags' in df.columns else None
            bodies.append(Body(
                name=str(row.name),
                mass=row.mass,
                radius=row.radius,
                position=Vector3d(row.x, row.y, row.z),
                velocity=Vector3d(row.vx, row.vy, row.vz),
                tags=_parse_tags(tags),
            ))
        logger.debug("Loaded catalog of %d bodies from DataFrame", len(bodies))
        return cls(bodies)

    def to_dataframe(self) -> pd.DataFrame:
        """Export the catalog as a DataFrame (inverse of from_dataframe)."""
        data = {
            'name': [b.name for b in self._bodies],
            'mass': self._masses.copy(),
            'radius': self._radii.copy(),
        }
        positions = np.array([b.position.to_array() for b in self._bodies])
        velocities = np.array([b.velocity.to_array() for b in self._bodies])
        for idx, axis in enumerate('xyz'):
            data[axis] = positions[:, idx]
            data['v' + axis] = velocities[:, idx]
        data['tags'] = [','.join(sorted(b.tags)) for b in self._bodies]
        return pd.DataFrame(data)

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        return len(self._bodies)

    def __iter__(self):
        return iter(self._bodies)

    def __getitem__(self, index):
        return self._bodies[index]

    def __contains__(self, key):
        if isinstance(key, Body):
            return key in self._bodies
        if not isinstance(key, str):
            return False
        return any(b.matches(key) for b in self._bodies)

    def __eq__(self, other):
        if not isinstance(other, Catalog):
            return NotImplemented
        return self._bodies == other._bodies

    def __hash__(self):
        return hash(self._bodies)

    def __repr__(self):
        return f"Catalog({len(self)} bodies: {', '.join(self.names)})"


def _parse_tags(tags: Optional[object]) -> FrozenSet[str]:
    if tags is None:
        return frozenset()
    if isinstance(tags, str):
        return frozenset(t.strip() for t in tags.split(',') if t.strip())
    if isinstance(tags, float) and np.isnan(tags):
        # empty cell read back from CSV
        return frozenset()
    return frozenset(tags)
