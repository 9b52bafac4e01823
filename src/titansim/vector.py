'''Three-component vector value type used for positions and velocities.'''

import math
from dataclasses import dataclass

import numpy as np

from .config import config


@dataclass(frozen=True)
class Vector3d:
    """
    Immutable 3D vector.

    All arithmetic returns a new Vector3d; operands are never modified.

    Attributes
    ----------
    x, y, z : float
        Cartesian components
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self):
        # Normalise to builtin floats so numpy scalars don't leak through
        for axis in ("x", "y", "z"):
            value = float(getattr(self, axis))
            if not math.isfinite(value):
                raise ValueError(f"Vector component {axis} must be finite, got {value}")
            object.__setattr__(self, axis, value)

    # ========== CONSTRUCTION ==========
    @classmethod
    def from_array(cls, arr) -> "Vector3d":
        """Build a vector from any length-3 array-like."""
        arr = np.asarray(arr, dtype=float)
        if arr.shape != (3,):
            raise ValueError(f"Vector3d requires 3 components, got shape {arr.shape}")
        return cls(arr[0], arr[1], arr[2])

    # ========== ARITHMETIC ==========
    def add(self, other: "Vector3d") -> "Vector3d":
        return Vector3d(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other: "Vector3d") -> "Vector3d":
        return Vector3d(self.x - other.x, self.y - other.y, self.z - other.z)

    def mul(self, scalar: float) -> "Vector3d":
        return Vector3d(scalar * self.x, scalar * self.y, scalar * self.z)

    def add_mul(self, scalar: float, other: "Vector3d") -> "Vector3d":
        """Return ``self + scalar * other``."""
        return Vector3d(self.x + scalar * other.x,
                        self.y + scalar * other.y,
                        self.z + scalar * other.z)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def dist(self, other: "Vector3d") -> float:
        """Euclidean distance to another vector."""
        return self.sub(other).norm()

    def dot(self, other: "Vector3d") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    # ========== CONVERSION ==========
    def to_array(self) -> np.ndarray:
        """Return the components as a new float array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def isclose(self, other: "Vector3d", rtol=None, atol=None) -> bool:
        """Component-wise comparison within config tolerances."""
        rtol = config.EQUALITY_RTOL if rtol is None else rtol
        atol = config.EQUALITY_ATOL if atol is None else atol
        return bool(np.allclose(self.to_array(), other.to_array(),
                                rtol=rtol, atol=atol))

    # ========== SPECIAL METHODS ==========
    def __add__(self, other):
        if not isinstance(other, Vector3d):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Vector3d):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, scalar):
        if not isinstance(scalar, (int, float, np.floating, np.integer)):
            return NotImplemented
        return self.mul(float(scalar))

    __rmul__ = __mul__

    def __neg__(self):
        return Vector3d(-self.x, -self.y, -self.z)

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __len__(self):
        return 3

    def __repr__(self):
        return f"Vector3d(x={self.x!r}, y={self.y!r}, z={self.z!r})"
