"""
3D velocity field representation
"""

import numpy as np
from typing import Tuple
from dataclasses import dataclass

from ..core.errors import InvariantViolation


@dataclass
class VelocityField3D:
    """
    Three real scalar grids, one per velocity component

    Fields are treated as values: solver operations return new fields
    instead of writing into the arrays of their inputs.
    """
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray

    def __post_init__(self):
        self.x = np.asarray(self.x, dtype=float)
        self.y = np.asarray(self.y, dtype=float)
        self.z = np.asarray(self.z, dtype=float)
        if not (self.x.shape == self.y.shape == self.z.shape):
            raise InvariantViolation(
                f"Component shapes differ: {self.x.shape}, {self.y.shape}, {self.z.shape}"
            )

    @classmethod
    def zeros(cls, shape: Tuple[int, ...]) -> 'VelocityField3D':
        return cls(np.zeros(shape), np.zeros(shape), np.zeros(shape))

    @classmethod
    def from_stacked(cls, stacked: np.ndarray) -> 'VelocityField3D':
        """Build from an array of shape (3, ...)"""
        return cls(stacked[0], stacked[1], stacked[2])

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.x.shape

    @property
    def components(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.x, self.y, self.z

    def stacked(self) -> np.ndarray:
        """Components as one (3, ...) array"""
        return np.stack(self.components)

    def copy(self) -> 'VelocityField3D':
        return VelocityField3D(self.x.copy(), self.y.copy(), self.z.copy())

    def magnitude(self) -> np.ndarray:
        """Compute velocity magnitude at each point"""
        return np.sqrt(self.x**2 + self.y**2 + self.z**2)

    def kinetic_energy(self, cell_volume: float = 1.0) -> float:
        """Discrete kinetic energy 0.5 * sum(|u|^2) * dV"""
        return 0.5 * float(np.sum(self.x**2 + self.y**2 + self.z**2)) * cell_volume

    def momentum(self) -> Tuple[float, float, float]:
        """Per-component sum over all grid points"""
        return float(np.sum(self.x)), float(np.sum(self.y)), float(np.sum(self.z))

    def is_finite(self) -> bool:
        return bool(
            np.all(np.isfinite(self.x)) and
            np.all(np.isfinite(self.y)) and
            np.all(np.isfinite(self.z))
        )
