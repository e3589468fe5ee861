"""
Regular periodic lattice over the unit cube
"""

import numpy as np
from typing import Tuple
from dataclasses import dataclass, field

from ..core.errors import ConfigurationError, InvariantViolation


@dataclass(frozen=True)
class PeriodicGrid3D:
    """
    N x N x N lattice over [0, 1]^3 with both faces 0 and 1 sampled

    Position 1.0 is identified with 0.0 along every axis. Axis 0 of every
    array is x, axis 1 is y and axis 2 is z.
    """
    n_points: int
    interval: np.ndarray = field(init=False, repr=False, compare=False)
    coordinates_x: np.ndarray = field(init=False, repr=False, compare=False)
    coordinates_y: np.ndarray = field(init=False, repr=False, compare=False)
    coordinates_z: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.n_points, bool) or not isinstance(self.n_points, (int, np.integer)):
            raise ConfigurationError(f"n_points must be an integer, got {self.n_points!r}")
        if self.n_points < 2:
            raise ConfigurationError(f"Grid needs at least 2 points per axis, got {self.n_points}")

        interval = np.linspace(0.0, 1.0, self.n_points)
        coords = np.meshgrid(interval, interval, interval, indexing='ij')
        for array in (interval, *coords):
            array.flags.writeable = False

        # frozen dataclass
        object.__setattr__(self, 'interval', interval)
        object.__setattr__(self, 'coordinates_x', coords[0])
        object.__setattr__(self, 'coordinates_y', coords[1])
        object.__setattr__(self, 'coordinates_z', coords[2])

    @property
    def spacing(self) -> float:
        """Element length h = 1 / (N - 1)"""
        return 1.0 / (self.n_points - 1)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.n_points,) * 3

    @property
    def intervals(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.interval, self.interval, self.interval

    @property
    def coordinates(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.coordinates_x, self.coordinates_y, self.coordinates_z

    def check_shape(self, array: np.ndarray, name: str = 'field'):
        """Raise InvariantViolation if array is not sampled on this grid"""
        if np.shape(array) != self.shape:
            raise InvariantViolation(
                f"{name} has shape {np.shape(array)}, expected {self.shape}"
            )
