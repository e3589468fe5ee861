"""
Semi-Lagrangian self-advection on the periodic unit cube
"""

import logging

import numpy as np
from scipy.interpolate import RegularGridInterpolator
from typing import Tuple

from ..core.errors import ConfigurationError, InvariantViolation
from ..geometry.periodic_grid import PeriodicGrid3D
from ..physics.fluid_state_3d import VelocityField3D

logger = logging.getLogger(__name__)


def periodic_wrap(positions: np.ndarray) -> np.ndarray:
    """
    Wrap coordinates into the unit interval.

    Values are reduced into (0, 1]: every exact integer, 0.0 included, maps
    to 1.0, so points on the near face sample the far face.
    """
    wrapped = np.mod(np.asarray(positions, dtype=float), 1.0)
    return np.where(wrapped == 0.0, 1.0, wrapped)


class SemiLagrangianAdvector:
    """
    Backtrace grid points along the flow and resample fields there.

    Looking backwards along characteristics makes the scheme stable for
    any time step length.
    """

    def __init__(self, grid: PeriodicGrid3D, time_step: float):
        """
        Args:
            grid: Periodic lattice the fields live on
            time_step: Time step length
        """
        if not time_step > 0:
            raise ConfigurationError(f"time_step must be > 0, got {time_step}")
        self.grid = grid
        self.time_step = time_step

    def backtrace(self, positions: np.ndarray, direction: np.ndarray) -> np.ndarray:
        """
        One backward Euler step with periodic wrap-around

        Args:
            positions: Coordinates along one axis
            direction: Velocity component along the same axis

        Returns:
            Wrapped coordinates position - dt * direction
        """
        return periodic_wrap(positions - self.time_step * direction)

    def backtrace_grid(self, velocity: VelocityField3D) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Backtrace every grid point using velocity as the transport field.

        Returns:
            Query coordinates (x, y, z), each of the grid's shape
        """
        for name, component in zip('xyz', velocity.components):
            self.grid.check_shape(component, f"velocity.{name}")
        return tuple(
            self.backtrace(coords, component)
            for coords, component in zip(self.grid.coordinates, velocity.components)
        )

    def resample(self, field: np.ndarray,
                 query: Tuple[np.ndarray, np.ndarray, np.ndarray]) -> np.ndarray:
        """
        Trilinear interpolation of a scalar grid field at query positions

        Args:
            field: Scalar field sampled on the grid
            query: Wrapped (x, y, z) query coordinates

        Returns:
            Interpolated values with the shape of the query arrays
        """
        self.grid.check_shape(field, 'field')
        points = np.stack(query, axis=-1)
        if not np.all((points >= 0.0) & (points <= 1.0)):
            bad = points[~((points >= 0.0) & (points <= 1.0))]
            raise InvariantViolation(
                f"{bad.size} backtraced coordinates outside [0, 1] "
                f"(min {np.min(points)}, max {np.max(points)})"
            )
        interpolator = RegularGridInterpolator(
            self.grid.intervals, field, method='linear', bounds_error=True
        )
        return interpolator(points)

    def advect(self, velocity: VelocityField3D) -> VelocityField3D:
        """
        Self-advect a velocity field.

        The query positions are computed once and shared by all three
        components, so the field is advected as a vector.
        """
        query = self.backtrace_grid(velocity)
        return VelocityField3D(*(self.resample(c, query) for c in velocity.components))
