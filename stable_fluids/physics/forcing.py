"""
Static two-patch forcing with a linear ramp-down in time
"""

import numpy as np

from ..core.config import ForcingConfig, ForcePatch
from ..geometry.periodic_grid import PeriodicGrid3D
from .fluid_state_3d import VelocityField3D


def patch_mask(grid: PeriodicGrid3D, patch: ForcePatch) -> np.ndarray:
    """Boolean mask of grid points strictly inside a box"""
    mask = np.ones(grid.shape, dtype=bool)
    for coords, lo, hi in zip(grid.coordinates, patch.lower, patch.upper):
        mask &= (coords > lo) & (coords < hi)
    return mask


class ForcingField:
    """
    Fixed-in-space force along one axis, +A in the first patch and -A in
    the second, scaled in time by max(1 - t, 0).
    """

    def __init__(self, grid: PeriodicGrid3D, config: ForcingConfig):
        config.validate()
        self.grid = grid
        self.config = config
        self.axis = config.axis_index

        first, second = config.patches
        static = config.magnitude * (
            patch_mask(grid, first).astype(float) - patch_mask(grid, second).astype(float)
        )
        static.flags.writeable = False
        self.static_field = static

    @staticmethod
    def prefactor(time: float) -> float:
        """Linear ramp from 1 at t=0 down to 0 at t=1, zero afterwards"""
        return max(1.0 - time, 0.0)

    @property
    def n_forced_points(self) -> int:
        return int(np.count_nonzero(self.static_field))

    def force(self, time: float) -> VelocityField3D:
        components = [np.zeros(self.grid.shape) for _ in range(3)]
        components[self.axis] = self.prefactor(time) * self.static_field
        return VelocityField3D(*components)

    def apply(self, velocity: VelocityField3D, time: float, time_step: float) -> VelocityField3D:
        """
        v + dt * force(t), as a new field

        Args:
            velocity: Current velocity
            time: Elapsed simulated time
            time_step: Time step length
        """
        self.grid.check_shape(velocity.x, 'velocity')
        forced = velocity.copy()
        forced.components[self.axis][...] += time_step * self.prefactor(time) * self.static_field
        return forced
