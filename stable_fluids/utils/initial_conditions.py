"""
Initial velocity fields on the periodic unit cube
"""

import numpy as np

from ..geometry.periodic_grid import PeriodicGrid3D
from ..physics.fluid_state_3d import VelocityField3D


def zero_velocity(grid: PeriodicGrid3D) -> VelocityField3D:
    """Fluid at rest, the default starting state"""
    return VelocityField3D.zeros(grid.shape)


def taylor_green_vortex(grid: PeriodicGrid3D, amplitude: float = 1.0) -> VelocityField3D:
    """
    3D Taylor-Green vortex, periodic over N grid samples

    u =  A sin(a x) cos(a y) cos(a z)
    v = -A cos(a x) sin(a y) cos(a z)
    w =  0

    with a = 2 pi (N - 1) / N, so one period spans the N samples that the
    discrete Fourier transform sees. The field is divergence-free and its
    spectrum is exactly representable on the grid.

    Args:
        grid: Periodic grid
        amplitude: Velocity amplitude A
    """
    a = 2 * np.pi * (grid.n_points - 1) / grid.n_points
    x, y, z = grid.coordinates
    u = amplitude * np.sin(a * x) * np.cos(a * y) * np.cos(a * z)
    v = -amplitude * np.cos(a * x) * np.sin(a * y) * np.cos(a * z)
    w = np.zeros_like(u)
    return VelocityField3D(u, v, w)


def random_velocity(grid: PeriodicGrid3D, amplitude: float = 1.0,
                    seed: int = None) -> VelocityField3D:
    """
    Uncorrelated random velocities, mostly useful for testing the projection

    Args:
        grid: Periodic grid
        amplitude: Standard deviation of every component
        seed: Seed for numpy's random generator
    """
    rng = np.random.default_rng(seed)
    return VelocityField3D(*(amplitude * rng.standard_normal(grid.shape) for _ in range(3)))
