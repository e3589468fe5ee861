"""Numerical methods for the Stable Fluids step"""

from .spectral_grid import SpectralGrid3D
from .spectral_methods_3d import SpectralSolver3D
from .advection import SemiLagrangianAdvector, periodic_wrap

__all__ = [
    'SpectralGrid3D',
    'SpectralSolver3D',
    'SemiLagrangianAdvector',
    'periodic_wrap'
]
