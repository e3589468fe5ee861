"""Velocity state, forcing and time stepping"""

from .fluid_state_3d import VelocityField3D
from .forcing import ForcingField
from .stable_fluids_3d import StableFluidsSolver3D

__all__ = [
    'VelocityField3D',
    'ForcingField',
    'StableFluidsSolver3D'
]
