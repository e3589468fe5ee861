"""
Stable Fluids solver

Incompressible, viscous flow on the periodic unit cube using Jos Stam's
"Stable Fluids" scheme with an FFT-based diffusion and projection step.
"""

__version__ = "0.1.0"

from .core import (
    SimulationConfig,
    ForcingConfig,
    ForcePatch,
    OutputConfig,
    load_config,
    get_preset,
    StableFluidsError,
    ConfigurationError,
    InvariantViolation,
    NumericalInstabilityError,
)
from .geometry import PeriodicGrid3D
from .physics import VelocityField3D, ForcingField, StableFluidsSolver3D
from .numerics import SpectralGrid3D, SpectralSolver3D, SemiLagrangianAdvector
from .output import VelocitySink, TrajectoryRecorder, VTKSeriesWriter, SinkGroup

__all__ = [
    'SimulationConfig',
    'ForcingConfig',
    'ForcePatch',
    'OutputConfig',
    'load_config',
    'get_preset',
    'StableFluidsError',
    'ConfigurationError',
    'InvariantViolation',
    'NumericalInstabilityError',
    'PeriodicGrid3D',
    'VelocityField3D',
    'ForcingField',
    'StableFluidsSolver3D',
    'SpectralGrid3D',
    'SpectralSolver3D',
    'SemiLagrangianAdvector',
    'VelocitySink',
    'TrajectoryRecorder',
    'VTKSeriesWriter',
    'SinkGroup',
]
