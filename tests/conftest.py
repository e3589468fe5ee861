import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest

from stable_fluids.core.config import ForcePatch, ForcingConfig, OutputConfig, SimulationConfig
from stable_fluids.geometry.periodic_grid import PeriodicGrid3D
from stable_fluids.numerics.spectral_grid import SpectralGrid3D
from stable_fluids.numerics.spectral_methods_3d import SpectralSolver3D


@pytest.fixture
def small_config(tmp_path):
    """8^3 grid, two 8-point patches along x"""
    return SimulationConfig(
        n_points=8,
        viscosity=0.01,
        time_step=0.05,
        n_time_steps=4,
        forcing=ForcingConfig(
            magnitude=50.0,
            axis='x',
            patches=[
                ForcePatch((0.1, 0.4, 0.4), (0.35, 0.6, 0.6)),
                ForcePatch((0.65, 0.4, 0.4), (0.9, 0.6, 0.6)),
            ],
        ),
        output=OutputConfig(directory=str(tmp_path / 'output')),
    )


@pytest.fixture
def grid8():
    return PeriodicGrid3D(8)


@pytest.fixture
def make_spectral_solver():
    def factory(n_points, time_step=0.1, viscosity=0.0):
        return SpectralSolver3D(SpectralGrid3D.from_config(n_points, time_step, viscosity))
    return factory


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
