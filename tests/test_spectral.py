import numpy as np
import pytest

from stable_fluids.core.errors import ConfigurationError
from stable_fluids.geometry.periodic_grid import PeriodicGrid3D
from stable_fluids.numerics.spectral_grid import SpectralGrid3D
from stable_fluids.physics.fluid_state_3d import VelocityField3D
from stable_fluids.utils.initial_conditions import random_velocity, taylor_green_vortex


def test_wavenumber_enumeration():
    assert np.array_equal(SpectralGrid3D.from_config(4, 0.1, 0.0).wavenumbers_1d, [0, 1, -2, -1])
    assert np.array_equal(SpectralGrid3D.from_config(5, 0.1, 0.0).wavenumbers_1d, [0, 1, 2, -2, -1])


def test_wavenumber_grids_use_ij_layout():
    spectral = SpectralGrid3D.from_config(5, 0.1, 0.0)
    assert spectral.kx[1, 0, 0] == 1 and spectral.kx[0, 1, 0] == 0
    assert spectral.ky[0, 2, 0] == 2
    assert spectral.kz[0, 0, 4] == -1


@pytest.mark.parametrize('viscosity, time_step', [(0.0, 0.1), (0.001, 0.02), (10.0, 5.0)])
def test_decay_is_one_at_zero_mode(viscosity, time_step):
    spectral = SpectralGrid3D.from_config(6, time_step, viscosity)
    assert spectral.decay[0, 0, 0] == 1.0


def test_decay_values():
    spectral = SpectralGrid3D.from_config(6, 0.02, 0.001)
    assert spectral.decay[1, 1, 1] == pytest.approx(np.exp(-0.02 * 0.001 * 3))
    assert np.all(spectral.decay <= 1.0)


def test_zero_mode_safeguard():
    spectral = SpectralGrid3D.from_config(6, 0.1, 0.01)
    assert spectral.norm[0, 0, 0] == 1.0
    assert spectral.normalized_x[0, 0, 0] == 0.0
    assert spectral.normalized_y[0, 0, 0] == 0.0
    assert spectral.normalized_z[0, 0, 0] == 0.0
    assert np.all(np.isfinite(spectral.normalized))

    magnitude = np.sqrt(np.sum(spectral.normalized**2, axis=0))
    magnitude[0, 0, 0] = 1.0
    assert np.allclose(magnitude, 1.0)


def test_spectral_grid_is_read_only():
    spectral = SpectralGrid3D.from_config(4, 0.1, 0.0)
    with pytest.raises(ValueError):
        spectral.decay[0, 0, 0] = 0.5


@pytest.mark.parametrize('kwargs', [
    {'n_points': 1, 'time_step': 0.1, 'viscosity': 0.0},
    {'n_points': 4, 'time_step': 0.0, 'viscosity': 0.0},
    {'n_points': 4, 'time_step': 0.1, 'viscosity': -1.0},
])
def test_spectral_grid_rejects_invalid_parameters(kwargs):
    with pytest.raises(ConfigurationError):
        SpectralGrid3D.from_config(**kwargs)


@pytest.mark.parametrize('n_points', [2, 3, 4, 7, 8])
def test_transform_roundtrip(n_points, make_spectral_solver):
    solver = make_spectral_solver(n_points)
    velocity = random_velocity(PeriodicGrid3D(n_points), seed=n_points)

    restored = solver.inverse(solver.forward(velocity))
    for before, result in zip(velocity.components, restored.components):
        assert np.allclose(before, result, atol=1e-12)


def test_projection_is_idempotent(make_spectral_solver):
    solver = make_spectral_solver(8)
    spectrum = solver.forward(random_velocity(PeriodicGrid3D(8), seed=3))

    once = solver.project(spectrum)
    twice = solver.project(once)
    assert np.allclose(once, twice, atol=1e-12)
    assert not np.allclose(once, spectrum)


def test_projection_removes_pseudo_pressure(make_spectral_solver):
    solver = make_spectral_solver(6)
    spectrum = solver.forward(random_velocity(PeriodicGrid3D(6), seed=5))

    projected = solver.project(spectrum)
    assert np.allclose(solver.pseudo_pressure(projected), 0.0, atol=1e-10)


def test_projection_keeps_zero_mode(make_spectral_solver):
    solver = make_spectral_solver(6)
    spectrum = solver.forward(random_velocity(PeriodicGrid3D(6), seed=7))

    projected = solver.project(spectrum)
    assert np.array_equal(projected[:, 0, 0, 0], spectrum[:, 0, 0, 0])


def test_projected_field_is_divergence_free(make_spectral_solver):
    # Odd N has no Nyquist plane, so the real part is the exact projection
    grid = PeriodicGrid3D(9)
    solver = make_spectral_solver(9)
    velocity = random_velocity(grid, seed=11)

    assert np.max(np.abs(solver.divergence(velocity))) > 1.0
    projected = solver.diffuse_and_project(velocity)
    assert np.max(np.abs(solver.divergence(projected))) < 1e-9


def test_mean_flow_is_preserved(make_spectral_solver):
    grid = PeriodicGrid3D(8)
    solver = make_spectral_solver(8, time_step=0.5, viscosity=0.1)
    velocity = random_velocity(grid, seed=13)
    velocity = VelocityField3D(velocity.x + 2.0, velocity.y - 1.0, velocity.z)

    result = solver.diffuse_and_project(velocity)
    for before, after in zip(velocity.momentum(), result.momentum()):
        assert after == pytest.approx(before, abs=1e-9)


def test_taylor_green_is_untouched_without_viscosity(make_spectral_solver):
    velocity = taylor_green_vortex(PeriodicGrid3D(8), amplitude=2.0)
    result = make_spectral_solver(8).diffuse_and_project(velocity)
    for before, projected in zip(velocity.components, result.components):
        assert np.allclose(before, projected, atol=1e-12)


def test_taylor_green_decays_exactly(make_spectral_solver):
    time_step, viscosity = 0.1, 0.05
    velocity = taylor_green_vortex(PeriodicGrid3D(8))
    result = make_spectral_solver(8, time_step, viscosity).diffuse_and_project(velocity)

    factor = np.exp(-time_step * viscosity * 3)
    assert np.allclose(result.x, factor * velocity.x, atol=1e-12)
    assert np.allclose(result.y, factor * velocity.y, atol=1e-12)


def test_result_is_real(make_spectral_solver):
    result = make_spectral_solver(4).diffuse_and_project(random_velocity(PeriodicGrid3D(4), seed=1))
    assert not np.iscomplexobj(result.x)
    assert result.is_finite()
