import numpy as np
import pytest

from stable_fluids.core.errors import ConfigurationError, InvariantViolation
from stable_fluids.geometry.periodic_grid import PeriodicGrid3D
from stable_fluids.numerics.advection import SemiLagrangianAdvector, periodic_wrap
from stable_fluids.physics.fluid_state_3d import VelocityField3D
from stable_fluids.utils.initial_conditions import random_velocity


@pytest.fixture
def advector(grid8):
    return SemiLagrangianAdvector(grid8, time_step=0.1)


def test_periodic_wrap():
    wrapped = periodic_wrap(np.array([-0.25, 0.0, 0.5, 1.0, 1.25, -1.5, 3.0, -1.0, 2.0]))
    assert np.allclose(wrapped, [0.75, 1.0, 0.5, 1.0, 0.25, 0.5, 1.0, 1.0, 1.0])
    assert np.all((wrapped > 0.0) & (wrapped <= 1.0))


def test_backtrace_from_origin_wraps_into_unit_interval(advector):
    positions = np.zeros(5)
    direction = np.array([0.5, 1.0, 2.0, 7.5, 10.0])

    wrapped = advector.backtrace(positions, direction)
    assert np.all(wrapped > 0.0) and np.all(wrapped <= 1.0)
    assert np.allclose(wrapped, [0.95, 0.9, 0.8, 0.25, 1.0])


def test_backtrace_is_stable_for_huge_displacements(grid8):
    advector = SemiLagrangianAdvector(grid8, time_step=1e3)
    velocity = random_velocity(grid8, amplitude=50.0, seed=2)
    for query in advector.backtrace_grid(velocity):
        assert np.all((query >= 0.0) & (query <= 1.0))
    assert advector.advect(velocity).is_finite()


def test_resample_is_periodically_consistent(advector, grid8, rng):
    field = rng.standard_normal(grid8.shape)
    direction = np.full(grid8.shape, 0.3)

    from_origin = advector.backtrace(np.zeros(grid8.shape), direction)
    shifted = advector.backtrace(np.ones(grid8.shape), direction)
    assert np.all(from_origin < 1.0)

    query_a = (from_origin, grid8.coordinates_y, grid8.coordinates_z)
    query_b = (shifted, grid8.coordinates_y, grid8.coordinates_z)
    assert np.allclose(advector.resample(field, query_a), advector.resample(field, query_b))


def test_resample_at_grid_points_is_exact(advector, grid8, rng):
    field = rng.standard_normal(grid8.shape)
    assert np.allclose(advector.resample(field, grid8.coordinates), field)


def test_resample_is_trilinear(advector, grid8):
    field = 3.0 * grid8.coordinates_x - 2.0 * grid8.coordinates_y + grid8.coordinates_z
    half = 0.5 * grid8.spacing
    query = (
        np.full((2, 2), half),
        np.full((2, 2), 0.5),
        np.full((2, 2), 1.0 - half),
    )
    expected = 3.0 * half - 2.0 * 0.5 + (1.0 - half)
    assert np.allclose(advector.resample(field, query), expected)


def test_resample_rejects_positions_outside_domain(advector, grid8):
    field = np.zeros(grid8.shape)
    x, y, z = grid8.coordinates
    with pytest.raises(InvariantViolation):
        advector.resample(field, (x + 1.5, y, z))
    with pytest.raises(InvariantViolation):
        advector.resample(field, (x, y - 0.2, z))


def test_resample_rejects_wrong_shape(advector):
    field = np.zeros((4, 4, 4))
    with pytest.raises(InvariantViolation):
        advector.resample(field, PeriodicGrid3D(4).coordinates)


def test_zero_velocity_moves_near_face_onto_far_face(advector, grid8):
    velocity = VelocityField3D.zeros(grid8.shape)
    queries = advector.backtrace_grid(velocity)
    for query, coords in zip(queries, grid8.coordinates):
        expected = np.where(coords == 0.0, 1.0, coords)
        assert np.array_equal(query, expected)


def test_zero_velocity_advection_copies_far_face_plane():
    grid = PeriodicGrid3D(4)
    advector = SemiLagrangianAdvector(grid, time_step=0.1)
    field = np.arange(64, dtype=float).reshape(4, 4, 4)

    query = advector.backtrace_grid(VelocityField3D.zeros(grid.shape))
    result = advector.resample(field, query)

    # index 0 on any axis samples index 3 on that axis
    assert result[0, 1, 1] == pytest.approx(53.0)
    assert result[1, 0, 2] == pytest.approx(field[1, 3, 2])
    assert result[0, 0, 0] == pytest.approx(field[3, 3, 3])
    assert np.allclose(result[1:, 1:, 1:], field[1:, 1:, 1:])


def test_uniform_velocity_is_transported_unchanged(advector, grid8):
    shape = grid8.shape
    velocity = VelocityField3D(np.full(shape, 0.4), np.full(shape, -0.2), np.full(shape, 0.7))
    result = advector.advect(velocity)
    assert np.allclose(result.x, 0.4)
    assert np.allclose(result.y, -0.2)
    assert np.allclose(result.z, 0.7)


def test_components_share_backtraced_positions(advector, grid8):
    velocity = random_velocity(grid8, amplitude=0.5, seed=9)
    result = advector.advect(velocity)

    query = advector.backtrace_grid(velocity)
    for component, advected in zip(velocity.components, result.components):
        assert np.allclose(advector.resample(component, query), advected)


def test_advect_does_not_modify_input(advector, grid8):
    velocity = random_velocity(grid8, seed=4)
    before = velocity.copy()
    advector.advect(velocity)
    for a, b in zip(before.components, velocity.components):
        assert np.array_equal(a, b)


def test_advector_rejects_non_positive_time_step(grid8):
    with pytest.raises(ConfigurationError):
        SemiLagrangianAdvector(grid8, time_step=0.0)


def test_grid_needs_two_points():
    with pytest.raises(ConfigurationError):
        PeriodicGrid3D(1)
    grid = PeriodicGrid3D(2)
    assert grid.spacing == 1.0
    assert np.array_equal(grid.interval, [0.0, 1.0])
