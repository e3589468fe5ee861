import numpy as np
import pytest

from stable_fluids.core.config import ForcePatch, ForcingConfig
from stable_fluids.core.errors import ConfigurationError
from stable_fluids.physics.fluid_state_3d import VelocityField3D
from stable_fluids.physics.forcing import ForcingField, patch_mask


@pytest.fixture
def forcing_config():
    return ForcingConfig(
        magnitude=50.0,
        axis='x',
        patches=[
            ForcePatch((0.1, 0.4, 0.4), (0.35, 0.6, 0.6)),
            ForcePatch((0.65, 0.4, 0.4), (0.9, 0.6, 0.6)),
        ],
    )


@pytest.mark.parametrize('time, expected', [
    (0.0, 1.0), (0.25, 0.75), (0.5, 0.5), (1.0, 0.0), (1.5, 0.0), (100.0, 0.0),
])
def test_prefactor_ramps_down_and_stays_at_zero(time, expected):
    assert ForcingField.prefactor(time) == pytest.approx(expected)


def test_patch_mask_uses_strict_bounds(grid8):
    # grid coordinates are k / 7, only k = 2 lies in (0.2, 0.35); the y and z
    # faces at 0 and 1 sit on the patch boundary and are excluded
    patch = ForcePatch((0.2, 0.0, 0.0), (0.35, 1.0, 1.0))
    mask = patch_mask(grid8, patch)
    assert mask[2, 1:-1, 1:-1].all()
    assert not mask[1].any() and not mask[3].any()
    assert not mask[:, 0].any() and not mask[:, -1].any()


def test_static_field(grid8, forcing_config):
    forcing = ForcingField(grid8, forcing_config)
    field = forcing.static_field

    assert forcing.n_forced_points == 16
    assert np.count_nonzero(field == 50.0) == 8
    assert np.count_nonzero(field == -50.0) == 8
    assert field[1, 3, 3] == 50.0 and field[2, 4, 4] == 50.0
    assert field[5, 3, 3] == -50.0 and field[6, 4, 4] == -50.0
    assert field[3, 3, 3] == 0.0
    assert np.sum(field) == 0.0


def test_force_acts_on_one_axis(grid8, forcing_config):
    forcing_config.axis = 'z'
    forcing = ForcingField(grid8, forcing_config)
    force = forcing.force(0.5)
    assert np.array_equal(force.z, 0.5 * forcing.static_field)
    assert not force.x.any() and not force.y.any()


def test_apply_adds_scaled_force(grid8, forcing_config):
    forcing = ForcingField(grid8, forcing_config)
    velocity = VelocityField3D(np.ones(grid8.shape), np.zeros(grid8.shape), np.zeros(grid8.shape))

    forced = forcing.apply(velocity, time=0.25, time_step=0.1)
    assert np.allclose(forced.x, 1.0 + 0.1 * 0.75 * forcing.static_field)
    assert np.array_equal(forced.y, velocity.y)
    assert np.all(velocity.x == 1.0)


def test_apply_after_forcing_ends(grid8, forcing_config):
    forcing = ForcingField(grid8, forcing_config)
    velocity = VelocityField3D.zeros(grid8.shape)
    forced = forcing.apply(velocity, time=1.0, time_step=0.1)
    assert not forced.x.any()


def test_invalid_forcing_rejected(grid8, forcing_config):
    forcing_config.patches = forcing_config.patches[:1]
    with pytest.raises(ConfigurationError):
        ForcingField(grid8, forcing_config)
