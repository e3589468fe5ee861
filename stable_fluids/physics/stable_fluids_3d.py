"""
3D Stable Fluids time-stepping engine

Each step applies, in order:

    w1 = u + dt f(t)                 forcing
    w2 = w1(p(x, -dt))               semi-Lagrangian self-advection
    w3 = FFT(w2)
    w4 = exp(-dt nu |k|^2) w3        diffusion as a low-pass filter
    w5 = w4 - (w4 . k_hat) k_hat     divergence-free projection
    u  = Re(IFFT(w5))                commit

The Fourier transform implies periodic boundaries on the unit cube.
"""

import logging
from typing import Optional

from ..core.config import SimulationConfig
from ..core.errors import ConfigurationError, InvariantViolation, NumericalInstabilityError
from ..geometry.periodic_grid import PeriodicGrid3D
from ..numerics.advection import SemiLagrangianAdvector
from ..numerics.spectral_grid import SpectralGrid3D
from ..numerics.spectral_methods_3d import SpectralSolver3D
from ..utils.progress import progress as progress_bar
from .fluid_state_3d import VelocityField3D
from .forcing import ForcingField

logger = logging.getLogger(__name__)


class StableFluidsSolver3D:
    """
    Owns the current velocity field and advances it one step at a time.

    The grid, spectral grid and forcing are built once from the
    configuration and never change. The velocity starts at zero; every
    step builds a new field that replaces the previous one.
    """

    def __init__(self, config: SimulationConfig,
                 initial_velocity: Optional[VelocityField3D] = None):
        """
        Initialize the solver

        Args:
            config: Run configuration, validated here
            initial_velocity: Starting field, zero everywhere by default

        Raises:
            ConfigurationError: If any parameter is invalid
        """
        self.config = config.validate()
        self.time_step = config.time_step

        self.grid = PeriodicGrid3D(config.n_points)
        self.spectral_grid = SpectralGrid3D.from_config(
            config.n_points, config.time_step, config.viscosity
        )
        self.forcing = ForcingField(self.grid, config.forcing)
        self.advector = SemiLagrangianAdvector(self.grid, config.time_step)
        self.spectral_solver = SpectralSolver3D(self.spectral_grid, workers=config.fft_workers)

        if initial_velocity is None:
            self.velocity = VelocityField3D.zeros(self.grid.shape)
        else:
            for component in initial_velocity.components:
                self.grid.check_shape(component, 'initial_velocity')
            self.velocity = initial_velocity.copy()
        self.step_index = 0

        logger.info(
            f"Stable Fluids solver: N={config.n_points}, h={self.grid.spacing:.5f}, "
            f"nu={config.viscosity}, dt={config.time_step}, steps={config.n_time_steps}, "
            f"{self.forcing.n_forced_points} forced grid points"
        )

    @property
    def time(self) -> float:
        """Simulated time after the committed steps"""
        return self.step_index * self.time_step

    def step(self) -> VelocityField3D:
        """
        Advance by one time step and commit the result

        Returns:
            The new current velocity

        Raises:
            NumericalInstabilityError: If the result is not finite; the
                previous velocity is kept in that case.
        """
        time_current = self.step_index * self.time_step

        forced = self.forcing.apply(self.velocity, time_current, self.time_step)
        advected = self.advector.advect(forced)
        projected = self.spectral_solver.diffuse_and_project(advected)

        if not projected.is_finite():
            raise NumericalInstabilityError(
                f"Non-finite velocity at step {self.step_index + 1} (t={time_current})"
            )

        self.velocity = projected
        self.step_index += 1

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"step {self.step_index}: t={time_current:.4f}, "
                f"prefactor={self.forcing.prefactor(time_current):.3f}, "
                f"E={projected.kinetic_energy(self.grid.spacing**3):.6e}, "
                f"max|u|={projected.magnitude().max():.4e}"
            )
        return projected

    def run(self, sink=None, n_steps: Optional[int] = None,
            progress: bool = False) -> VelocityField3D:
        """
        Run a fixed number of steps, handing every committed field to a sink

        Args:
            sink: Object with emit(step_index, elapsed_time, velocity) and
                close(); receives a copy of each committed field
            n_steps: Number of steps, defaults to config.n_time_steps
            progress: Show a progress bar

        Returns:
            Final velocity field
        """
        if n_steps is None:
            n_steps = self.config.n_time_steps
        if n_steps < 0:
            raise ConfigurationError(f"n_steps must be >= 0, got {n_steps}")

        logger.info(f"Timestepping {n_steps} steps from t={self.time}")
        try:
            for _ in progress_bar(range(n_steps), enabled=progress):
                elapsed_time = self.time
                try:
                    velocity = self.step()
                except InvariantViolation:
                    logger.error(f"Aborting run at step {self.step_index + 1}")
                    raise
                if sink is not None:
                    sink.emit(self.step_index, elapsed_time, velocity.copy())
        finally:
            if sink is not None:
                sink.close()

        logger.info(f"Finished at step {self.step_index}, t={self.time}")
        return self.velocity
