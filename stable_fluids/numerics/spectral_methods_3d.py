"""
Spectral diffusion and divergence-free projection on the periodic unit cube
"""

import numpy as np
from scipy.fft import fftn, ifftn
from .spectral_grid import SpectralGrid3D
from ..physics.fluid_state_3d import VelocityField3D

_AXES = (-3, -2, -1)


class SpectralSolver3D:
    """
    Fourier-domain part of the Stable Fluids step.

    Diffusion is the exact solution of the linear viscous term, applied as
    a low-pass filter. The projection removes, per mode, the component of
    the spectrum along the wavevector, which leaves the solenoidal part.
    """

    def __init__(self, spectral_grid: SpectralGrid3D, workers: int = 1):
        """
        Initialize 3D spectral solver

        Args:
            spectral_grid: Precomputed wavenumbers and decay factors
            workers: Threads passed to scipy.fft
        """
        self.spectral_grid = spectral_grid
        self.workers = workers

        # (3, N, N, N) unit wavevector, zero at the k=0 mode
        self._k_hat = spectral_grid.normalized
        self._k_hat.flags.writeable = False

    def forward(self, velocity: VelocityField3D) -> np.ndarray:
        """
        Transform all three components in one batched 3D FFT.

        Returns:
            Complex spectrum of shape (3, N, N, N)
        """
        return fftn(velocity.stacked(), axes=_AXES, workers=self.workers)

    def inverse(self, spectrum: np.ndarray) -> VelocityField3D:
        """Inverse transform, keeping the real part"""
        return VelocityField3D.from_stacked(
            np.real(ifftn(spectrum, axes=_AXES, workers=self.workers))
        )

    def diffuse(self, spectrum: np.ndarray) -> np.ndarray:
        return spectrum * self.spectral_grid.decay

    def pseudo_pressure(self, spectrum: np.ndarray) -> np.ndarray:
        """
        q = v_hat . k_hat, the (scaled) divergence in frequency space
        """
        return np.sum(spectrum * self._k_hat, axis=0)

    def project(self, spectrum: np.ndarray) -> np.ndarray:
        """
        Project a spectrum onto the divergence-free subspace

        v_hat' = v_hat - (v_hat . k_hat) k_hat. The zero mode has k_hat = 0
        and is returned unchanged.
        """
        pressure = self.pseudo_pressure(spectrum)
        return spectrum - pressure[np.newaxis] * self._k_hat

    def diffuse_and_project(self, velocity: VelocityField3D) -> VelocityField3D:
        """
        Diffuse and project a velocity field.

        Args:
            velocity: Advected velocity

        Returns:
            Diffused, divergence-free velocity
        """
        spectrum = self.forward(velocity)
        spectrum = self.diffuse(spectrum)
        spectrum = self.project(spectrum)
        return self.inverse(spectrum)

    def divergence(self, velocity: VelocityField3D) -> np.ndarray:
        """
        Spectral divergence of a velocity field on the unit cube
        """
        spectrum = self.forward(velocity)
        kx, ky, kz = self.spectral_grid.wavenumbers
        div_hat = 2j * np.pi * (kx * spectrum[0] + ky * spectrum[1] + kz * spectrum[2])
        return np.real(ifftn(div_hat, workers=self.workers))
