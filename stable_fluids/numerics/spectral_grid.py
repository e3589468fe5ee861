"""
Precomputed wavenumber and viscous decay fields
"""

import numpy as np
from dataclasses import dataclass
from scipy.fft import fftfreq
from typing import Tuple

from ..core.errors import ConfigurationError


@dataclass(frozen=True, eq=False)
class SpectralGrid3D:
    """
    Frequency-space quantities shared by every time step

    Attributes:
        wavenumbers_1d: fftfreq(N) * N, integer cycles over the unit domain
        kx, ky, kz: Wavenumber grids
        norm: |k| with the zero mode replaced by 1.0
        normalized_x, normalized_y, normalized_z: k / norm (zero at k = 0)
        decay: exp(-dt * nu * |k|^2), equal to 1.0 at k = 0
    """
    wavenumbers_1d: np.ndarray
    kx: np.ndarray
    ky: np.ndarray
    kz: np.ndarray
    norm: np.ndarray
    normalized_x: np.ndarray
    normalized_y: np.ndarray
    normalized_z: np.ndarray
    decay: np.ndarray

    @classmethod
    def from_config(cls, n_points: int, time_step: float, viscosity: float) -> 'SpectralGrid3D':
        """
        Build the spectral grid for an N^3 periodic lattice

        Args:
            n_points: Grid points per axis
            time_step: Time step length
            viscosity: Kinematic viscosity

        Returns:
            Read-only spectral grid
        """
        if n_points < 2:
            raise ConfigurationError(f"n_points must be >= 2, got {n_points}")
        if not time_step > 0:
            raise ConfigurationError(f"time_step must be > 0, got {time_step}")
        if not viscosity >= 0:
            raise ConfigurationError(f"viscosity must be >= 0, got {viscosity}")

        wavenumbers_1d = fftfreq(n_points) * n_points
        kx, ky, kz = np.meshgrid(
            wavenumbers_1d, wavenumbers_1d, wavenumbers_1d, indexing='ij'
        )
        norm = np.sqrt(kx**2 + ky**2 + kz**2)

        # Decay uses the raw norm so the mean flow is never damped
        decay = np.exp(-time_step * viscosity * norm**2)

        norm[norm == 0.0] = 1.0
        normalized_x = kx / norm
        normalized_y = ky / norm
        normalized_z = kz / norm

        arrays = (wavenumbers_1d, kx, ky, kz, norm,
                  normalized_x, normalized_y, normalized_z, decay)
        for array in arrays:
            array.flags.writeable = False
        return cls(*arrays)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.kx.shape

    @property
    def wavenumbers(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.kx, self.ky, self.kz

    @property
    def normalized(self) -> np.ndarray:
        """Unit wavevector as a (3, N, N, N) array"""
        return np.stack((self.normalized_x, self.normalized_y, self.normalized_z))
