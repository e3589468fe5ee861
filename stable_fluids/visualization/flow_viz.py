"""
Slice plots of 3D velocity fields
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Tuple

from ..geometry.periodic_grid import PeriodicGrid3D
from ..physics.fluid_state_3d import VelocityField3D

_AXIS_LABELS = ('x', 'y', 'z')


class FlowVisualizer:
    """
    Visualize a velocity field on planar slices of the unit cube
    """

    def __init__(self, grid: PeriodicGrid3D, figsize: Tuple[int, int] = (15, 5)):
        """
        Initialize flow visualizer

        Args:
            grid: Periodic grid
            figsize: Figure size
        """
        self.grid = grid
        self.figsize = figsize

    def _slice(self, array: np.ndarray, axis: int, index: int) -> np.ndarray:
        return np.take(array, index, axis=axis)

    def plot_velocity_slice(self, velocity: VelocityField3D, axis: int = 2,
                            index: Optional[int] = None,
                            time: Optional[float] = None,
                            show_vectors: bool = True) -> plt.Figure:
        """
        Plot velocity magnitude and in-plane components on one slice

        Args:
            velocity: Velocity field
            axis: Axis normal to the slice (0=x, 1=y, 2=z)
            index: Slice index, middle of the grid by default
            time: Simulated time shown in the titles
            show_vectors: Overlay in-plane velocity vectors

        Returns:
            Figure object
        """
        if index is None:
            index = self.grid.n_points // 2
        in_plane = [a for a in range(3) if a != axis]
        coords = [self._slice(self.grid.coordinates[a], axis, index) for a in in_plane]
        components = [self._slice(velocity.components[a], axis, index) for a in in_plane]
        magnitude = self._slice(velocity.magnitude(), axis, index)

        fig, axes = plt.subplots(1, 3, figsize=self.figsize)
        suffix = f", t={time:.2f}" if time is not None else ''
        position = self.grid.interval[index]

        ax = axes[0]
        im = ax.contourf(coords[0], coords[1], magnitude, levels=20, cmap='viridis')
        if show_vectors:
            skip = max(1, self.grid.n_points // 20)
            ax.quiver(coords[0][::skip, ::skip], coords[1][::skip, ::skip],
                      components[0][::skip, ::skip], components[1][::skip, ::skip],
                      color='white', alpha=0.7)
        ax.set_title(f'|u| at {_AXIS_LABELS[axis]}={position:.2f}{suffix}')
        plt.colorbar(im, ax=ax)

        for ax, component, a in zip(axes[1:], components, in_plane):
            limit = max(float(np.max(np.abs(component))), 1e-12)
            im = ax.contourf(coords[0], coords[1], component, levels=20,
                             cmap='RdBu_r', vmin=-limit, vmax=limit)
            ax.set_title(f'u_{_AXIS_LABELS[a]}{suffix}')
            plt.colorbar(im, ax=ax)

        for ax in axes:
            ax.set_xlabel(_AXIS_LABELS[in_plane[0]])
            ax.set_ylabel(_AXIS_LABELS[in_plane[1]])
            ax.set_aspect('equal')

        plt.tight_layout()
        return fig
