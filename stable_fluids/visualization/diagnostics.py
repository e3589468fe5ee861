"""
Diagnostic history and plots for Stable Fluids runs
"""

import json

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
from typing import List, Dict, Optional, Union

from ..geometry.periodic_grid import PeriodicGrid3D
from ..numerics.spectral_methods_3d import SpectralSolver3D
from ..output.sinks import VelocitySink
from ..physics.fluid_state_3d import VelocityField3D

HISTORY_KEYS = (
    'step',
    'time',
    'energy',
    'max_velocity',
    'max_divergence',
    'momentum_x',
    'momentum_y',
    'momentum_z',
)


class DiagnosticPlotter(VelocitySink):
    """
    Record scalar diagnostics of every emitted step and plot them.

    Can be passed to the solver directly as a sink.
    """

    def __init__(self, grid: PeriodicGrid3D,
                 spectral_solver: Optional[SpectralSolver3D] = None):
        """
        Initialize diagnostic plotter

        Args:
            grid: Grid the fields live on
            spectral_solver: Used for the divergence diagnostic, skipped if None
        """
        self.grid = grid
        self.spectral_solver = spectral_solver
        self.history: Dict[str, List[float]] = {key: [] for key in HISTORY_KEYS}

    def emit(self, step_index: int, elapsed_time: float, velocity: VelocityField3D):
        self.update(step_index, elapsed_time, velocity)

    def update(self, step_index: int, elapsed_time: float, velocity: VelocityField3D):
        """
        Update diagnostic history with one committed field
        """
        self.history['step'].append(step_index)
        self.history['time'].append(elapsed_time)
        self.history['energy'].append(velocity.kinetic_energy(self.grid.spacing**3))
        self.history['max_velocity'].append(float(np.max(velocity.magnitude())))

        if self.spectral_solver is not None:
            divergence = self.spectral_solver.divergence(velocity)
            self.history['max_divergence'].append(float(np.max(np.abs(divergence))))
        else:
            self.history['max_divergence'].append(float('nan'))

        px, py, pz = velocity.momentum()
        self.history['momentum_x'].append(px)
        self.history['momentum_y'].append(py)
        self.history['momentum_z'].append(pz)

    def plot_time_series(self) -> plt.Figure:
        """
        Plot time series of diagnostic quantities

        Returns:
            Figure object
        """
        fig, axes = plt.subplots(2, 2, figsize=(12, 8))
        axes = axes.flatten()

        t = np.array(self.history['time'])

        ax = axes[0]
        ax.plot(t, self.history['energy'], 'b-', linewidth=2)
        ax.set_xlabel('Time')
        ax.set_ylabel('Energy')
        ax.set_title('Kinetic Energy')
        ax.grid(True, alpha=0.3)

        ax = axes[1]
        ax.plot(t, self.history['max_velocity'], 'g-', linewidth=2)
        ax.set_xlabel('Time')
        ax.set_ylabel('Max |u|')
        ax.set_title('Maximum Velocity')
        ax.grid(True, alpha=0.3)

        ax = axes[2]
        divergence = np.array(self.history['max_divergence'])
        if np.any(divergence > 0):
            ax.semilogy(t, divergence, 'm-', linewidth=2)
        else:
            ax.plot(t, divergence, 'm-', linewidth=2)
        ax.set_xlabel('Time')
        ax.set_ylabel('Max |div u|')
        ax.set_title('Maximum Divergence')
        ax.grid(True, alpha=0.3)

        ax = axes[3]
        for name, style in (('momentum_x', 'r-'), ('momentum_y', 'c-'), ('momentum_z', 'k-')):
            ax.plot(t, self.history[name], style, linewidth=2, label=name[-1])
        ax.set_xlabel('Time')
        ax.set_ylabel('Sum of u_i')
        ax.set_title('Total Momentum')
        ax.grid(True, alpha=0.3)
        ax.legend()

        plt.tight_layout()
        return fig

    def save_diagnostics(self, filename: Union[str, Path]):
        """
        Write the history as JSON, one list per diagnostic

        NaN divergences (no spectral solver) are stored as null.
        """
        data = {
            key: [None if np.isnan(v) else float(v) for v in values]
            for key, values in self.history.items()
        }
        Path(filename).write_text(json.dumps(data, indent=2))

    def load_diagnostics(self, filename: Union[str, Path]):
        """
        Replace the history with one written by save_diagnostics

        Raises:
            ValueError: If the file does not hold exactly the history keys
                or its lists differ in length
        """
        data = json.loads(Path(filename).read_text())
        expected = set(HISTORY_KEYS)
        if not isinstance(data, dict) or set(data) != expected:
            found = sorted(data) if isinstance(data, dict) else type(data).__name__
            raise ValueError(
                f"{filename}: expected diagnostics {sorted(expected)}, got {found}"
            )
        lengths = {len(values) for values in data.values()}
        if len(lengths) > 1:
            raise ValueError(f"{filename}: diagnostic histories differ in length")

        self.history = {
            key: [float('nan') if v is None else v for v in data[key]]
            for key in HISTORY_KEYS
        }
        self.history['step'] = [int(v) for v in self.history['step']]
