"""
Consumers of per-step velocity snapshots

The solver calls ``emit(step_index, elapsed_time, velocity)`` once per
committed step and ``close()`` when the run ends. The field it passes is a
private copy, so sinks may keep it without copying again.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np
from pyevtk.hl import gridToVTK
from pyevtk.vtk import VtkGroup

from ..geometry.periodic_grid import PeriodicGrid3D
from ..physics.fluid_state_3d import VelocityField3D

logger = logging.getLogger(__name__)


class VelocitySink:
    """Base class for snapshot consumers"""

    def emit(self, step_index: int, elapsed_time: float, velocity: VelocityField3D):
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class TrajectoryRecorder(VelocitySink):
    """
    Keep every snapshot in memory
    """

    def __init__(self):
        self.steps: List[int] = []
        self.times: List[float] = []
        self.velocities: List[VelocityField3D] = []

    def emit(self, step_index: int, elapsed_time: float, velocity: VelocityField3D):
        self.steps.append(step_index)
        self.times.append(elapsed_time)
        self.velocities.append(velocity)

    def __len__(self) -> int:
        return len(self.velocities)

    def __iter__(self) -> Iterator[Tuple[int, float, VelocityField3D]]:
        return iter(zip(self.steps, self.times, self.velocities))

    def component_history(self, axis: int) -> np.ndarray:
        """Stack one component over time, shape (n_steps, N, N, N)"""
        return np.stack([v.components[axis] for v in self.velocities])


class VTKSeriesWriter(VelocitySink):
    """
    Write one rectilinear VTK file per step plus a ParaView time
    collection (.pvd) that references them by elapsed time.
    """

    def __init__(self, grid: PeriodicGrid3D, directory: Union[str, Path] = 'output',
                 basename: str = 'timestep', collection: str = 'transient_vector'):
        """
        Args:
            grid: Grid the snapshots are sampled on
            directory: Output directory, created if missing
            basename: Per-step file prefix, files are <basename>_<step>
            collection: Name of the .pvd manifest
        """
        self.grid = grid
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.basename = basename
        self.collection_path = self.directory / collection
        self.files: List[Tuple[float, str]] = []
        self._closed = False

    def emit(self, step_index: int, elapsed_time: float, velocity: VelocityField3D):
        x, y, z = self.grid.intervals
        path = self.directory / f"{self.basename}_{step_index}"
        filename = gridToVTK(
            str(path), np.ascontiguousarray(x), np.ascontiguousarray(y), np.ascontiguousarray(z),
            pointData={
                'velocity': tuple(np.ascontiguousarray(c) for c in velocity.components),
            },
        )
        self.files.append((elapsed_time, filename))
        logger.debug(f"Wrote step {step_index} (t={elapsed_time:.4f}) to {filename}")

    def close(self) -> Optional[Path]:
        """
        Write the time collection manifest

        Returns:
            Path of the .pvd file, None if nothing was written
        """
        if self._closed or not self.files:
            return None
        group = VtkGroup(str(self.collection_path))
        for elapsed_time, filename in self.files:
            group.addFile(filepath=filename, sim_time=elapsed_time)
        group.save()
        self._closed = True

        manifest = self.collection_path.with_suffix('.pvd')
        logger.info(f"Wrote {len(self.files)} VTK snapshots, collection {manifest}")
        return manifest


class SinkGroup(VelocitySink):
    """Forward every snapshot to several sinks"""

    def __init__(self, *sinks: VelocitySink):
        self.sinks = list(sinks)

    def emit(self, step_index: int, elapsed_time: float, velocity: VelocityField3D):
        for sink in self.sinks:
            sink.emit(step_index, elapsed_time, velocity)

    def close(self):
        """Close every sink, then re-raise the first error any of them raised"""
        error = None
        for sink in self.sinks:
            try:
                sink.close()
            except Exception as exc:
                logger.error(f"Failed to close {type(sink).__name__}: {exc}")
                if error is None:
                    error = exc
        if error is not None:
            raise error
