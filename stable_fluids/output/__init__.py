"""Snapshot sinks"""

from .sinks import VelocitySink, TrajectoryRecorder, VTKSeriesWriter, SinkGroup

__all__ = [
    'VelocitySink',
    'TrajectoryRecorder',
    'VTKSeriesWriter',
    'SinkGroup'
]
