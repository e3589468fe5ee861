"""Periodic grid geometry"""

from .periodic_grid import PeriodicGrid3D

__all__ = [
    'PeriodicGrid3D'
]
