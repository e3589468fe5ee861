"""Utility functions"""

from .initial_conditions import (
    zero_velocity,
    taylor_green_vortex,
    random_velocity
)
from .logging import setup_logging, get_logger
from .progress import progress

__all__ = [
    'zero_velocity',
    'taylor_green_vortex',
    'random_velocity',
    'setup_logging',
    'get_logger',
    'progress'
]
