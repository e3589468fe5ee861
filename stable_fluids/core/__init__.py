"""Configuration and error types"""

from .errors import (
    StableFluidsError,
    ConfigurationError,
    InvariantViolation,
    NumericalInstabilityError,
)
from .config import (
    SimulationConfig,
    ForcingConfig,
    ForcePatch,
    OutputConfig,
    load_config,
    save_config,
    get_preset,
    available_presets,
)

__all__ = [
    'StableFluidsError',
    'ConfigurationError',
    'InvariantViolation',
    'NumericalInstabilityError',
    'SimulationConfig',
    'ForcingConfig',
    'ForcePatch',
    'OutputConfig',
    'load_config',
    'save_config',
    'get_preset',
    'available_presets',
]
