"""
Error types raised by the Stable Fluids solver
"""


class StableFluidsError(Exception):
    """Base class for all solver errors"""


class ConfigurationError(StableFluidsError, ValueError):
    """
    Invalid run parameters.

    Raised while building the configuration or the solver components,
    always before the first time step is taken.
    """


class InvariantViolation(StableFluidsError, RuntimeError):
    """
    An internal invariant of the time step was broken.

    Examples are backtraced positions that end up outside the unit cube
    after wrapping, or fields whose shape does not match the grid. These
    are defects, not recoverable conditions, so the run is aborted.
    """


class NumericalInstabilityError(InvariantViolation):
    """A time step produced non-finite velocities"""
