"""
Run configuration for the Stable Fluids solver

Parameters are plain dataclasses that can be loaded from and written to
YAML. Every dataclass has a ``validate`` method; ``SimulationConfig.validate``
checks the whole tree and is called by the solver before any stepping.
"""

import copy
import math
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from .errors import ConfigurationError


AXIS_NAMES = ('x', 'y', 'z')


def _as_triple(value: Any, name: str) -> Tuple[float, float, float]:
    try:
        triple = tuple(float(v) for v in value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a sequence of three numbers") from exc
    if len(triple) != 3:
        raise ConfigurationError(f"{name} must have exactly three entries, got {len(triple)}")
    return triple


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc


def _check_keys(cls, data: Dict[str, Any]):
    allowed = {f.name for f in fields(cls)}
    unknown = set(data) - allowed
    if unknown:
        raise ConfigurationError(
            f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}"
        )


@dataclass
class ForcePatch:
    """
    Axis-aligned box in the unit cube where the force acts

    Attributes:
        lower: (x, y, z) lower corner, exclusive
        upper: (x, y, z) upper corner, exclusive
    """
    lower: Tuple[float, float, float]
    upper: Tuple[float, float, float]

    def __post_init__(self):
        self.lower = _as_triple(self.lower, 'lower')
        self.upper = _as_triple(self.upper, 'upper')

    def validate(self):
        for axis, (lo, hi) in enumerate(zip(self.lower, self.upper)):
            if not lo < hi:
                raise ConfigurationError(
                    f"Force patch is empty along {AXIS_NAMES[axis]}: "
                    f"lower={lo} must be < upper={hi}"
                )

    def overlaps(self, other: 'ForcePatch') -> bool:
        """Open boxes overlap when their intervals overlap on every axis"""
        return all(
            lo1 < hi2 and lo2 < hi1
            for lo1, hi1, lo2, hi2 in zip(self.lower, self.upper, other.lower, other.upper)
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ForcePatch':
        _check_keys(cls, data)
        return cls(**data)


@dataclass
class ForcingConfig:
    """
    Two equal and opposite force patches acting on one velocity component

    Attributes:
        magnitude: Force density A (+A in the first patch, -A in the second)
        axis: Velocity component the force acts on ('x', 'y', 'z' or 0..2)
        patches: The two disjoint boxes
    """
    magnitude: float = 200.0
    axis: Union[str, int] = 'x'
    patches: List[ForcePatch] = field(default_factory=lambda: [
        ForcePatch((0.2, 0.46, 0.46), (0.4, 0.53, 0.53)),
        ForcePatch((0.7, 0.49, 0.49), (0.9, 0.56, 0.56)),
    ])

    def __post_init__(self):
        self.patches = [
            p if isinstance(p, ForcePatch) else ForcePatch.from_dict(p)
            for p in self.patches
        ]

    @property
    def axis_index(self) -> int:
        if isinstance(self.axis, str):
            if self.axis.lower() not in AXIS_NAMES:
                raise ConfigurationError(f"Unknown force axis: {self.axis!r}")
            return AXIS_NAMES.index(self.axis.lower())
        if self.axis not in (0, 1, 2):
            raise ConfigurationError(f"Force axis must be 0, 1 or 2, got {self.axis}")
        return int(self.axis)

    def validate(self):
        self.magnitude = magnitude = _as_float(self.magnitude, 'Force magnitude')
        if not math.isfinite(magnitude):
            raise ConfigurationError("Force magnitude must be finite")
        self.axis_index  # raises on an unknown axis
        if len(self.patches) != 2:
            raise ConfigurationError(
                f"Forcing needs exactly two patches, got {len(self.patches)}"
            )
        for patch in self.patches:
            patch.validate()
        if self.patches[0].overlaps(self.patches[1]):
            raise ConfigurationError("Force patches must be disjoint")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ForcingConfig':
        _check_keys(cls, data)
        return cls(**data)


@dataclass
class OutputConfig:
    """
    Where and how per-step snapshots are written

    Attributes:
        directory: Output directory
        basename: Prefix of the per-step VTK files
        collection: Name of the time series manifest (.pvd)
        write_vtk: Write VTK snapshots at all
    """
    directory: str = 'output'
    basename: str = 'timestep'
    collection: str = 'transient_vector'
    write_vtk: bool = True

    def validate(self):
        if not self.basename:
            raise ConfigurationError("Output basename must not be empty")
        if not self.collection:
            raise ConfigurationError("Output collection name must not be empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'OutputConfig':
        _check_keys(cls, data)
        return cls(**data)


@dataclass
class SimulationConfig:
    """
    All constants of a run

    Attributes:
        n_points: Grid points per axis (N >= 2)
        viscosity: Kinematic viscosity (>= 0)
        time_step: Time step length (> 0)
        n_time_steps: Number of steps (>= 1)
        forcing: Force patch geometry
        output: Snapshot output settings
        fft_workers: Threads used by scipy.fft for the batched transforms
    """
    n_points: int = 44
    viscosity: float = 0.001
    time_step: float = 0.02
    n_time_steps: int = 160
    forcing: ForcingConfig = field(default_factory=ForcingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    fft_workers: int = 1

    def validate(self) -> 'SimulationConfig':
        """
        Check every parameter, raising ConfigurationError on the first problem

        Returns:
            self, so calls can be chained
        """
        if isinstance(self.n_points, bool) or not isinstance(self.n_points, int):
            raise ConfigurationError(f"n_points must be an integer, got {self.n_points!r}")
        if self.n_points < 2:
            raise ConfigurationError(f"n_points must be >= 2, got {self.n_points}")
        self.time_step = _as_float(self.time_step, 'time_step')
        if not self.time_step > 0:
            raise ConfigurationError(f"time_step must be > 0, got {self.time_step}")
        self.viscosity = _as_float(self.viscosity, 'viscosity')
        if not self.viscosity >= 0:
            raise ConfigurationError(f"viscosity must be >= 0, got {self.viscosity}")
        if isinstance(self.n_time_steps, bool) or not isinstance(self.n_time_steps, int):
            raise ConfigurationError(
                f"n_time_steps must be an integer, got {self.n_time_steps!r}"
            )
        if self.n_time_steps < 1:
            raise ConfigurationError(f"n_time_steps must be >= 1, got {self.n_time_steps}")
        if (isinstance(self.fft_workers, bool) or not isinstance(self.fft_workers, int)
                or self.fft_workers == 0):
            raise ConfigurationError(
                f"fft_workers must be a non-zero integer, got {self.fft_workers!r}"
            )
        self.forcing.validate()
        self.output.validate()
        return self

    @property
    def spacing(self) -> float:
        return 1.0 / (self.n_points - 1)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        _check_keys(cls, data)
        data = dict(data)
        if 'forcing' in data and not isinstance(data['forcing'], ForcingConfig):
            data['forcing'] = ForcingConfig.from_dict(data['forcing'])
        if 'output' in data and not isinstance(data['output'], OutputConfig):
            data['output'] = OutputConfig.from_dict(data['output'])
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for patch in data['forcing']['patches']:
            patch['lower'] = list(patch['lower'])
            patch['upper'] = list(patch['upper'])
        return data


def load_config(path: Union[str, Path]) -> SimulationConfig:
    """
    Load and validate a configuration from a YAML file

    A ``preset`` key selects a named preset whose values are then
    overridden by the other keys of the file.

    Args:
        path: YAML file

    Returns:
        Validated configuration
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping")

    preset = data.pop('preset', None)
    if preset is not None:
        base = get_preset(preset).to_dict()
        for key, value in data.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                base[key].update(value)
            else:
                base[key] = value
        data = base

    return SimulationConfig.from_dict(data).validate()


def save_config(config: SimulationConfig, path: Union[str, Path]):
    """Write a configuration as YAML"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)


_PRESETS: Dict[str, SimulationConfig] = {
    # Longer, stronger forcing on a 44^3 grid
    'reference': SimulationConfig(
        n_points=44,
        viscosity=0.001,
        time_step=0.02,
        n_time_steps=160,
        forcing=ForcingConfig(
            magnitude=200.0,
            axis='x',
            patches=[
                ForcePatch((0.2, 0.46, 0.46), (0.4, 0.53, 0.53)),
                ForcePatch((0.7, 0.49, 0.49), (0.9, 0.56, 0.56)),
            ],
        ),
    ),
    'classic': SimulationConfig(
        n_points=42,
        viscosity=0.0001,
        time_step=0.02,
        n_time_steps=150,
        forcing=ForcingConfig(
            magnitude=100.0,
            axis='x',
            patches=[
                ForcePatch((0.2, 0.45, 0.45), (0.3, 0.52, 0.52)),
                ForcePatch((0.7, 0.48, 0.48), (0.8, 0.55, 0.55)),
            ],
        ),
    ),
}


def available_presets() -> List[str]:
    return sorted(_PRESETS)


def get_preset(name: str) -> SimulationConfig:
    """
    Return a copy of a named preset

    Args:
        name: One of ``available_presets()``
    """
    try:
        return copy.deepcopy(_PRESETS[name])
    except KeyError:
        raise ConfigurationError(
            f"Unknown preset {name!r}, choose from {', '.join(available_presets())}"
        ) from None
