"""
Per-level tuning parameters.

Every threshold, gain and smoothing rate used by a mapping level lives in a
dataclass of its own so it can be tuned independently. Values are validated
when a set is constructed or replaced, never during a frame.
"""

import math
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict


def _number(name: str, value: Any) -> float:
    """Coerce to a finite float, raising ValueError for anything else."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


def _check_unit(name: str, value: Any) -> float:
    number = _number(name, value)
    if not 0.0 <= number <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value!r}")
    return number


def _check_non_negative(name: str, value: Any) -> float:
    number = _number(name, value)
    if number < 0:
        raise ValueError(f"{name} must be >= 0, got {value!r}")
    return number


@dataclass
class DirectParams:
    """Level 0: direct threshold."""
    threshold: float = 0.1

    def __post_init__(self):
        self.threshold = _check_unit("threshold", self.threshold)


@dataclass
class OpacityParams:
    """Level 1: opacity. The gain is applied by renderers, not the engine."""
    opacity_gain: float = 8.0

    def __post_init__(self):
        self.opacity_gain = _check_non_negative("opacity_gain", self.opacity_gain)


@dataclass
class SmoothedParams:
    """Level 2: exponentially smoothed threshold."""
    smoothing: float = 0.125  # lerp factor per frame, in (0, 1]
    threshold: float = 0.1

    def __post_init__(self):
        self.smoothing = _number("smoothing", self.smoothing)
        if not 0.0 < self.smoothing <= 1.0:
            raise ValueError(f"smoothing must be in (0, 1], got {self.smoothing!r}")
        self.threshold = _check_unit("threshold", self.threshold)


@dataclass
class ProbabilisticParams:
    """Level 3: per-frame random draw weighted by the sample."""
    probability_scale: float = 0.5

    def __post_init__(self):
        self.probability_scale = _check_non_negative("probability_scale", self.probability_scale)


@dataclass
class EntropyParams:
    """Level 4: threshold on a randomly chosen sample."""
    threshold: float = 0.1

    def __post_init__(self):
        self.threshold = _check_unit("threshold", self.threshold)


@dataclass
class RuleParams:
    """Level 5: default rule thresholds, ripple speed and decay action."""
    loud_threshold: float = 0.7
    quiet_threshold: float = 0.01
    flip_min: float = 0.4
    flip_max: float = 0.6
    flip_chance: float = 0.9
    ripple_speed: int = 1
    decay_factor: float = 0.9
    decay_floor: float = 0.05

    def __post_init__(self):
        for name in ("loud_threshold", "quiet_threshold", "flip_min",
                     "flip_max", "flip_chance", "decay_factor"):
            setattr(self, name, _check_unit(name, getattr(self, name)))
        if self.flip_min > self.flip_max:
            raise ValueError("flip_min must not exceed flip_max")
        speed = _check_non_negative("ripple_speed", self.ripple_speed)
        if not speed.is_integer():
            raise ValueError(f"ripple_speed must be a non-negative integer, got {self.ripple_speed!r}")
        self.ripple_speed = int(speed)
        self.decay_floor = _check_non_negative("decay_floor", self.decay_floor)


@dataclass
class NeighborhoodParams:
    """Level 6: sample thresholds gated by the live neighbor count."""
    active_threshold: float = 0.01
    inactive_threshold: float = 0.01
    neighbor_limit: float = 2.5

    def __post_init__(self):
        self.active_threshold = _check_unit("active_threshold", self.active_threshold)
        self.inactive_threshold = _check_unit("inactive_threshold", self.inactive_threshold)
        self.neighbor_limit = _check_non_negative("neighbor_limit", self.neighbor_limit)


@dataclass
class GridParams:
    """
    Container holding one parameter set per level.

    Attribute names match the lower-case ``Level`` member names so a level
    can look up its own set with ``getattr(params, level.key)``.
    """
    direct: DirectParams = field(default_factory=DirectParams)
    opacity: OpacityParams = field(default_factory=OpacityParams)
    smoothed: SmoothedParams = field(default_factory=SmoothedParams)
    probabilistic: ProbabilisticParams = field(default_factory=ProbabilisticParams)
    entropy: EntropyParams = field(default_factory=EntropyParams)
    rules: RuleParams = field(default_factory=RuleParams)
    neighborhood: NeighborhoodParams = field(default_factory=NeighborhoodParams)

    def for_key(self, key: str) -> Any:
        if key not in self.keys():
            raise KeyError(f"Unknown parameter set: {key!r}")
        return getattr(self, key)

    def get(self, key: str, name: str) -> Any:
        params = self.for_key(key)
        if name not in _field_names(params):
            raise KeyError(f"Unknown parameter {name!r} for {key}. "
                           f"Available: {sorted(_field_names(params))}")
        return getattr(params, name)

    def set(self, key: str, name: str, value: Any):
        """Replace one parameter; the whole set is re-validated."""
        params = self.for_key(key)
        if name not in _field_names(params):
            raise KeyError(f"Unknown parameter {name!r} for {key}. "
                           f"Available: {sorted(_field_names(params))}")
        setattr(self, key, replace(params, **{name: value}))

    @classmethod
    def keys(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Any]]) -> "GridParams":
        """Build from ``{"<level key>": {field: value}}``, defaults elsewhere."""
        unknown = set(data) - set(cls.keys())
        if unknown:
            raise ValueError(f"Unknown parameter sets: {sorted(unknown)}")

        kwargs = {}
        for f in fields(cls):
            overrides = data.get(f.name)
            if overrides is None:
                continue
            params_cls = f.default_factory
            bad = set(overrides) - {pf.name for pf in fields(params_cls)}
            if bad:
                raise ValueError(f"Unknown parameters for {f.name}: {sorted(bad)}")
            kwargs[f.name] = params_cls(**overrides)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return asdict(self)


def _field_names(params) -> set:
    return {f.name for f in fields(params)}
