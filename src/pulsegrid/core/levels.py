"""
Mapping levels.

Each level is a pure function of ``(cell, frame, neighbors)`` returning the
cell's new ``(value, state)``. The grid picks the level's mapper once per
frame and applies it to every cell, so levels never branch on one another.

- DIRECT:        state = sample > threshold
- OPACITY:       value = sample, always on (renderer maps value to alpha)
- SMOOTHED:      value lerps toward the sample, state = value > threshold
- PROBABILISTIC: on with probability sample * scale
- ENTROPY:       threshold on a random sample, decorrelated from position
- RULES:         first matching rule of the rule engine (see rules.py)
- NEIGHBORHOOD:  sample thresholds gated by the live neighbor count
"""

import enum
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from pulsegrid.core.cell import Cell


class Level(enum.IntEnum):
    DIRECT = 0
    OPACITY = 1
    SMOOTHED = 2
    PROBABILISTIC = 3
    ENTROPY = 4
    RULES = 5
    NEIGHBORHOOD = 6

    @property
    def key(self) -> str:
        """Name of this level's parameter set in ``GridParams``."""
        return self.name.lower()

    @property
    def label(self) -> str:
        return LEVELS[self].label


@dataclass
class Frame:
    """Everything a mapper may read for one frame of one grid."""
    signal: Sequence[float]
    length: int
    offset: int
    params: Any
    rng: random.Random
    rules: Optional[Any] = None

    def sample(self, index: int) -> float:
        return self.signal[index % self.length]


Mapper = Callable[[Cell, Frame, int], Tuple[float, bool]]


def _lerp(current: float, target: float, factor: float) -> float:
    return current + (target - current) * factor


def map_direct(cell: Cell, frame: Frame, neighbors: int) -> Tuple[float, bool]:
    d = frame.sample(cell.index)
    return d, d > frame.params.threshold


def map_opacity(cell: Cell, frame: Frame, neighbors: int) -> Tuple[float, bool]:
    return frame.sample(cell.index), True


def map_smoothed(cell: Cell, frame: Frame, neighbors: int) -> Tuple[float, bool]:
    value = _lerp(cell.value, frame.sample(cell.index), frame.params.smoothing)
    return value, value > frame.params.threshold


def map_probabilistic(cell: Cell, frame: Frame, neighbors: int) -> Tuple[float, bool]:
    d = frame.sample(cell.index)
    return cell.value, frame.rng.random() < d * frame.params.probability_scale


def map_entropy(cell: Cell, frame: Frame, neighbors: int) -> Tuple[float, bool]:
    # Random index, independent of the cell's own position
    j = frame.rng.randrange(frame.length)
    return cell.value, frame.signal[j] > frame.params.threshold


def map_rules(cell: Cell, frame: Frame, neighbors: int) -> Tuple[float, bool]:
    return frame.rules.step(cell, frame, neighbors)


def map_neighborhood(cell: Cell, frame: Frame, neighbors: int) -> Tuple[float, bool]:
    p = frame.params
    d = frame.sample(cell.index)
    if d > p.active_threshold and neighbors < p.neighbor_limit:
        return d, True
    if d < p.inactive_threshold or neighbors > p.neighbor_limit:
        return d, False
    return d, cell.state


@dataclass(frozen=True)
class LevelSpec:
    label: str
    mapper: Mapper
    uses_neighbors: bool = False


LEVELS: Dict[Level, LevelSpec] = {
    Level.DIRECT: LevelSpec("Direct Threshold", map_direct),
    Level.OPACITY: LevelSpec("Opacity", map_opacity),
    Level.SMOOTHED: LevelSpec("Smoothed Threshold", map_smoothed),
    Level.PROBABILISTIC: LevelSpec("Probabilistic", map_probabilistic),
    Level.ENTROPY: LevelSpec("Entropy Scatter", map_entropy),
    Level.RULES: LevelSpec("Expression Grammar", map_rules, uses_neighbors=True),
    Level.NEIGHBORHOOD: LevelSpec("Neighborhood Gate", map_neighborhood, uses_neighbors=True),
}


def parse_level(level) -> Level:
    """Accept a Level, an int or a level name; raise ValueError otherwise."""
    if isinstance(level, str):
        try:
            return Level[level.upper()]
        except KeyError:
            pass
        if not level.isdigit():
            raise ValueError(f"Unknown level: {level!r}. "
                             f"Available: {[lv.key for lv in Level]}")
        level = int(level)
    try:
        return Level(level)
    except ValueError:
        raise ValueError(f"Level must be in 0-{max(Level)}, got {level!r}") from None
