"""
Rule engine for the expression-grammar level.

A rule pairs a condition ``(cell, signal, neighbors) -> bool`` with one of a
fixed set of actions. Rules are evaluated in list order and the first match
wins; if nothing matches the cell is left as it was.

Conditions are written against "the signal at my index". Before evaluation
the engine wraps the frame's signal in a ``SignalView`` whose entry at the
cell's own index holds the ripple-shifted sample instead, so rule authors
never deal with the frame offset themselves.
"""

import enum
import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from pulsegrid.core.cell import Cell
from pulsegrid.core.params import GridParams, RuleParams

logger = logging.getLogger(__name__)


class SignalView(Sequence):
    """Read-only view of a signal with a single entry replaced."""

    __slots__ = ("_base", "_index", "_value")

    def __init__(self, base: Sequence, index: int, value: float):
        self._base = base
        self._index = index
        self._value = value

    def __len__(self) -> int:
        return len(self._base)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return [self[j] for j in range(*i.indices(len(self)))]
        n = len(self._base)
        if i < 0:
            i += n
        if not 0 <= i < n:
            raise IndexError("signal index out of range")
        if i == self._index:
            return self._value
        return self._base[i]


class Action(str, enum.Enum):
    ON = "on"
    OFF = "off"
    FLIP = "flip"
    SCATTER = "scatter"
    DECAY = "decay"


Condition = Callable[[Cell, Sequence, int], bool]


@dataclass(frozen=True)
class Rule:
    condition: Condition
    action: Action
    name: str = ""

    def __post_init__(self):
        # Accept plain strings ("on", "flip", ...) for the action
        object.__setattr__(self, "action", Action(self.action))

    def matches(self, cell: Cell, signal: Sequence, neighbors: int) -> bool:
        return bool(self.condition(cell, signal, neighbors))


def apply_action(
    action: Action,
    cell: Cell,
    params: RuleParams,
    rng: random.Random,
) -> Tuple[float, bool]:
    """Return the cell's ``(value, state)`` after ``action``."""
    value, state = cell.value, cell.state
    if action is Action.ON:
        state = True
    elif action is Action.OFF:
        state = False
    elif action is Action.FLIP:
        state = not state
    elif action is Action.SCATTER:
        state = rng.random() > 0.5
    elif action is Action.DECAY:
        value *= params.decay_factor
        if value < params.decay_floor:
            state = False
    return value, state


class RuleEngine:
    """Ordered rule list with first-match-wins evaluation."""

    def __init__(self, rules: Optional[List[Rule]] = None):
        self.rules: List[Rule] = list(rules or [])

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def match(self, cell: Cell, signal: Sequence, neighbors: int) -> Optional[Rule]:
        """Return the first rule whose condition holds, or None."""
        for rule in self.rules:
            if rule.matches(cell, signal, neighbors):
                return rule
        return None

    def step(self, cell: Cell, frame, neighbors: int) -> Tuple[float, bool]:
        """
        Evaluate the rules for one cell of one frame.

        Args:
            cell: The cell being updated.
            frame: The grid's ``Frame`` (signal, length, offset, params, rng).
            neighbors: Live neighbor count for the cell.

        Returns:
            The cell's new ``(value, state)``; unchanged when no rule matches.
        """
        n = frame.length
        rippled = frame.signal[(cell.index + frame.offset) % n]
        view = SignalView(frame.signal, cell.index % n, rippled)

        rule = self.match(cell, view, neighbors)
        if rule is None:
            return cell.value, cell.state
        return apply_action(rule.action, cell, frame.params, frame.rng)

    def shuffle(self, rng: random.Random):
        """Uniformly permute the rule order in place."""
        rng.shuffle(self.rules)
        logger.debug("Rules randomized: %s", [r.name or r.action.value for r in self.rules])


def default_rules(params: GridParams, rng: random.Random) -> List[Rule]:
    """
    Loud turns on, quiet turns off, mid-range occasionally flips.

    Conditions read ``params.rules`` on every call so parameter edits apply
    from the next frame.
    """

    def loud(cell, signal, neighbors):
        return signal[cell.index % len(signal)] > params.rules.loud_threshold

    def quiet(cell, signal, neighbors):
        return signal[cell.index % len(signal)] < params.rules.quiet_threshold

    def mid_flip(cell, signal, neighbors):
        p = params.rules
        d = signal[cell.index % len(signal)]
        return p.flip_min < d < p.flip_max and rng.random() > p.flip_chance

    return [
        Rule(loud, Action.ON, "loud"),
        Rule(quiet, Action.OFF, "quiet"),
        Rule(mid_flip, Action.FLIP, "mid_flip"),
    ]
