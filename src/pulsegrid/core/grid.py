"""
Reactive cell grid.

Owns the row-major cell array, the neighbor query and the per-frame update
that maps a normalized signal onto cells through the active level.
All simulation state (level, frame offset, parameters, rule order, random
source) lives on the instance, so independent grids never interfere.
"""

import logging
import random
import time
from typing import Any, Dict, Iterator, List, Optional, Sequence

from pulsegrid.core.cell import Cell
from pulsegrid.core.levels import LEVELS, Frame, Level, parse_level
from pulsegrid.core.params import GridParams
from pulsegrid.core.rules import Rule, RuleEngine, default_rules

logger = logging.getLogger(__name__)

_ORTHOGONAL = ((0, -1), (0, 1), (-1, 0), (1, 0))
_DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))


class Grid:
    """
    Rectangular grid of cells driven one frame at a time.

    Attributes:
        rows: Number of rows (>= 0).
        columns: Number of columns (>= 0).
        cells: Row-major list of Cell, ``index = row * columns + column``.
        frame_offset: Ripple counter read by the rules level.
        params: Per-level parameter sets.
        rules: Rule engine used by the rules level.
    """

    def __init__(
        self,
        rows: int = 0,
        columns: int = 0,
        level: Any = Level.DIRECT,
        params: Optional[GridParams] = None,
        rules: Optional[List[Rule]] = None,
        connectivity: int = 4,
        seed: Optional[int] = None,
    ):
        """
        Initialize the grid.

        Args:
            rows: Grid height in cells.
            columns: Grid width in cells.
            level: Active mapping level (Level, int or name).
            params: Parameter sets; defaults for every level if None.
            rules: Rule list for the rules level; the default set if None.
            connectivity: Default neighborhood for neighbor_count (4 or 8).
            seed: Seed for the grid's own random source.

        Raises:
            ValueError: If dimensions are negative, or level/connectivity invalid.
        """
        self.rng = random.Random(seed)
        self._params = params or GridParams()
        self.rules = RuleEngine(
            rules if rules is not None else default_rules(self._params, self.rng)
        )
        self.connectivity = _check_connectivity(connectivity)
        self._level = parse_level(level)
        self.frame_offset = 0

        self.rows = 0
        self.columns = 0
        self.cells: List[Cell] = []
        self.resize(rows, columns)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __repr__(self) -> str:
        return (f"Grid(rows={self.rows}, columns={self.columns}, "
                f"level={self._level.name})")

    # -- control surface ------------------------------------------------

    @property
    def params(self) -> GridParams:
        """Parameter sets. Edit in place; the object itself is fixed for the
        grid's lifetime because the default rules read it directly."""
        return self._params

    @property
    def level(self) -> Level:
        return self._level

    @level.setter
    def level(self, level):
        self._level = parse_level(level)
        logger.debug("Level %d: %s", self._level, self._level.label)

    def get_param(self, name: str, level: Any = None) -> Any:
        """Read a parameter of the active level (or of ``level``)."""
        lv = self._level if level is None else parse_level(level)
        return self.params.get(lv.key, name)

    def set_param(self, name: str, value: Any, level: Any = None):
        """Set a parameter of the active level (or of ``level``)."""
        lv = self._level if level is None else parse_level(level)
        self.params.set(lv.key, name, value)
        logger.debug("%s.%s = %r", lv.key, name, value)

    def shuffle_rules(self):
        """Randomize rule order (the 'randomize expression' control)."""
        self.rules.shuffle(self.rng)

    def resize(self, rows: int, columns: int):
        """
        Rebuild the cell array at new dimensions.

        All per-cell history is discarded. Level, parameters, rule order and
        frame offset are kept.

        Raises:
            ValueError: If rows or columns is negative.
        """
        if rows < 0 or columns < 0:
            raise ValueError(f"Grid dimensions must be >= 0, got {rows}x{columns}")
        self.rows = int(rows)
        self.columns = int(columns)
        self.cells = [Cell.at(i, self.columns) for i in range(self.rows * self.columns)]
        logger.debug("Resized grid to %dx%d (%d cells)", self.rows, self.columns, len(self.cells))

    def reset(self):
        """Clear all cell state and the ripple counter, keeping the size."""
        self.frame_offset = 0
        self.resize(self.rows, self.columns)

    # -- queries --------------------------------------------------------

    def cell_at(self, row: int, column: int) -> Cell:
        if not (0 <= row < self.rows and 0 <= column < self.columns):
            raise IndexError(f"Cell ({row}, {column}) out of bounds for "
                             f"{self.rows}x{self.columns} grid")
        return self.cells[row * self.columns + column]

    def neighbor_count(self, cell: Cell, connectivity: Optional[int] = None) -> int:
        """
        Count neighbors of ``cell`` whose state is on.

        Neighbors outside the grid are excluded (no wraparound).

        Args:
            cell: Cell to inspect.
            connectivity: 4 (orthogonal) or 8 (with diagonals). Defaults to
                the grid's connectivity.

        Returns:
            Live neighbor count in [0, connectivity].
        """
        conn = self.connectivity if connectivity is None else _check_connectivity(connectivity)
        offsets = _ORTHOGONAL if conn == 4 else _ORTHOGONAL + _DIAGONAL

        count = 0
        for dc, dr in offsets:
            r = cell.row + dr
            c = cell.column + dc
            if 0 <= r < self.rows and 0 <= c < self.columns:
                if self.cells[r * self.columns + c].state:
                    count += 1
        return count

    def snapshot(self) -> List[Dict[str, Any]]:
        """Per-cell output attributes, in index order."""
        return [cell.as_dict() for cell in self.cells]

    # -- simulation -----------------------------------------------------

    def advance(self, signal: Sequence[float], now: Optional[float] = None):
        """
        Advance every cell by one frame.

        Args:
            signal: Normalized samples in [0, 1]. Never modified. Its length
                may differ between calls.
            now: Monotonic timestamp recorded on on -> off transitions.
                Defaults to ``time.monotonic()``.

        Raises:
            ValueError: If the signal is empty.
        """
        n = len(signal)
        if n == 0:
            raise ValueError("Cannot advance on an empty signal")
        if now is None:
            now = time.monotonic()

        spec = LEVELS[self._level]
        frame = Frame(
            signal=signal,
            length=n,
            offset=self.frame_offset % n,
            params=self.params.for_key(self._level.key),
            rng=self.rng,
            rules=self.rules,
        )
        mapper = spec.mapper

        # Sequential sweep: cells read neighbors already updated this frame
        for cell in self.cells:
            cell.previous_value = cell.value
            neighbors = self.neighbor_count(cell) if spec.uses_neighbors else 0
            value, state = mapper(cell, frame, neighbors)
            cell.value = float(value)
            cell.state = bool(state)

        # Transitions are detected only after the whole sweep
        for cell in self.cells:
            if cell.turned_off():
                cell.last_off = now
            cell.previous_state = cell.state

        self.frame_offset = (self.frame_offset + self.params.rules.ripple_speed) % n


def _check_connectivity(connectivity: int) -> int:
    if connectivity not in (4, 8):
        raise ValueError(f"connectivity must be 4 or 8, got {connectivity!r}")
    return connectivity
