"""
Cell state for the reactive grid.

A cell carries both a continuous value and a binary on/off state, plus the
shadow copies needed to detect transitions between frames.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Cell:
    """A single addressable grid position."""

    index: int
    row: int
    column: int

    value: float = 0.0
    state: bool = False

    # Shadows: value before this frame's mapping, state as of the prior frame
    previous_value: float = 0.0
    previous_state: bool = False

    # Monotonic time of the last on -> off edge (None until the first one)
    last_off: Optional[float] = field(default=None)

    @classmethod
    def at(cls, index: int, columns: int) -> "Cell":
        """Create the cell for a linear index in a row-major grid."""
        return cls(index=index, row=index // columns, column=index % columns)

    def turned_off(self) -> bool:
        return self.previous_state and not self.state

    def as_dict(self) -> Dict[str, Any]:
        """Read-only view of the attributes a renderer needs."""
        return {
            "index": self.index,
            "row": self.row,
            "column": self.column,
            "value": self.value,
            "state": self.state,
            "last_off": self.last_off,
        }
