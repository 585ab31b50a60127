"""Audio-reactive cell grid engine."""

from pulsegrid.core.cell import Cell
from pulsegrid.core.grid import Grid
from pulsegrid.core.levels import Level
from pulsegrid.core.normalizer import SignalNormalizer
from pulsegrid.core.params import GridParams
from pulsegrid.core.rules import Action, Rule

__version__ = "0.1.0"
__all__ = [
    "Action",
    "Cell",
    "Grid",
    "GridParams",
    "Level",
    "Rule",
    "SignalNormalizer",
]
