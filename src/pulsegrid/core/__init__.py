"""Per-cell state engine: cells, levels, rules and the grid."""

from pulsegrid.core.cell import Cell
from pulsegrid.core.grid import Grid
from pulsegrid.core.levels import LEVELS, Level
from pulsegrid.core.normalizer import NormalizerParams, SignalNormalizer
from pulsegrid.core.params import GridParams
from pulsegrid.core.rules import Action, Rule, RuleEngine, SignalView, default_rules
