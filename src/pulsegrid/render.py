"""
Grid rendering.

Turns cell attributes into RGB frames: lit cells, dark cells, a faint trace
on cells that recently switched off, and per-cell opacity in the opacity
level. Also holds the viewport policy that decides the grid size.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image

from pulsegrid.core.grid import Grid
from pulsegrid.core.levels import Level


@dataclass
class RenderConfig:
    """Cell layout and palette."""
    cell_size: int = 24
    gap: int = 1

    bg_color: Tuple[int, int, int] = (10, 10, 10)
    on_color: Tuple[int, int, int] = (224, 224, 224)
    off_color: Tuple[int, int, int] = (17, 17, 17)

    # Trace drawn after an on -> off edge
    trace_color: Tuple[int, int, int] = (255, 255, 255)
    trace_alpha: float = 0.1
    trace_duration: float = 0.5  # seconds, same clock as Grid.advance(now=...)

    def __post_init__(self):
        if self.cell_size <= 0:
            raise ValueError("cell_size must be positive")
        if not 0 <= self.gap * 2 < self.cell_size:
            raise ValueError("gap must leave a visible cell")


def grid_dimensions(width: int, height: int, cell_size: int = 24) -> Tuple[int, int]:
    """(rows, columns) of whole cells that fit a width x height viewport."""
    if cell_size <= 0:
        raise ValueError("cell_size must be positive")
    return max(0, height // cell_size), max(0, width // cell_size)


class GridRenderer:
    """Rasterizes a Grid into (H, W, 3) uint8 frames."""

    def __init__(self, config: RenderConfig | None = None):
        self.cfg = config or RenderConfig()

    def frame_size(self, grid: Grid) -> Tuple[int, int]:
        """(width, height) in pixels."""
        return grid.columns * self.cfg.cell_size, grid.rows * self.cfg.cell_size

    def cell_colors(self, grid: Grid, now: float) -> np.ndarray:
        """
        One RGB color per cell.

        Returns:
            (rows, columns, 3) float32 array in [0, 255].
        """
        cfg = self.cfg
        bg = np.array(cfg.bg_color, dtype=np.float32)
        on = np.array(cfg.on_color, dtype=np.float32)
        off = np.array(cfg.off_color, dtype=np.float32)
        trace = bg * (1.0 - cfg.trace_alpha) + np.array(cfg.trace_color, dtype=np.float32) * cfg.trace_alpha

        colors = np.empty((grid.rows, grid.columns, 3), dtype=np.float32)
        if grid.level == Level.OPACITY:
            gain = grid.get_param("opacity_gain", Level.OPACITY)
            for cell in grid:
                alpha = min(max(cell.value * gain, 0.0), 1.0)
                colors[cell.row, cell.column] = bg * (1.0 - alpha) + on * alpha
            return colors

        for cell in grid:
            if cell.state:
                colors[cell.row, cell.column] = on
            elif cell.last_off is not None and now - cell.last_off < cfg.trace_duration:
                colors[cell.row, cell.column] = trace
            else:
                colors[cell.row, cell.column] = off
        return colors

    def render(self, grid: Grid, now: float) -> np.ndarray:
        """Render the grid as an (H, W, 3) uint8 frame."""
        cfg = self.cfg
        cs = cfg.cell_size
        colors = self.cell_colors(grid, now)

        frame = np.repeat(np.repeat(colors, cs, axis=0), cs, axis=1)

        if cfg.gap > 0 and frame.size:
            local = np.arange(cs)
            edge = (local < cfg.gap) | (local >= cs - cfg.gap)
            edge_y = np.tile(edge, grid.rows)
            edge_x = np.tile(edge, grid.columns)
            frame[edge_y, :] = cfg.bg_color
            frame[:, edge_x] = cfg.bg_color

        return np.clip(frame, 0, 255).astype(np.uint8)


def save_frame(frame: np.ndarray, path: Union[str, Path]) -> Path:
    """Write an RGB frame to an image file (format from the suffix)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(frame).save(path)
    return path
