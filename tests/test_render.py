"""Tests for grid rendering."""

import numpy as np
import pytest
from PIL import Image

from pulsegrid.core.grid import Grid
from pulsegrid.core.levels import Level
from pulsegrid.render import GridRenderer, RenderConfig, grid_dimensions, save_frame


def _center(renderer, row, column):
    cs = renderer.cfg.cell_size
    return row * cs + cs // 2, column * cs + cs // 2


class TestGridDimensions:
    def test_whole_cells_only(self):
        assert grid_dimensions(100, 50, 24) == (2, 4)

    def test_viewport_smaller_than_cell(self):
        assert grid_dimensions(10, 10, 24) == (0, 0)

    def test_invalid_cell_size(self):
        with pytest.raises(ValueError):
            grid_dimensions(100, 100, 0)


class TestRenderConfig:
    def test_gap_must_leave_cell(self):
        with pytest.raises(ValueError):
            RenderConfig(cell_size=4, gap=2)


class TestGridRenderer:
    def test_frame_shape(self):
        grid = Grid(2, 3)
        renderer = GridRenderer(RenderConfig(cell_size=10))

        frame = renderer.render(grid, now=0.0)

        assert frame.shape == (20, 30, 3)
        assert frame.dtype == np.uint8
        assert renderer.frame_size(grid) == (30, 20)

    def test_on_and_off_colors(self):
        grid = Grid(1, 2, level=Level.DIRECT)
        grid.advance([0.9, 0.0], now=0.0)
        renderer = GridRenderer(RenderConfig(cell_size=8))

        frame = renderer.render(grid, now=0.0)

        assert tuple(frame[_center(renderer, 0, 0)]) == renderer.cfg.on_color
        assert tuple(frame[_center(renderer, 0, 1)]) == renderer.cfg.off_color

    def test_gap_uses_background(self):
        grid = Grid(1, 1, level=Level.DIRECT)
        grid.advance([0.9], now=0.0)
        renderer = GridRenderer(RenderConfig(cell_size=8, gap=1))

        frame = renderer.render(grid, now=0.0)

        assert tuple(frame[0, 0]) == renderer.cfg.bg_color
        assert tuple(frame[7, 4]) == renderer.cfg.bg_color
        assert tuple(frame[4, 4]) == renderer.cfg.on_color

    def test_trace_fades_after_duration(self):
        """Recently switched-off cells get the trace color until it expires."""
        grid = Grid(1, 1, level=Level.DIRECT)
        grid.advance([0.9], now=1.0)
        grid.advance([0.0], now=2.0)
        renderer = GridRenderer(RenderConfig(cell_size=8))
        center = _center(renderer, 0, 0)

        during = renderer.render(grid, now=2.2)[center]
        after = renderer.render(grid, now=2.6)[center]

        assert tuple(after) == renderer.cfg.off_color
        assert tuple(during) != renderer.cfg.off_color
        # White at 10% over the background
        assert during[0] == int(10 * 0.9 + 255 * 0.1)

    def test_opacity_level_uses_value(self):
        grid = Grid(1, 3, level=Level.OPACITY)
        grid.advance([0.0, 0.05, 0.5], now=0.0)
        renderer = GridRenderer(RenderConfig(cell_size=8))

        frame = renderer.render(grid, now=0.0)

        dark = frame[_center(renderer, 0, 0)]
        mid = frame[_center(renderer, 0, 1)]
        full = frame[_center(renderer, 0, 2)]
        assert tuple(dark) == renderer.cfg.bg_color
        assert dark[0] < mid[0] < full[0]
        # 0.5 * gain 8 saturates
        assert tuple(full) == renderer.cfg.on_color

    def test_empty_grid(self):
        frame = GridRenderer().render(Grid(0, 0), now=0.0)
        assert frame.shape == (0, 0, 3)

    def test_save_frame(self, tmp_path):
        grid = Grid(2, 2)
        frame = GridRenderer(RenderConfig(cell_size=6)).render(grid, now=0.0)

        path = save_frame(frame, tmp_path / "out" / "frame.png")

        assert path.exists()
        with Image.open(path) as img:
            assert img.size == (12, 12)
            assert img.mode == "RGB"
