"""
CLI entry point for the pulse grid.

Replays an audio file through the grid and writes one PNG per frame.

Usage:
    pulsegrid <audio_file> [options]
    python -m pulsegrid <audio_file> [options]
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from pulsegrid.core.grid import Grid
from pulsegrid.core.levels import Level, parse_level
from pulsegrid.driver import FrameDriver
from pulsegrid.io.audio import AudioSource
from pulsegrid.io.config import GridConfig, load_config
from pulsegrid.render import GridRenderer, RenderConfig, grid_dimensions, save_frame


def _print_progress(done: int, total: int):
    """Redraw one status line on a terminal; otherwise report every tenth."""
    total = max(total, 1)
    if sys.stdout.isatty():
        ticks = done * 30 // total
        end = "\n" if done >= total else ""
        sys.stdout.write(f"\r  frames {done:>6}/{total} |{'=' * ticks:<30}|{end}")
        sys.stdout.flush()
    elif done >= total or done % max(1, total // 10) == 0:
        print(f"  frames {done}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pulsegrid",
        description="Audio-reactive cell grid rendered to a PNG frame sequence",
    )
    parser.add_argument("audio", type=Path, help="Input audio file (wav, mp3, flac)")
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output directory (default: <audio>_frames/)",
    )

    # Engine
    parser.add_argument(
        "-l", "--level", type=str, default=None,
        help="Mapping level 0-6 or name, e.g. 'rules' (overrides config)",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON engine config file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--shuffle-rules", action="store_true",
        help="Randomize the rule order before rendering",
    )

    # Layout
    parser.add_argument("--width", type=int, default=480, help="Frame width (default: 480)")
    parser.add_argument("--height", type=int, default=270, help="Frame height (default: 270)")
    parser.add_argument("--cell-size", type=int, default=24, help="Cell size in pixels (default: 24)")

    # Timing
    parser.add_argument("-f", "--fps", type=int, default=30, help="Frames per second (default: 30)")
    parser.add_argument(
        "--window", type=int, default=1024,
        help="Samples per frame handed to the grid (default: 1024)",
    )
    parser.add_argument("--max-duration", type=float, default=None, help="Limit output to N seconds")

    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        sys.exit(1)

    config = GridConfig()
    if args.config:
        if not args.config.exists():
            print(f"Error: Config file not found: {args.config}", file=sys.stderr)
            sys.exit(1)
        try:
            config = load_config(args.config)
        except ValueError as e:
            print(f"Error: Invalid config {args.config}: {e}", file=sys.stderr)
            sys.exit(1)

    try:
        if args.fps <= 0:
            raise ValueError(f"--fps must be positive, got {args.fps}")
        if args.window <= 0:
            raise ValueError(f"--window must be positive, got {args.window}")
        if args.max_duration is not None and args.max_duration < 0:
            raise ValueError(f"--max-duration must be >= 0, got {args.max_duration}")
        level = parse_level(args.level) if args.level is not None else config.level
        render_cfg = RenderConfig(cell_size=args.cell_size)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    rows, columns = grid_dimensions(args.width, args.height, args.cell_size)
    if rows == 0 or columns == 0:
        print("Error: Frame is smaller than one cell", file=sys.stderr)
        sys.exit(1)

    output = args.output
    if output is None:
        output = args.audio.with_name(f"{args.audio.stem}_frames")

    print(f"Loading audio: {args.audio}")
    source = AudioSource.load(args.audio)
    print(f"  Duration: {source.duration:.1f}s @ {source.sample_rate} Hz")

    grid = Grid(
        rows, columns,
        level=level,
        params=config.params,
        connectivity=config.connectivity,
        seed=args.seed,
    )
    if args.shuffle_rules:
        grid.shuffle_rules()

    max_frames = None
    if args.max_duration is not None:
        max_frames = int(args.max_duration * args.fps)

    print(f"\nRendering {rows}x{columns} grid, level {int(level)} ({Level(level).label}) "
          f"@ {args.fps}fps")
    t0 = time.time()

    driver = FrameDriver(grid, fps=args.fps, window=args.window)
    renderer = GridRenderer(render_cfg)
    count = 0
    for frame in driver.run(source, max_frames=max_frames, progress_callback=_print_progress):
        save_frame(renderer.render(frame.grid, frame.time), output / f"frame_{frame.index:05d}.png")
        count += 1

    elapsed = time.time() - t0
    print(f"\nDone! {count} frames")
    print(f"  Render took {elapsed:.1f}s ({count / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {output}")


if __name__ == "__main__":
    main()
