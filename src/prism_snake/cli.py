"""Command-line launcher for Prism Snake."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from prism_snake.config import GameConfig

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prism-snake",
        description="Prism Snake desktop game and simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- play ---
    play_p = sub.add_parser("play", help="Play in a desktop window.")
    play_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    play_p.add_argument("--width", type=int, default=None)
    play_p.add_argument("--height", type=int, default=None)
    play_p.add_argument("--cell-size", type=int, default=None)
    play_p.add_argument("--step-ms", type=float, default=None)
    play_p.add_argument("--fps", type=int, default=None)
    play_p.add_argument("--seed", type=int, default=None)

    # --- bench ---
    bench_p = sub.add_parser(
        "bench", help="Measure headless simulation throughput.",
    )
    bench_p.add_argument("--games", type=_positive_int, default=100)
    bench_p.add_argument("--width", type=int, default=40)
    bench_p.add_argument("--height", type=int, default=30)
    bench_p.add_argument("--max-ticks", type=_positive_int, default=500)
    bench_p.add_argument("--seed", type=int, default=42)

    return parser


def _play_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.load(args.config) if args.config else GameConfig()

    flag_map = {
        "width": "grid_width",
        "height": "grid_height",
        "cell_size": "cell_size",
        "step_ms": "step_ms",
        "fps": "fps",
        "seed": "seed",
    }
    overrides = {
        cfg_name: getattr(args, cli_name)
        for cli_name, cfg_name in flag_map.items()
        if getattr(args, cli_name, None) is not None
    }
    if overrides:
        config = dataclasses.replace(config, **overrides)
    return config


def _run_play(args: argparse.Namespace) -> int:
    from prism_snake.desktop import run

    # Without an explicit board size, fit the board to the display.
    fit_display = args.config is None and args.width is None and args.height is None
    return run(_play_config(args), fit_display=fit_display)


def _run_bench(args: argparse.Namespace) -> int:
    from prism_snake.benchmark import benchmark_throughput

    result = benchmark_throughput(
        num_games=args.games,
        grid_width=args.width,
        grid_height=args.height,
        max_ticks=args.max_ticks,
        seed=args.seed,
    )
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``prism-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "play": _run_play,
        "bench": _run_bench,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
