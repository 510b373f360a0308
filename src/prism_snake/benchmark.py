"""Headless simulation throughput benchmark."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from prism_snake.clock import FixedStepClock
from prism_snake.engine import new_session
from prism_snake.loop import GameLoop
from prism_snake.snake import Direction

logger = logging.getLogger(__name__)

_DIRECTIONS = list(Direction)


@dataclass
class BenchmarkResult:
    """Results from a throughput benchmark run."""

    total_games: int
    total_ticks: int
    total_frames: int
    wall_time_seconds: float
    games_per_second: float
    ticks_per_second: float

    def summary(self) -> str:
        return (
            f"Benchmark: {self.total_games} games, {self.total_ticks} ticks "
            f"over {self.total_frames} frames in "
            f"{self.wall_time_seconds:.2f}s | "
            f"{self.games_per_second:.1f} games/s, "
            f"{self.ticks_per_second:.1f} ticks/s"
        )


def benchmark_throughput(
    *,
    num_games: int = 100,
    grid_width: int = 40,
    grid_height: int = 30,
    max_ticks: int = 500,
    step_ms: float = 100.0,
    frame_ms: float = 1000.0 / 60,
    seed: int = 42,
) -> BenchmarkResult:
    """Measure raw simulation throughput (no rendering).

    Each game is driven through :class:`GameLoop` with synthetic frame
    timestamps ``frame_ms`` apart and a random direction every frame,
    until the game ends or *max_ticks* ticks have been simulated.
    """
    if num_games < 1:
        raise ValueError("num_games must be at least 1.")
    rng = np.random.default_rng(seed)

    total_ticks = 0
    total_frames = 0
    start = time.perf_counter()

    for _ in range(num_games):
        loop = GameLoop(
            new_session(
                grid_width, grid_height, seed=int(rng.integers(2**31)),
            ),
            FixedStepClock(step_ms),
        )
        timestamp = 0.0
        ticks = 0
        while not loop.session.game_over and ticks < max_ticks:
            loop.on_direction_input(_DIRECTIONS[int(rng.integers(4))])
            ticks += loop.on_frame(timestamp)
            timestamp += frame_ms
            total_frames += 1
        total_ticks += ticks

    elapsed = time.perf_counter() - start
    result = BenchmarkResult(
        total_games=num_games,
        total_ticks=total_ticks,
        total_frames=total_frames,
        wall_time_seconds=elapsed,
        games_per_second=num_games / max(elapsed, 1e-9),
        ticks_per_second=total_ticks / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
