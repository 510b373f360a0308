"""Frame-driven game loop binding a session to the fixed-step clock."""

from __future__ import annotations

import numpy as np

from prism_snake.clock import FixedStepClock
from prism_snake.config import GameConfig
from prism_snake.engine import GameSession, restart, session_from_config, step
from prism_snake.grid import Cell
from prism_snake.snake import Direction


class GameLoop:
    """Owns the current session and steps it at a fixed logical rate.

    Hosts call :meth:`on_frame` from their render callback with a
    non-decreasing timestamp in milliseconds, forward input through
    :meth:`on_direction_input` and :meth:`on_restart`, and read
    :attr:`session` to draw.

    ``growths`` lists the cells where the snake grew during the most recent
    :meth:`on_frame` call, one entry per growing tick. ``generation`` counts
    restarts so observers can tell a new game from the old one.
    """

    def __init__(
        self,
        session: GameSession,
        clock: FixedStepClock | None = None,
    ) -> None:
        self.session = session
        self.clock = clock if clock is not None else FixedStepClock()
        self.growths: list[Cell] = []
        self.generation = 0

    @classmethod
    def from_config(
        cls, config: GameConfig, rng: np.random.Generator | None = None,
    ) -> GameLoop:
        return cls(
            session_from_config(config, rng=rng),
            FixedStepClock(config.step_ms, config.max_steps_per_frame),
        )

    def on_frame(self, timestamp: float) -> int:
        """Advance the clock and simulate every due tick.

        Terminal sessions still consume due steps so that no backlog builds
        up while the game-over screen is shown. Returns the number of ticks
        actually simulated.
        """
        self.growths = []
        simulated = 0
        for _ in range(self.clock.advance(timestamp)):
            if self.session.game_over:
                continue
            self.session = step(self.session)
            if self.session.last_growth is not None:
                self.growths.append(self.session.last_growth)
            simulated += 1
        return simulated

    def on_direction_input(self, direction: Direction) -> bool:
        """Steer the snake; ignored once the game is over."""
        if self.session.game_over:
            return False
        return self.session.snake.set_direction(direction)

    def on_restart(self) -> bool:
        """Start a fresh session if the current one has ended."""
        if not self.session.game_over:
            return False
        self.session = restart(self.session)
        self.growths = []
        self.generation += 1
        return True
