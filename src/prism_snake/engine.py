"""Game session state and the per-tick simulation step."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

import numpy as np

from prism_snake.config import GameConfig
from prism_snake.food import Food
from prism_snake.grid import Cell, Grid
from prism_snake.snake import Snake

logger = logging.getLogger(__name__)

DEFAULT_SPAWN_ATTEMPTS = 64


class GameStatus(enum.Enum):
    """Lifecycle states for a game session."""

    RUNNING = "running"
    GAME_OVER = "game_over"
    BOARD_FULL = "board_full"


@dataclass
class GameSession:
    """Everything the simulation needs for one game.

    Sessions are treated as values: :func:`step` returns a new session and
    leaves its argument untouched. The food RNG is shared between a
    session and its successors so a seeded game replays identically.
    """

    grid: Grid
    snake: Snake
    food: Food
    status: GameStatus = GameStatus.RUNNING
    tick: int = 0
    last_growth: Cell | None = None
    max_spawn_attempts: int = DEFAULT_SPAWN_ATTEMPTS

    @property
    def game_over(self) -> bool:
        """True once the session has reached any terminal state."""
        return self.status is not GameStatus.RUNNING

    @property
    def rng(self) -> np.random.Generator:
        return self.food.rng

    def copy(self) -> GameSession:
        return replace(self, snake=self.snake.copy(), food=self.food.copy())

    def to_dict(self) -> dict:
        """Return the full, serializable session state."""
        return {
            "tick": self.tick,
            "status": self.status.value,
            "game_over": self.game_over,
            "length": len(self.snake),
            "grid": self.grid.to_dict(),
            "snake": self.snake.to_dict(),
            "food": self.food.to_dict(),
        }


def new_session(
    width: int,
    height: int,
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    max_spawn_attempts: int = DEFAULT_SPAWN_ATTEMPTS,
) -> GameSession:
    """Create a fresh session: centred snake heading right, food on a free cell."""
    grid = Grid(width, height)
    food = Food(rng=rng if rng is not None else np.random.default_rng(seed))
    session = GameSession(
        grid=grid,
        snake=Snake.centered(grid),
        food=food,
        max_spawn_attempts=max_spawn_attempts,
    )
    if not place_food(session):
        session.status = GameStatus.BOARD_FULL
    return session


def session_from_config(
    config: GameConfig, rng: np.random.Generator | None = None,
) -> GameSession:
    """Create a fresh session sized and seeded from *config*."""
    return new_session(
        config.grid_width,
        config.grid_height,
        rng=rng,
        seed=config.seed,
        max_spawn_attempts=config.max_spawn_attempts,
    )


def restart(session: GameSession) -> GameSession:
    """Replace *session* with a fresh one on the same grid and RNG."""
    fresh = new_session(
        session.grid.width,
        session.grid.height,
        rng=session.rng,
        max_spawn_attempts=session.max_spawn_attempts,
    )
    logger.info(
        "Session restarted after %d ticks (%s).",
        session.tick, session.status.value,
    )
    return fresh


def place_food(session: GameSession) -> bool:
    """Move the food to a random cell not covered by the snake.

    Draws up to ``max_spawn_attempts`` random cells, then falls back to a
    uniform pick among all free cells. Returns False, leaving the food
    position as ``None``, when the snake covers the whole grid.
    """
    grid, food = session.grid, session.food
    occupied = set(session.snake.body)

    for _ in range(session.max_spawn_attempts):
        candidate = food.random_position(grid.width, grid.height)
        if candidate not in occupied:
            food.position = candidate
            return True

    free = grid.free_cells(occupied)
    if not free:
        food.position = None
        return False

    logger.debug(
        "Food placement fell back to a free-cell scan (%d free).", len(free),
    )
    food.position = free[int(food.rng.integers(len(free)))]
    return True


def step(session: GameSession) -> GameSession:
    """Advance the game by one tick.

    Order within a tick: move, then the food check (which may respawn the
    food), then the self-collision check. Terminal sessions are returned
    unchanged.
    """
    if session.game_over:
        return session

    nxt = session.copy()
    head, grew = nxt.snake.advance(nxt.grid.width, nxt.grid.height)
    nxt.tick += 1
    nxt.last_growth = head if grew else None

    # --- food ---
    if head == nxt.food.position:
        nxt.snake.grow_pending = True
        if not place_food(nxt):
            nxt.status = GameStatus.BOARD_FULL
            logger.warning(
                "Board full at tick %d with length %d.",
                nxt.tick, len(nxt.snake),
            )

    # --- self-collision ---
    if nxt.snake.self_collision():
        nxt.status = GameStatus.GAME_OVER
        logger.info(
            "Snake collided with itself at tick %d with length %d.",
            nxt.tick, len(nxt.snake),
        )

    return nxt
