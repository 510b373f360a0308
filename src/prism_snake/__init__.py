"""Prism Snake: fixed-timestep snake game engine."""

from prism_snake.clock import FixedStepClock
from prism_snake.config import GameConfig
from prism_snake.engine import (
    GameSession,
    GameStatus,
    new_session,
    place_food,
    restart,
    step,
)
from prism_snake.food import Food
from prism_snake.grid import Cell, Grid
from prism_snake.loop import GameLoop
from prism_snake.snake import Direction, Snake

__all__ = [
    "Cell",
    "Direction",
    "FixedStepClock",
    "Food",
    "GameConfig",
    "GameLoop",
    "GameSession",
    "GameStatus",
    "Grid",
    "Snake",
    "new_session",
    "place_food",
    "restart",
    "step",
]
