"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prism_snake.grid import Cell, Grid


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        dx, dy = self.value
        return Direction((-dx, -dy))

    @classmethod
    def from_name(cls, name: str) -> Direction:
        """Parse ``"up"``/``"down"``/``"left"``/``"right"`` (any case)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {name!r}.") from None


class Snake:
    """A snake represented as an ordered deque of (x, y) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(
        self,
        body: Iterable[Cell],
        direction: Direction = Direction.RIGHT,
        grow_pending: bool = False,
    ) -> None:
        self.body: deque[Cell] = deque(body)
        if not self.body:
            raise ValueError("Snake body must contain at least 1 cell.")
        self.direction = direction
        self.grow_pending = grow_pending

    @classmethod
    def centered(cls, grid: Grid) -> Snake:
        """Create a single-segment snake in the middle of *grid*, heading right."""
        return cls([grid.center], Direction.RIGHT)

    @property
    def head(self) -> Cell:
        """Return the head coordinate."""
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    def set_direction(self, new_direction: Direction) -> bool:
        """Change direction, ignoring 180° reversals.

        Returns True when the new direction was accepted.
        """
        if new_direction is self.direction.opposite:
            return False
        self.direction = new_direction
        return True

    def advance(self, width: int, height: int) -> tuple[Cell, bool]:
        """Move one cell forward, wrapping around the grid edges.

        Returns the new head and whether the snake grew on this move.
        """
        dx, dy = self.direction.value
        x, y = self.head
        new_head = ((x + dx) % width, (y + dy) % height)
        self.body.appendleft(new_head)
        if self.grow_pending:
            self.grow_pending = False
            return new_head, True
        self.body.pop()
        return new_head, False

    def occupies(self, cell: Cell) -> bool:
        """Check whether the snake occupies a given cell."""
        return cell in self.body

    def self_collision(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        head = self.head
        return any(seg == head for seg in list(self.body)[1:])

    def copy(self) -> Snake:
        return Snake(self.body, self.direction, self.grow_pending)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name.lower(),
            "grow_pending": self.grow_pending,
        }
