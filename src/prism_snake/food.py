"""Food position and random placement."""

from __future__ import annotations

import numpy as np

from prism_snake.grid import Cell


class Food:
    """A single food cell.

    Random draws come from a NumPy ``Generator`` so placement is
    reproducible under a fixed seed. ``position`` is ``None`` only after
    the board has filled up and no free cell remains.
    """

    def __init__(
        self,
        position: Cell | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.position = position
        self.rng = rng if rng is not None else np.random.default_rng()

    def random_position(self, width: int, height: int) -> Cell:
        """Return a uniformly random cell inside a ``width`` × ``height`` grid."""
        return int(self.rng.integers(width)), int(self.rng.integers(height))

    def copy(self) -> Food:
        return Food(self.position, self.rng)

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {
            "position": list(self.position) if self.position is not None else None,
        }
