"""Toroidal grid geometry for the snake game."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

Cell = tuple[int, int]


class Grid:
    """Wrap-around grid of ``width`` × ``height`` cells.

    Coordinates use ``(x, y)`` ordering. The occupancy mask built by
    :meth:`free_cells` is indexed ``[y, x]`` to match NumPy row-major
    layout.
    """

    def __init__(self, width: int = 40, height: int = 30) -> None:
        if width < 2 or height < 2:
            raise ValueError("Grid dimensions must be at least 2×2.")
        self.width = width
        self.height = height

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    @property
    def center(self) -> Cell:
        return self.width // 2, self.height // 2

    def occupancy(self, cells: Iterable[Cell]) -> np.ndarray:
        """Return a boolean ``(height, width)`` mask of the given cells."""
        mask = np.zeros((self.height, self.width), dtype=bool)
        for x, y in cells:
            mask[y, x] = True
        return mask

    def free_cells(self, occupied: Iterable[Cell]) -> list[Cell]:
        """Return every cell not in *occupied*, in row-major order."""
        ys, xs = np.nonzero(~self.occupancy(occupied))
        return list(zip(xs.tolist(), ys.tolist(), strict=True))

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {"width": self.width, "height": self.height}
