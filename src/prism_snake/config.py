"""Game configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Canvas limits and margins used when fitting the board to a viewport.
_MAX_CANVAS_WIDTH = 800
_MAX_CANVAS_HEIGHT = 600
_VIEWPORT_MARGIN_X = 20
_VIEWPORT_MARGIN_Y = 100


@dataclass(frozen=True)
class GameConfig:
    """Board, timing, and host settings for one game.

    Supports JSON serialization for reproducibility.
    """

    # Board
    grid_width: int = 40
    grid_height: int = 30
    cell_size: int = 20

    # Simulation clock (milliseconds per tick)
    step_ms: float = 100.0
    max_steps_per_frame: int | None = None

    # Food placement
    max_spawn_attempts: int = 64

    # Host
    fps: int = 60
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_width < 2 or self.grid_height < 2:
            raise ValueError("grid_width and grid_height must each be at least 2.")
        if self.cell_size < 1:
            raise ValueError("cell_size must be at least 1.")
        if self.step_ms <= 0:
            raise ValueError("step_ms must be positive.")
        if self.max_steps_per_frame is not None and self.max_steps_per_frame < 1:
            raise ValueError("max_steps_per_frame must be at least 1.")
        if self.max_spawn_attempts < 1:
            raise ValueError("max_spawn_attempts must be at least 1.")
        if self.fps < 1:
            raise ValueError("fps must be at least 1.")

    @classmethod
    def for_viewport(
        cls, width_px: int, height_px: int, cell_size: int = 20, **kwargs,
    ) -> GameConfig:
        """Fit the board to a viewport, leaving room for surrounding chrome."""
        canvas_w = min(_MAX_CANVAS_WIDTH, width_px - _VIEWPORT_MARGIN_X)
        canvas_h = min(_MAX_CANVAS_HEIGHT, height_px - _VIEWPORT_MARGIN_Y)
        return cls(
            grid_width=canvas_w // cell_size,
            grid_height=canvas_h // cell_size,
            cell_size=cell_size,
            **kwargs,
        )

    @property
    def window_size(self) -> tuple[int, int]:
        return self.grid_width * self.cell_size, self.grid_height * self.cell_size

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
