"""Host-independent renderer drawing a session onto a surface."""

from __future__ import annotations

import colorsys
from collections.abc import Sequence
from typing import Protocol

import numpy as np

from prism_snake.effects import ParticleField
from prism_snake.engine import GameSession, GameStatus
from prism_snake.grid import Cell

Color = tuple[int, int, int]

FOOD_COLOR: Color = (255, 50, 50)
OVERLAY_COLOR: Color = (0, 0, 0)
TEXT_COLOR: Color = (255, 255, 255)

_HUE_PER_TICK = 0.01
_HUE_PER_SEGMENT = 0.02
_GLOW_STEP = 0.1
_SEGMENT_RADIUS = 8
_PARTICLE_SIZE = 4


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> Color:
    """Convert HSL components in ``[0, 1]`` to an 8-bit RGB tuple."""
    r, g, b = colorsys.hls_to_rgb(hue % 1.0, lightness, saturation)
    return round(r * 255), round(g * 255), round(b * 255)


BACKGROUND_TOP: Color = hsl_to_rgb(240 / 360, 1.0, 0.05)
BACKGROUND_BOTTOM: Color = hsl_to_rgb(200 / 360, 1.0, 0.05)


class Surface(Protocol):
    """Drawing primitives a host must provide. Coordinates are pixels."""

    @property
    def size(self) -> tuple[int, int]: ...

    def fill_gradient(self, top: Color, bottom: Color) -> None: ...

    def fill_rect(
        self, x: float, y: float, w: float, h: float,
        color: Color, alpha: float = 1.0,
    ) -> None: ...

    def round_rect(
        self, x: float, y: float, w: float, h: float,
        radius: int, color: Color,
    ) -> None: ...

    def circle(
        self, cx: float, cy: float, radius: float,
        color: Color, alpha: float = 1.0,
    ) -> None: ...

    def text(
        self, message: str, cx: float, cy: float, size: int, color: Color,
    ) -> None: ...


class Renderer:
    """Draws background, food, snake, particles and the game-over overlay.

    Holds only cosmetic state: the rainbow hue offset and particles advance
    once per simulated tick, the food glow pulses once per drawn frame.
    """

    def __init__(
        self,
        cell_size: int = 20,
        rng: np.random.Generator | None = None,
        title: str = "GAME OVER",
        hint: str = "Press SPACE to restart",
    ) -> None:
        self.cell_size = cell_size
        self.title = title
        self.hint = hint
        self.hue = 0.0
        self.glow = 0.0
        self.glow_direction = 1
        self.particles = ParticleField(rng)
        self._last_tick = 0
        self._generation = 0

    def observe(
        self,
        session: GameSession,
        growths: Sequence[Cell] | None = None,
        generation: int | None = None,
    ) -> None:
        """Catch cosmetic state up with the ticks simulated since the last call.

        *growths* and *generation* come from :class:`~prism_snake.loop.GameLoop`.
        Without them, only ``session.last_growth`` bursts and a restart is
        inferred from the tick count going backwards.
        """
        if generation is not None:
            restarted = generation != self._generation
            self._generation = generation
        else:
            restarted = session.tick < self._last_tick
        if restarted:
            self.hue = 0.0
            self.particles.clear()
            self._last_tick = 0

        elapsed = session.tick - self._last_tick
        if elapsed <= 0:
            return
        if growths is None:
            growths = [] if session.last_growth is None else [session.last_growth]
        for gx, gy in growths:
            self.particles.burst(gx * self.cell_size, gy * self.cell_size)
        for _ in range(elapsed):
            self.particles.update()
        self.hue = (self.hue + _HUE_PER_TICK * elapsed) % 1.0
        self._last_tick = session.tick

    def draw(
        self,
        surface: Surface,
        session: GameSession,
        growths: Sequence[Cell] | None = None,
        generation: int | None = None,
    ) -> None:
        """Render one frame of *session*."""
        self.observe(session, growths, generation)
        surface.fill_gradient(BACKGROUND_TOP, BACKGROUND_BOTTOM)
        self._draw_food(surface, session)
        self._draw_snake(surface, session)
        if session.game_over:
            self._draw_game_over(surface, session)

    def _pulse_glow(self) -> None:
        self.glow += _GLOW_STEP * self.glow_direction
        if self.glow >= 1:
            self.glow_direction = -1
        elif self.glow <= 0:
            self.glow_direction = 1

    def _draw_food(self, surface: Surface, session: GameSession) -> None:
        self._pulse_glow()
        if session.food.position is None:
            return
        cell = self.cell_size
        fx, fy = session.food.position
        cx = fx * cell + cell / 2
        cy = fy * cell + cell / 2
        surface.circle(cx, cy, cell / 2 + self.glow * 5, FOOD_COLOR, alpha=0.2)
        surface.circle(cx, cy, cell / 2, FOOD_COLOR)

    def _draw_snake(self, surface: Surface, session: GameSession) -> None:
        for p in self.particles:
            surface.fill_rect(
                p.x, p.y, _PARTICLE_SIZE, _PARTICLE_SIZE, p.color, alpha=p.alpha,
            )

        cell = self.cell_size
        for i, (x, y) in enumerate(session.snake.body):
            color = hsl_to_rgb(self.hue + i * _HUE_PER_SEGMENT, 1.0, 0.5)
            surface.round_rect(
                x * cell, y * cell, cell - 2, cell - 2, _SEGMENT_RADIUS, color,
            )

    def _draw_game_over(self, surface: Surface, session: GameSession) -> None:
        width, height = surface.size
        surface.fill_rect(0, 0, width, height, OVERLAY_COLOR, alpha=0.7)
        title = (
            "BOARD CLEARED!"
            if session.status is GameStatus.BOARD_FULL else self.title
        )
        surface.text(title, width / 2, height / 2, 48, TEXT_COLOR)
        surface.text(self.hint, width / 2, height / 2 + 40, 24, TEXT_COLOR)
