"""Pygame desktop host: window, keyboard input, and drawing surface."""

from __future__ import annotations

import dataclasses
import logging

import pygame

from prism_snake.config import GameConfig
from prism_snake.loop import GameLoop
from prism_snake.render import Color, Renderer
from prism_snake.snake import Direction

logger = logging.getLogger(__name__)

KEY_TO_DIRECTION: dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
}

_FONT_NAME = "arial"


class PygameSurface:
    """Adapts a ``pygame.Surface`` to the renderer's drawing primitives."""

    def __init__(self, target: pygame.Surface) -> None:
        self.target = target
        self._fonts: dict[int, pygame.font.Font] = {}

    @property
    def size(self) -> tuple[int, int]:
        return self.target.get_size()

    def fill_gradient(self, top: Color, bottom: Color) -> None:
        # Stretch a two-row strip; smoothscale interpolates the rows in between.
        strip = pygame.Surface((2, 2), 0, 32)
        strip.fill(top, pygame.Rect(0, 0, 2, 1))
        strip.fill(bottom, pygame.Rect(0, 1, 2, 1))
        self.target.blit(pygame.transform.smoothscale(strip, self.size), (0, 0))

    def fill_rect(
        self, x: float, y: float, w: float, h: float,
        color: Color, alpha: float = 1.0,
    ) -> None:
        if alpha >= 1.0:
            pygame.draw.rect(self.target, color, pygame.Rect(x, y, w, h))
            return
        layer = pygame.Surface((max(1, int(w)), max(1, int(h))), pygame.SRCALPHA)
        layer.fill((*color, _alpha_byte(alpha)))
        self.target.blit(layer, (x, y))

    def round_rect(
        self, x: float, y: float, w: float, h: float,
        radius: int, color: Color,
    ) -> None:
        pygame.draw.rect(
            self.target, color, pygame.Rect(x, y, w, h), border_radius=radius,
        )

    def circle(
        self, cx: float, cy: float, radius: float,
        color: Color, alpha: float = 1.0,
    ) -> None:
        if alpha >= 1.0:
            pygame.draw.circle(self.target, color, (cx, cy), radius)
            return
        extent = int(radius * 2) + 2
        layer = pygame.Surface((extent, extent), pygame.SRCALPHA)
        pygame.draw.circle(
            layer, (*color, _alpha_byte(alpha)), (extent / 2, extent / 2), radius,
        )
        self.target.blit(layer, (cx - extent / 2, cy - extent / 2))

    def text(
        self, message: str, cx: float, cy: float, size: int, color: Color,
    ) -> None:
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.SysFont(_FONT_NAME, size)
            self._fonts[size] = font
        rendered = font.render(message, True, color)
        self.target.blit(rendered, rendered.get_rect(center=(cx, cy)))


def _alpha_byte(alpha: float) -> int:
    return max(0, min(255, round(alpha * 255)))


def handle_event(loop: GameLoop, event: pygame.event.Event) -> bool:
    """Apply one pygame event to the loop. Returns False when the game should quit."""
    if event.type == pygame.QUIT:
        return False
    if event.type != pygame.KEYDOWN:
        return True
    if event.key == pygame.K_ESCAPE:
        return False
    if event.key == pygame.K_SPACE:
        loop.on_restart()
        return True
    direction = KEY_TO_DIRECTION.get(event.key)
    if direction is not None:
        loop.on_direction_input(direction)
    return True


def fit_config_to_display(
    config: GameConfig, width_px: int, height_px: int,
) -> GameConfig:
    """Size the board to a display, keeping every other setting."""
    fitted = GameConfig.for_viewport(width_px, height_px, cell_size=config.cell_size)
    return dataclasses.replace(
        config, grid_width=fitted.grid_width, grid_height=fitted.grid_height,
    )


def run(config: GameConfig, fit_display: bool = False) -> int:
    """Open a window and play until the user quits.

    With *fit_display*, the board is sized to the current display first.
    """
    pygame.init()
    try:
        if fit_display:
            info = pygame.display.Info()
            if info.current_w > 0 and info.current_h > 0:
                config = fit_config_to_display(
                    config, info.current_w, info.current_h,
                )
        window = pygame.display.set_mode(config.window_size)
        pygame.display.set_caption("Prism Snake")
        surface = PygameSurface(window)
        loop = GameLoop.from_config(config)
        renderer = Renderer(cell_size=config.cell_size)
        clock = pygame.time.Clock()
        logger.info(
            "Playing on a %dx%d grid at %.0f ms per tick.",
            config.grid_width, config.grid_height, config.step_ms,
        )

        running = True
        while running:
            clock.tick(config.fps)
            for event in pygame.event.get():
                if not handle_event(loop, event):
                    running = False
                    break
            loop.on_frame(pygame.time.get_ticks())
            renderer.draw(
                surface, loop.session, loop.growths, loop.generation,
            )
            pygame.display.flip()
    finally:
        pygame.quit()
    return 0
