"""Cosmetic particle bursts. Never read by the simulation."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

PARTICLE_LIFETIME = 30
BURST_SIZE = 10


@dataclass
class Particle:
    """A short-lived square spark in pixel space."""

    x: float
    y: float
    vx: float
    vy: float
    color: tuple[int, int, int]
    lifetime: int = PARTICLE_LIFETIME

    @property
    def alpha(self) -> float:
        return self.lifetime / PARTICLE_LIFETIME

    def update(self) -> bool:
        """Move one tick; return False once the particle has expired."""
        self.x += self.vx
        self.y += self.vy
        self.lifetime -= 1
        return self.lifetime > 0


class ParticleField:
    """Pool of live particles, advanced once per simulated tick."""

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.particles: list[Particle] = []

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def burst(self, x: float, y: float, count: int = BURST_SIZE) -> None:
        """Emit *count* pale particles from pixel position ``(x, y)``."""
        velocities = (self.rng.random((count, 2)) - 0.5) * 4
        colors = self.rng.random((count, 3)) * 105 + 150
        for (vx, vy), rgb in zip(velocities, colors, strict=True):
            self.particles.append(
                Particle(
                    x=x, y=y, vx=float(vx), vy=float(vy),
                    color=tuple(int(c) for c in rgb),
                ),
            )

    def update(self) -> None:
        self.particles = [p for p in self.particles if p.update()]

    def clear(self) -> None:
        self.particles.clear()
