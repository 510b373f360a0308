"""Fixed-timestep accumulator clock."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class FixedStepClock:
    """Converts irregular frame timestamps into a whole number of fixed steps.

    Each call to :meth:`advance` adds the real time elapsed since the
    previous call to an accumulator, then drains it in ``step_ms`` chunks.
    The first call only records the timestamp.
    """

    def __init__(
        self, step_ms: float = 100.0, max_steps_per_frame: int | None = None,
    ) -> None:
        if step_ms <= 0:
            raise ValueError("step_ms must be positive.")
        if max_steps_per_frame is not None and max_steps_per_frame < 1:
            raise ValueError("max_steps_per_frame must be at least 1.")
        self.step_ms = step_ms
        self.max_steps_per_frame = max_steps_per_frame
        self.last_timestamp: float | None = None
        self.accumulator = 0.0

    def advance(self, timestamp: float) -> int:
        """Record a frame timestamp and return how many steps are due."""
        if self.last_timestamp is None:
            self.last_timestamp = timestamp
            return 0

        delta = timestamp - self.last_timestamp
        self.last_timestamp = timestamp
        if delta < 0:
            delta = 0.0
        self.accumulator += delta

        steps = 0
        while self.accumulator >= self.step_ms:
            self.accumulator -= self.step_ms
            steps += 1
            if (
                self.max_steps_per_frame is not None
                and steps >= self.max_steps_per_frame
            ):
                if self.accumulator >= self.step_ms:
                    logger.debug(
                        "Discarding %.1f ms of backlog after %d steps.",
                        self.accumulator, steps,
                    )
                    self.accumulator %= self.step_ms
                break
        return steps

    def reset(self) -> None:
        self.last_timestamp = None
        self.accumulator = 0.0
