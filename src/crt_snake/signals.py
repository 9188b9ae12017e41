"""Per-frame values handed to the renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from crt_snake.engine import GameEngine


def noise_level(time_since_score: float, time_to_full_noise: float) -> float:
    """Linear ramp from 0 right after scoring to 1 at *time_to_full_noise*."""
    if time_to_full_noise <= 0:
        raise ValueError("time_to_full_noise must be positive.")
    return min(1.0, max(0.0, time_since_score / time_to_full_noise))


@dataclass(frozen=True)
class FrameSignals:
    """Read-only snapshot of everything a frame needs."""

    grid: np.ndarray
    game_over: bool
    time_since_score: float
    score: int
    noise_level: float

    @classmethod
    def capture(cls, engine: GameEngine) -> FrameSignals:
        elapsed = engine.time_since_last_score()
        # The game over screen is shown without noise.
        level = 0.0 if engine.is_game_over() else noise_level(
            elapsed, engine.config.time_to_full_noise,
        )
        return cls(
            grid=engine.snapshot_grid(),
            game_over=engine.is_game_over(),
            time_since_score=elapsed,
            score=engine.current_score(),
            noise_level=level,
        )

    def to_dict(self, tick: int | None = None) -> dict:
        """Serialize to the frame message pushed to clients."""
        payload = {
            "score": self.score,
            "game_over": self.game_over,
            "time_since_score": self.time_since_score,
            "noise_level": self.noise_level,
            "grid": self.grid.tolist(),
        }
        if tick is not None:
            payload = {"tick": tick, **payload}
        return payload
