"""Game configuration constants."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from crt_snake.grid import MIN_GRID_SIZE

logger = logging.getLogger(__name__)


def max_start_coil(grid_size: int) -> int:
    """Largest starting spiral that leaves the head a free cell ahead."""
    return grid_size // 2 - 3


@dataclass(frozen=True)
class GameConfig:
    """Fixed parameters of a game session.

    Supports JSON serialization for reproducibility.
    """

    # Playfield
    grid_size: int = 32
    start_coil: int = 4

    # Timing
    tick_rate_ms: int = 100
    time_to_full_noise: float = 2.0

    # Growth
    growth_ratio: float = 1.1

    # Input
    queue_capacity: int = 5

    # Apple placement
    apple_candidates: int = 7
    apple_free_margin: int = 5

    def __post_init__(self) -> None:
        if self.grid_size < MIN_GRID_SIZE:
            raise ValueError(
                f"grid_size must be at least {MIN_GRID_SIZE}."
            )
        if not 0 <= self.start_coil <= max_start_coil(self.grid_size):
            raise ValueError(
                f"start_coil must be between 0 and "
                f"{max_start_coil(self.grid_size)} for a "
                f"{self.grid_size}x{self.grid_size} grid."
            )
        if self.tick_rate_ms <= 0:
            raise ValueError("tick_rate_ms must be positive.")
        if self.time_to_full_noise <= 0:
            raise ValueError("time_to_full_noise must be positive.")
        if self.growth_ratio <= 1.0:
            raise ValueError("growth_ratio must be greater than 1.")
        if self.queue_capacity < 1:
            raise ValueError("queue_capacity must be at least 1.")
        if self.apple_candidates < 1:
            raise ValueError("apple_candidates must be at least 1.")
        if self.apple_free_margin < 0:
            raise ValueError("apple_free_margin must be >= 0.")

    @property
    def tick_interval(self) -> float:
        """Tick period in seconds."""
        return self.tick_rate_ms / 1000.0

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
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
