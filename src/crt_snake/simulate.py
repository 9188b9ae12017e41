"""Headless play with a simple space-seeking autopilot."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass

from crt_snake.codec import CellFlag, Direction, opposite
from crt_snake.config import GameConfig
from crt_snake.engine import GameEngine
from crt_snake.search import reachable_free_cells

logger = logging.getLogger(__name__)


def choose_direction(engine: GameEngine) -> Direction:
    """Pick the turn that keeps the most room ahead.

    Apples directly adjacent are taken when the space behind them is at
    least as large as the snake's pending growth. Otherwise the neighbour
    opening onto the largest free region wins, staying on the current
    heading when regions tie.
    """
    grid = engine.grid
    best = engine.direction
    best_space = -1
    options = [engine.direction] + [
        d for d in Direction
        if d not in (engine.direction, opposite(engine.direction))
    ]
    for direction in options:
        x, y = grid.step(engine.head, direction)
        cell = grid.get(x, y)
        if cell & CellFlag.SEGMENT:
            continue
        space = len(reachable_free_cells(grid, (x, y)))
        if cell & CellFlag.APPLE and space >= engine.pending_growth:
            return direction
        if space > best_space:
            best, best_space = direction, space
    return best


@dataclass
class SimulationResult:
    """Outcome of one headless game."""

    ticks: int
    score: int
    length: int
    game_over: bool
    wall_time_seconds: float

    def summary(self) -> str:
        status = "game over" if self.game_over else "stopped"
        return (
            f"Simulation {status} after {self.ticks} ticks: "
            f"score {self.score}, length {self.length} "
            f"({self.wall_time_seconds:.2f}s)"
        )

    def to_dict(self) -> dict:
        return asdict(self)


def run_headless(
    config: GameConfig | None = None,
    *,
    seed: int | None = None,
    max_ticks: int = 10_000,
) -> SimulationResult:
    """Play one game with :func:`choose_direction` until it ends.

    Stops early after *max_ticks* ticks.
    """
    engine = GameEngine(config, seed=seed)
    start = time.perf_counter()
    while not engine.game_over and engine.ticks < max_ticks:
        engine.enqueue_direction(choose_direction(engine))
        engine.tick()

    elapsed = time.perf_counter() - start
    result = SimulationResult(
        ticks=engine.ticks,
        score=engine.current_score(),
        length=engine.current_length,
        game_over=engine.game_over,
        wall_time_seconds=elapsed,
    )
    logger.info(result.summary())
    return result
