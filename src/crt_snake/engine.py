"""Tick-based game engine over the bitmask grid."""

from __future__ import annotations

import enum
import logging
import math
import time
from collections.abc import Callable, Sequence

import numpy as np

from crt_snake.apple import AppleSpawner
from crt_snake.codec import (
    CellFlag,
    Direction,
    InvalidDirection,
    InvalidMask,
    direction_to_mask,
    mask_to_direction,
    opposite,
)
from crt_snake.config import GameConfig
from crt_snake.grid import Coord, Grid
from crt_snake.input_queue import DirectionQueue

logger = logging.getLogger(__name__)

# Heading of each leg of the starting spiral, repeated every four legs.
_SPIRAL_TURNS = (Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN)


class SessionState(str, enum.Enum):
    """Lifecycle states for a game session."""

    RUNNING = "running"
    GAME_OVER = "game_over"


class GridCorruptedError(RuntimeError):
    """Raised when a tick hits a grid that violates the chain encoding."""


def spiral_path(center: Coord, coils: int) -> list[Coord]:
    """Return the starting snake's cells from tail to head.

    The path is a two-cell stub heading left followed by *coils* square
    turns, each made of four straight legs that grow by one cell every
    second leg. The last leg always heads left and its head sits on the
    outside of the spiral.
    """
    x, y = center
    path = [(x, y)]
    for leg in range(4 * coils + 1):
        direction = _SPIRAL_TURNS[leg % 4]
        for _ in range(leg // 2 + 1):
            x, y = x + direction.dx, y + direction.dy
            path.append((x, y))
    return path


class GameEngine:
    """Single-snake, tick-based game engine.

    The grid is the only record of the snake: each body cell carries the
    bit pointing at the next cell toward the head plus the bit pointing
    back where it came from, so only ``head`` and ``tail`` are tracked
    separately. Each call to :meth:`tick` advances the game by one step.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.clock = clock
        self.rng = np.random.default_rng(seed)
        self.grid = Grid(self.config.grid_size)
        self.apple_spawner = AppleSpawner(
            self.grid,
            candidates=self.config.apple_candidates,
            free_margin=self.config.apple_free_margin,
            rng=self.rng,
        )
        self.queue = DirectionQueue(self.config.queue_capacity)
        self.restart()

    # -- lifecycle ---------------------------------------------------------

    def restart(self) -> None:
        """Reset the session: walls, starting spiral, scalars and one apple."""
        self.grid.clear()
        self.queue.clear()

        center = (self.config.grid_size // 2, self.config.grid_size // 2)
        path = spiral_path(center, self.config.start_coil)
        self._lay_path(path)
        self.grid.build_walls()

        self.tail: Coord = path[0]
        self.head: Coord = path[-1]
        self.direction = Direction.LEFT
        self.current_length = len(path)
        self.pending_growth = 0
        self.state = SessionState.RUNNING
        self.ticks = 0
        self.apple_eaten_at = self.clock()

        self.apple_spawner.place_uniform()
        logger.info(
            "Session restarted (grid=%d, length=%d).",
            self.grid.size, self.current_length,
        )

    def _lay_path(self, path: Sequence[Coord]) -> None:
        """Write a chain of connected segments onto the grid."""
        for x, y in path:
            self.grid.set(x, y, CellFlag.SEGMENT)
        for (x0, y0), (x1, y1) in zip(path, path[1:]):
            direction = Direction.from_vector((x1 - x0, y1 - y0))
            self.grid.add_flags(x0, y0, direction_to_mask(direction))
            self.grid.add_flags(x1, y1, direction_to_mask(opposite(direction)))

    # -- input -------------------------------------------------------------

    def enqueue_direction(self, direction: Direction | Sequence[int]) -> bool:
        """Queue a turn for a future tick.

        Anything other than one of the four unit vectors is ignored, as
        are turns beyond the queue capacity and turns after game over.
        Returns True if the direction was queued.
        """
        if self.game_over:
            return False
        try:
            parsed = Direction.from_vector(direction)
        except InvalidDirection:
            logger.debug("Ignoring invalid direction %r.", direction)
            return False
        return self.queue.push(parsed)

    # -- simulation --------------------------------------------------------

    def tick(self) -> None:
        """Advance the game by one step. No-op once the game is over.

        A codec failure means the grid no longer encodes a valid chain. The
        pre-tick grid and positions are restored, the session is ended and
        :class:`GridCorruptedError` is raised.
        """
        if self.game_over:
            return

        saved_cells = self.grid.snapshot()
        saved = (
            self.head, self.tail, self.direction,
            self.current_length, self.pending_growth, self.apple_eaten_at,
        )
        try:
            self._advance()
        except (InvalidDirection, InvalidMask) as exc:
            self.grid.cells[:] = saved_cells
            (
                self.head, self.tail, self.direction,
                self.current_length, self.pending_growth, self.apple_eaten_at,
            ) = saved
            self.state = SessionState.GAME_OVER
            logger.exception("Grid corrupted at tick %d.", self.ticks)
            raise GridCorruptedError(str(exc)) from exc
        self.ticks += 1

    def step(self) -> dict:
        """Tick once and return the resulting state dictionary."""
        self.tick()
        return self.get_state()

    def _advance(self) -> None:
        queued = self.queue.pop()
        if queued is not None and queued != opposite(self.direction):
            self.direction = queued

        # The chain continues from the current head along the heading.
        self.grid.add_flags(*self.head, direction_to_mask(self.direction))
        self.head = self.grid.step(self.head, self.direction)

        front = self.grid.get(*self.head)
        if front & CellFlag.SEGMENT:
            self.state = SessionState.GAME_OVER
            logger.info(
                "Game over at tick %d with score %d.",
                self.ticks, self.current_score(),
            )
            return
        self.grid.set(
            *self.head,
            CellFlag.SEGMENT | direction_to_mask(opposite(self.direction)),
        )

        if front & CellFlag.APPLE:
            self.apple_eaten_at = self.clock()
            self.apple_spawner.place(self.head, self.pending_growth)
            # Length rises per growth tick below, so it is not set to target here.
            target = math.ceil(self.current_length * self.config.growth_ratio)
            self.pending_growth += target - self.current_length

        if self.pending_growth > 0:
            self.pending_growth -= 1
            self.current_length += 1
        else:
            self._retract_tail()

    def _retract_tail(self) -> None:
        """Drop the last segment and make the next one the new tail."""
        tail_dir = mask_to_direction(self.grid.get(*self.tail))
        self.grid.set(*self.tail, CellFlag.EMPTY)
        self.tail = self.grid.step(self.tail, tail_dir)
        self.grid.clear_flags(
            *self.tail, direction_to_mask(opposite(tail_dir)),
        )

    # -- observers ---------------------------------------------------------

    @property
    def game_over(self) -> bool:
        return self.state == SessionState.GAME_OVER

    def is_game_over(self) -> bool:
        """Return whether the session has ended."""
        return self.game_over

    def snapshot_grid(self) -> np.ndarray:
        """Return a copy of the N×N mask array for rendering."""
        return self.grid.snapshot()

    def time_since_last_score(self) -> float:
        """Seconds elapsed since the last apple was eaten (or the restart)."""
        return self.clock() - self.apple_eaten_at

    def current_score(self) -> int:
        """Score scaled to the board: 1000 means the snake fills every cell."""
        # Halves round up.
        return math.floor(1000 * self.current_length / self.grid.size**2 + 0.5)

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.ticks,
            "state": self.state.value,
            "game_over": self.game_over,
            "score": self.current_score(),
            "length": self.current_length,
            "pending_growth": self.pending_growth,
            "direction": list(self.direction.value),
            "head": list(self.head),
            "tail": list(self.tail),
            "queued": [list(d.value) for d in self.queue],
            "time_since_score": self.time_since_last_score(),
            "grid": self.grid.to_dict(),
        }
