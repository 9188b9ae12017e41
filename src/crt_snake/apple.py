"""Apple placement policy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from crt_snake.codec import CellFlag
from crt_snake.search import distance_to_nearest_obstacle, reachable_free_cells

if TYPE_CHECKING:
    from crt_snake.grid import Coord, Grid

logger = logging.getLogger(__name__)


class AppleSpawner:
    """Chooses where food goes on the grid.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    """

    def __init__(
        self,
        grid: Grid,
        candidates: int = 7,
        free_margin: int = 5,
        rng: np.random.Generator | None = None,
    ) -> None:
        if candidates < 1:
            raise ValueError("candidates must be at least 1.")
        if free_margin < 0:
            raise ValueError("free_margin must be >= 0.")
        self.grid = grid
        self.candidates = candidates
        self.free_margin = free_margin
        self.rng = rng if rng is not None else np.random.default_rng()

    def place(self, head: Coord, pending_growth: int = 0) -> Coord | None:
        """Place an apple in the space reachable from *head*.

        Placement is skipped when fewer than ``pending_growth + free_margin``
        free cells remain reachable: the snake will run out of room soon
        anyway. Otherwise a handful of reachable cells are sampled with
        replacement and the one farthest from any obstacle wins, earliest
        sample first on ties.

        Returns the chosen position, or ``None`` if nothing was placed.
        """
        reachable = reachable_free_cells(self.grid, head)
        if not reachable:
            logger.warning("No reachable free cells; apple placement skipped.")
            return None
        if len(reachable) < pending_growth + self.free_margin:
            logger.debug(
                "Only %d reachable cells for %d pending growth; "
                "apple placement skipped.",
                len(reachable), pending_growth,
            )
            return None

        best: Coord | None = None
        best_dist = -1
        for idx in self.rng.integers(0, len(reachable), size=self.candidates):
            candidate = reachable[int(idx)]
            dist = distance_to_nearest_obstacle(self.grid, candidate)
            if dist is not None and dist > best_dist:
                best, best_dist = candidate, dist

        if best is None:
            # The board has no obstacles at all; any sample is as good.
            best = reachable[0]
        self.grid.set(best[0], best[1], CellFlag.APPLE)
        logger.debug("Apple placed at %s (clearance %d).", best, best_dist)
        return best

    def place_uniform(self) -> Coord | None:
        """Place an apple on a uniformly random empty cell.

        Returns the chosen position, or ``None`` if the grid is full.
        """
        empty = self.grid.free_cells()
        if not empty:
            logger.warning("No empty cells available for apple spawning.")
            return None
        pos = empty[int(self.rng.integers(len(empty)))]
        self.grid.set(pos[0], pos[1], CellFlag.APPLE)
        logger.debug("Apple placed at %s.", pos)
        return pos
