"""Square bitmask playfield bounded by a wall ring."""

from __future__ import annotations

import numpy as np

from crt_snake.codec import HORIZONTAL, VERTICAL, CellFlag, Direction

MIN_GRID_SIZE = 8

Coord = tuple[int, int]


class Grid:
    """NumPy-backed N×N grid of :class:`CellFlag` bitmasks.

    Coordinates are ``(x, y)`` with ``y`` growing upward. The backing array
    is indexed ``cells[y, x]`` so that its flat layout matches
    ``x + N * y``, which is the order a renderer uploads it in.
    """

    def __init__(self, size: int = 32) -> None:
        if size < MIN_GRID_SIZE:
            raise ValueError(
                f"Grid size must be at least {MIN_GRID_SIZE}."
            )
        self.size = size
        self.cells = np.zeros((size, size), dtype=np.uint8)

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = CellFlag.EMPTY

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= x < self.size and 0 <= y < self.size

    def get(self, x: int, y: int) -> CellFlag:
        """Return the mask at the given coordinate."""
        return CellFlag(int(self.cells[y, x]))

    def set(self, x: int, y: int, mask: int) -> None:
        """Overwrite the mask at the given coordinate."""
        self.cells[y, x] = int(mask)

    def add_flags(self, x: int, y: int, flags: int) -> None:
        """OR *flags* into the cell."""
        self.cells[y, x] |= np.uint8(flags)

    def clear_flags(self, x: int, y: int, flags: int) -> None:
        """Remove *flags* from the cell, leaving other bits untouched."""
        self.cells[y, x] &= np.uint8(~int(flags) & 0xFF)

    def step(self, pos: Coord, direction: Direction) -> Coord:
        """Return the coordinate one cell away from *pos* along *direction*."""
        return pos[0] + direction.dx, pos[1] + direction.dy

    def neighbours(self, x: int, y: int) -> list[Coord]:
        """Return the in-bounds 4-connected neighbours of a cell."""
        result: list[Coord] = []
        for direction in Direction:
            nx, ny = x + direction.dx, y + direction.dy
            if self.in_bounds(nx, ny):
                result.append((nx, ny))
        return result

    def build_walls(self) -> None:
        """Stamp the permanent wall ring onto the outermost cells.

        Each wall tile connects to its ring neighbours, so edges carry a
        straight pair of bits and corners carry a bend.
        """
        last = self.size - 1
        self.cells[0, :] = HORIZONTAL
        self.cells[last, :] = HORIZONTAL
        self.cells[:, 0] = VERTICAL
        self.cells[:, last] = VERTICAL
        self.set(0, 0, CellFlag.TOP | CellFlag.RIGHT | CellFlag.SEGMENT)
        self.set(last, 0, CellFlag.TOP | CellFlag.LEFT | CellFlag.SEGMENT)
        self.set(0, last, CellFlag.BOTTOM | CellFlag.RIGHT | CellFlag.SEGMENT)
        self.set(last, last, CellFlag.BOTTOM | CellFlag.LEFT | CellFlag.SEGMENT)

    def is_wall(self, x: int, y: int) -> bool:
        """Check whether a coordinate belongs to the wall ring."""
        last = self.size - 1
        return x in (0, last) or y in (0, last)

    def free_cells(self) -> list[Coord]:
        """Return all zero-mask cell coordinates."""
        ys, xs = np.nonzero(self.cells == CellFlag.EMPTY)
        return list(zip(xs.tolist(), ys.tolist(), strict=True))

    def count_flag(self, flag: CellFlag) -> int:
        """Count cells that carry *flag*."""
        return int(np.count_nonzero(self.cells & np.uint8(flag)))

    def find_flag(self, flag: CellFlag) -> list[Coord]:
        """Return coordinates of every cell carrying *flag*."""
        ys, xs = np.nonzero(self.cells & np.uint8(flag))
        return list(zip(xs.tolist(), ys.tolist(), strict=True))

    def snapshot(self) -> np.ndarray:
        """Return a copy of the mask array that callers may keep."""
        return self.cells.copy()

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "size": self.size,
            "cells": self.cells.tolist(),
        }
