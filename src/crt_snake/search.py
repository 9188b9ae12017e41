"""Breadth-first searches over the playfield."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from crt_snake.codec import CellFlag

if TYPE_CHECKING:
    from crt_snake.grid import Coord, Grid


def reachable_free_cells(grid: Grid, start: Coord) -> list[Coord]:
    """Return every zero-mask cell reachable from *start*.

    Any non-zero cell is an obstacle. *start* itself is only part of the
    result when it is free; the search still expands from it either way so
    the snake's head can be used as the origin. Cells are returned in BFS
    order.
    """
    visited = {start}
    queue: deque[Coord] = deque([start])
    result: list[Coord] = []
    if grid.in_bounds(*start) and grid.get(*start) == CellFlag.EMPTY:
        result.append(start)

    while queue:
        x, y = queue.popleft()
        for nx, ny in grid.neighbours(x, y):
            if (nx, ny) in visited:
                continue
            visited.add((nx, ny))
            if grid.cells[ny, nx] != CellFlag.EMPTY:
                continue
            result.append((nx, ny))
            queue.append((nx, ny))

    return result


def distance_to_nearest_obstacle(grid: Grid, start: Coord) -> int | None:
    """Return the hop count from *start* to the closest non-zero cell.

    Unlike :func:`reachable_free_cells` obstacles are the search target, not
    a barrier. Returns ``None`` when the grid holds no obstacle at all.
    """
    visited = {start}
    queue: deque[tuple[Coord, int]] = deque([(start, 0)])

    while queue:
        (x, y), dist = queue.popleft()
        if grid.cells[y, x] != CellFlag.EMPTY:
            return dist
        for nxt in grid.neighbours(x, y):
            if nxt not in visited:
                visited.add(nxt)
                queue.append((nxt, dist + 1))

    return None
