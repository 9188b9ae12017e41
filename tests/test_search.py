"""Tests for the breadth-first searches."""

from crt_snake.codec import CellFlag
from crt_snake.grid import Grid
from crt_snake.search import distance_to_nearest_obstacle, reachable_free_cells


def _walled(size=8):
    grid = Grid(size)
    grid.build_walls()
    return grid


class TestReachableFreeCells:
    def test_open_board(self):
        grid = _walled()
        cells = reachable_free_cells(grid, (3, 3))
        assert len(cells) == 36
        assert len(set(cells)) == 36
        assert cells[0] == (3, 3)

    def test_origin_on_obstacle_is_excluded(self):
        grid = _walled()
        grid.set(3, 3, CellFlag.SEGMENT)
        cells = reachable_free_cells(grid, (3, 3))
        assert (3, 3) not in cells
        assert len(cells) == 35

    def test_barrier_splits_regions(self):
        grid = _walled()
        for y in range(1, 7):
            grid.set(4, y, CellFlag.SEGMENT)
        left = reachable_free_cells(grid, (2, 2))
        right = reachable_free_cells(grid, (6, 2))
        assert len(left) == 18
        assert len(right) == 12
        assert all(x < 4 for x, _ in left)

    def test_apple_cells_block(self):
        grid = _walled()
        grid.set(3, 3, CellFlag.APPLE)
        assert (3, 3) not in reachable_free_cells(grid, (1, 1))

    def test_enclosed(self):
        grid = _walled()
        assert reachable_free_cells(grid, (0, 0)) == []


class TestDistanceToNearestObstacle:
    def test_adjacent_to_wall(self):
        grid = _walled()
        assert distance_to_nearest_obstacle(grid, (1, 1)) == 1

    def test_on_obstacle(self):
        grid = _walled()
        assert distance_to_nearest_obstacle(grid, (0, 0)) == 0

    def test_centre(self):
        grid = _walled(9)
        assert distance_to_nearest_obstacle(grid, (4, 4)) == 4
        assert distance_to_nearest_obstacle(grid, (3, 4)) == 3

    def test_body_counts_as_obstacle(self):
        grid = _walled(9)
        grid.set(4, 5, CellFlag.SEGMENT)
        assert distance_to_nearest_obstacle(grid, (4, 4)) == 1

    def test_no_obstacles(self):
        grid = Grid(8)
        assert distance_to_nearest_obstacle(grid, (3, 3)) is None
