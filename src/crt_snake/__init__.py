"""CRT Snake: bitmask grid game engine."""

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
from crt_snake.engine import GameEngine, GridCorruptedError, SessionState
from crt_snake.grid import Grid
from crt_snake.input_queue import DirectionQueue
from crt_snake.search import distance_to_nearest_obstacle, reachable_free_cells
from crt_snake.signals import FrameSignals, noise_level

__all__ = [
    "AppleSpawner",
    "CellFlag",
    "Direction",
    "DirectionQueue",
    "FrameSignals",
    "GameConfig",
    "GameEngine",
    "Grid",
    "GridCorruptedError",
    "InvalidDirection",
    "InvalidMask",
    "SessionState",
    "direction_to_mask",
    "distance_to_nearest_obstacle",
    "mask_to_direction",
    "noise_level",
    "opposite",
    "reachable_free_cells",
]
