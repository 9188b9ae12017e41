"""Per-cell bitmask encoding and direction conversions."""

from __future__ import annotations

import enum
from collections.abc import Sequence


class InvalidDirection(ValueError):
    """Raised when a vector is not one of the four axis-aligned unit vectors."""


class InvalidMask(ValueError):
    """Raised when a cell mask does not carry exactly one directional bit."""


class CellFlag(enum.IntFlag):
    """Bits stored in each grid cell.

    The four directional bits describe which neighbours a body or wall
    segment connects to. ``SEGMENT`` marks an occupied cell and ``APPLE``
    marks food.
    """

    EMPTY = 0
    TOP = 1
    BOTTOM = 2
    LEFT = 4
    RIGHT = 8
    SEGMENT = 16
    APPLE = 32


DIRECTIONAL = CellFlag.TOP | CellFlag.BOTTOM | CellFlag.LEFT | CellFlag.RIGHT
HORIZONTAL = CellFlag.LEFT | CellFlag.RIGHT | CellFlag.SEGMENT
VERTICAL = CellFlag.TOP | CellFlag.BOTTOM | CellFlag.SEGMENT


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values; ``y`` grows upward."""

    RIGHT = (1, 0)
    LEFT = (-1, 0)
    UP = (0, 1)
    DOWN = (0, -1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def from_vector(cls, vector: Direction | Sequence[int]) -> Direction:
        """Coerce a ``Direction`` or a 2-sequence into a ``Direction``.

        Raises :class:`InvalidDirection` for the zero vector, diagonals and
        anything that is not a pair of integers.
        """
        if isinstance(vector, Direction):
            return vector
        try:
            dx, dy = vector
            key = (int(dx), int(dy))
        except (TypeError, ValueError) as exc:
            raise InvalidDirection(f"Invalid direction: {vector!r}") from exc
        if key != (dx, dy):
            raise InvalidDirection(f"Invalid direction: {vector!r}")
        try:
            return cls(key)
        except ValueError as exc:
            raise InvalidDirection(f"Invalid direction: {vector!r}") from exc


_DIRECTION_BITS: dict[Direction, CellFlag] = {
    Direction.RIGHT: CellFlag.RIGHT,
    Direction.LEFT: CellFlag.LEFT,
    Direction.UP: CellFlag.TOP,
    Direction.DOWN: CellFlag.BOTTOM,
}

_BIT_DIRECTIONS: dict[CellFlag, Direction] = {
    bit: direction for direction, bit in _DIRECTION_BITS.items()
}

_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def opposite(direction: Direction | Sequence[int]) -> Direction:
    """Return the direction pointing the other way."""
    return _OPPOSITES[Direction.from_vector(direction)]


def direction_to_mask(direction: Direction | Sequence[int]) -> CellFlag:
    """Map a unit vector to the directional bit that points along it."""
    return _DIRECTION_BITS[Direction.from_vector(direction)]


def mask_to_direction(mask: int) -> Direction:
    """Extract the single direction encoded in *mask*.

    ``SEGMENT`` and ``APPLE`` are ignored. Exactly one of the four
    directional bits must be set, otherwise :class:`InvalidMask` is raised.
    """
    bits = CellFlag(int(mask) & DIRECTIONAL)
    try:
        return _BIT_DIRECTIONS[bits]
    except KeyError:
        raise InvalidMask(
            f"Expected exactly one directional bit in mask {int(mask):#04x}."
        ) from None
