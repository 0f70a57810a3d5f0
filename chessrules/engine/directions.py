from __future__ import annotations

from enum import Enum
from typing import Tuple


class Direction(Enum):
    """Step vectors on the board grid.

    Values are ``(dx, dy)`` offsets where ``dy == -1`` moves toward rank 8
    (row 0 of the grid). Compass names: N is up the board for White.
    """

    N = (0, -1)
    S = (0, 1)
    E = (1, 0)
    W = (-1, 0)
    NE = (1, -1)
    NW = (-1, -1)
    SE = (1, 1)
    SW = (-1, 1)
    # Knight jumps
    NNE = (1, -2)
    ENE = (2, -1)
    ESE = (2, 1)
    SSE = (1, 2)
    SSW = (-1, 2)
    WSW = (-2, 1)
    WNW = (-2, -1)
    NNW = (-1, -2)

    @property
    def step(self) -> Tuple[int, int]:
        return self.value

    @property
    def opposite(self) -> "Direction":
        dx, dy = self.value
        return Direction((-dx, -dy))

    @property
    def is_orthogonal(self) -> bool:
        return self in ORTHOGONAL

    @property
    def is_diagonal(self) -> bool:
        return self in DIAGONAL


ORTHOGONAL = (Direction.N, Direction.S, Direction.E, Direction.W)
DIAGONAL = (Direction.NE, Direction.NW, Direction.SE, Direction.SW)
SLIDING = ORTHOGONAL + DIAGONAL
KNIGHT_JUMPS = (
    Direction.NNE,
    Direction.ENE,
    Direction.ESE,
    Direction.SSE,
    Direction.SSW,
    Direction.WSW,
    Direction.WNW,
    Direction.NNW,
)
ALL_DIRECTIONS = SLIDING + KNIGHT_JUMPS


def step_of(direction: Direction) -> Tuple[int, int]:
    """Return the ``(dx, dy)`` offset of ``direction``."""
    return direction.value


def direction_between(origin: Tuple[int, int], target: Tuple[int, int]) -> Direction | None:
    """Return the sliding direction leading from ``origin`` toward ``target``.

    Returns ``None`` when both squares are equal or do not share a rank, file,
    or diagonal.
    """
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    if dx == 0 and dy == 0:
        return None
    if dx != 0 and dy != 0 and abs(dx) != abs(dy):
        return None
    sx = (dx > 0) - (dx < 0)
    sy = (dy > 0) - (dy < 0)
    return Direction((sx, sy))
