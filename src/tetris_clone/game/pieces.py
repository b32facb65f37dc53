from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import List, Sequence, Tuple

import numpy as np


Color = Tuple[int, int, int]
Coordinate = Tuple[int, int]
Shape = np.ndarray


class TetrominoType(IntEnum):
    I = 0
    O = 1
    T = 2
    L = 3
    J = 4
    S = 5
    Z = 6


def _state(width: int, bits: Sequence[int]) -> Shape:
    """Build a read-only bitmap with `width` columns from a flat row-major bit list."""
    shape = np.array(bits, dtype=np.int8).reshape(-1, width)
    shape.flags.writeable = False
    return shape


@dataclass(frozen=True, eq=False)
class PieceDefinition:
    kind: TetrominoType
    rotations: Tuple[Shape, ...]
    color: Color

    @property
    def rotation_count(self) -> int:
        return len(self.rotations)


# Rotation states are precomputed tables, so the count differs per shape.
PIECES: Tuple[PieceDefinition, ...] = (
    PieceDefinition(
        TetrominoType.I,
        (_state(4, [1, 1, 1, 1]), _state(1, [1, 1, 1, 1])),
        (3, 252, 248),
    ),
    PieceDefinition(
        TetrominoType.O,
        (_state(2, [1, 1, 1, 1]),),
        (252, 244, 3),
    ),
    PieceDefinition(
        TetrominoType.T,
        (
            _state(3, [0, 1, 0, 1, 1, 1]),
            _state(2, [1, 0, 1, 1, 1, 0]),
            _state(3, [1, 1, 1, 0, 1, 0]),
            _state(2, [0, 1, 1, 1, 0, 1]),
        ),
        (161, 3, 252),
    ),
    PieceDefinition(
        TetrominoType.L,
        (
            _state(3, [0, 0, 1, 1, 1, 1]),
            _state(2, [1, 0, 1, 0, 1, 1]),
            _state(3, [1, 1, 1, 1, 0, 0]),
            _state(2, [1, 1, 0, 1, 0, 1]),
        ),
        (252, 161, 3),
    ),
    PieceDefinition(
        TetrominoType.J,
        (
            _state(3, [1, 0, 0, 1, 1, 1]),
            _state(2, [1, 1, 1, 0, 1, 0]),
            _state(3, [1, 1, 1, 0, 0, 1]),
            _state(2, [0, 1, 0, 1, 1, 1]),
        ),
        (3, 48, 252),
    ),
    PieceDefinition(
        TetrominoType.S,
        (_state(3, [0, 1, 1, 1, 1, 0]), _state(2, [1, 0, 1, 1, 0, 1])),
        (3, 252, 28),
    ),
    PieceDefinition(
        TetrominoType.Z,
        (_state(3, [1, 1, 0, 0, 1, 1]), _state(2, [0, 1, 1, 1, 1, 0])),
        (252, 3, 3),
    ),
)


@dataclass
class ActivePiece:
    """The falling piece: a catalog id, a rotation index and a top-left anchor.

    `y` may be negative while the piece is still partly above the board. No
    bounds are checked here; that is the grid's job.
    """

    shape_id: int
    rotation: int = 0
    x: int = 0
    y: int = 0

    @classmethod
    def spawn(cls, shape_id: int, board_width: int) -> "ActivePiece":
        width = PIECES[shape_id].rotations[0].shape[1]
        return cls(shape_id=int(shape_id), rotation=0, x=(board_width - width) // 2, y=0)

    @property
    def definition(self) -> PieceDefinition:
        return PIECES[self.shape_id]

    @property
    def color(self) -> Color:
        return self.definition.color

    def shape(self) -> Shape:
        return self.definition.rotations[self.rotation]

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self) -> "ActivePiece":
        return replace(self, rotation=(self.rotation + 1) % self.definition.rotation_count)

    def cells_at(self, origin_x: int, origin_y: int) -> List[Coordinate]:
        s = self.shape()
        h, w = s.shape
        cells: List[Coordinate] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def occupied_cells(self) -> List[Coordinate]:
        return self.cells_at(self.x, self.y)
