from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np


Coordinate = Tuple[int, int]
Color = Tuple[int, int, int]


class GameGrid:
    """Fixed-size 2D board of optionally colored cells.

    Occupancy lives in a boolean mask of shape (height, width) and colors in a
    uint8 plane of shape (height, width, 3). Row 0 is the top of the board.
    Only occupancy matters to the rules; colors are carried for display and
    persistence.
    """

    def __init__(self, width: int, height: int) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"board dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.occupied = np.zeros((self.height, self.width), dtype=np.bool_)
        self.colors = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    @classmethod
    def from_cells(cls, width: int, height: int, cells: Sequence[Optional[Color]]) -> "GameGrid":
        """Build a grid from a row-major list of `None` or RGB triples."""
        grid = cls(width, height)
        if len(cells) != grid.width * grid.height:
            raise ValueError(
                f"expected {grid.width * grid.height} cells for a {grid.width}x{grid.height} board, got {len(cells)}"
            )
        for i, cell in enumerate(cells):
            if cell is not None:
                y, x = divmod(i, grid.width)
                grid.occupied[y, x] = True
                grid.colors[y, x] = cell
        return grid

    def reset(self) -> None:
        self.occupied.fill(False)
        self.colors.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collides(self, cells: Iterable[Coordinate]) -> bool:
        """True if any cell is off the sides, below the floor, or on an occupied cell.

        Cells above the top (negative y) only have to respect the side walls.
        """
        for x, y in cells:
            if x < 0 or x >= self.width or y >= self.height:
                return True
            if y >= 0 and self.occupied[y, x]:
                return True
        return False

    def lock(self, cells: Iterable[Coordinate], color: Color) -> None:
        for x, y in cells:
            if y >= 0:
                self.occupied[y, x] = True
                self.colors[y, x] = color

    def clear_full_rows(self) -> int:
        full_rows = np.where(np.all(self.occupied, axis=1))[0]
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        # Drop every full row at once and pad empty rows at the top
        self.occupied = np.vstack(
            (np.zeros((num, self.width), dtype=np.bool_), np.delete(self.occupied, full_rows, axis=0))
        )
        self.colors = np.vstack(
            (np.zeros((num, self.width, 3), dtype=np.uint8), np.delete(self.colors, full_rows, axis=0))
        )
        return num

    def cell(self, x: int, y: int) -> Optional[Color]:
        if not self.occupied[y, x]:
            return None
        r, g, b = (int(c) for c in self.colors[y, x])
        return (r, g, b)

    def cells(self) -> List[Optional[Color]]:
        return [self.cell(x, y) for y in range(self.height) for x in range(self.width)]

    def clone_state(self) -> np.ndarray:
        return self.occupied.copy()
