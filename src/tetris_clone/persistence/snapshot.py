from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from tetris_clone.game.pieces import PIECES, ActivePiece
from .errors import SnapshotError


Color = Tuple[int, int, int]


@dataclass
class PieceRecord:
    id: int
    rotation: int
    x: int
    y: int


@dataclass
class GameSnapshot:
    """Everything needed to bring a session back. Pause state and timing are not part of it."""

    board: List[Optional[Color]]
    width: int
    height: int
    active_piece: PieceRecord
    next_piece_id: int
    is_game_over: bool
    gravity_delay_ms: int
    speed_up_counter: int
    score: int

    def validate(self) -> None:
        """Raise SnapshotError if the snapshot cannot describe a real session."""
        if self.width <= 0 or self.height <= 0:
            raise SnapshotError(f"board dimensions must be positive, got {self.width}x{self.height}")
        if len(self.board) != self.width * self.height:
            raise SnapshotError(
                f"board has {len(self.board)} cells, expected {self.width}x{self.height}={self.width * self.height}"
            )
        for i, cell in enumerate(self.board):
            if cell is None:
                continue
            if len(cell) != 3 or any(not 0 <= c <= 255 for c in cell):
                raise SnapshotError(f"cell {i} has an invalid color {cell!r}")
        if not 0 <= self.active_piece.id < len(PIECES):
            raise SnapshotError(f"unknown active piece id {self.active_piece.id}")
        count = PIECES[self.active_piece.id].rotation_count
        if not 0 <= self.active_piece.rotation < count:
            raise SnapshotError(
                f"rotation {self.active_piece.rotation} out of range for piece {self.active_piece.id} ({count} states)"
            )
        piece = ActivePiece(self.active_piece.id, self.active_piece.rotation, self.active_piece.x, self.active_piece.y)
        for x, y in piece.occupied_cells():
            # Rows above the top are allowed, the side walls and floor are not
            if not 0 <= x < self.width or y >= self.height:
                raise SnapshotError(
                    f"active piece at ({piece.x}, {piece.y}) has cell ({x}, {y}) outside the "
                    f"{self.width}x{self.height} board"
                )
        if not 0 <= self.next_piece_id < len(PIECES):
            raise SnapshotError(f"unknown next piece id {self.next_piece_id}")
        if self.gravity_delay_ms <= 0:
            raise SnapshotError(f"gravity delay must be positive, got {self.gravity_delay_ms}")
        if self.speed_up_counter < 0:
            raise SnapshotError(f"speed-up counter must not be negative, got {self.speed_up_counter}")
        if self.score < 0:
            raise SnapshotError(f"score must not be negative, got {self.score}")
