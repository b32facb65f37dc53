from __future__ import annotations

import random
import time
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

import numpy as np

from .grid import GameGrid
from .pieces import ActivePiece, Color, Coordinate, TetrominoType
from .rules import GravityRules, ScoringRules

if TYPE_CHECKING:
    from tetris_clone.persistence.snapshot import GameSnapshot


class Intent(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    PAUSE = 5
    SAVE = 6
    LOAD = 7
    QUIT = 8


class GameStatus(Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


# Horizontal offsets tried in order when a rotation collides
KICK_OFFSETS: Tuple[int, ...] = (0, 1, -1, 2, -2)


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board dimensions must be positive, got {self.width}x{self.height}")


@dataclass
class PlacementResult:
    lines_cleared: int
    points: int
    game_over: bool


@dataclass(frozen=True)
class GameView:
    """Read-only picture of a session for display."""

    width: int
    height: int
    cells: Tuple[Optional[Color], ...]
    active_cells: Tuple[Coordinate, ...]
    active_color: Color
    next_shape_id: int
    score: int
    status: GameStatus


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class TetrisGame:
    """One game session: board, falling piece, lookahead, score and gravity.

    `rng` only needs a `choice()` method and `clock` returns milliseconds, so
    both can be replaced with deterministic stand-ins.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        gravity: Optional[GravityRules] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.gravity = gravity or GravityRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.clock = clock or _monotonic_ms
        self.grid = GameGrid(self.config.width, self.config.height)
        self.score = 0
        self.game_over = False
        self.paused = False
        self.gravity_interval_ms = self.gravity.initial_interval_ms
        self.speed_up_counter = 0
        self.last_gravity_ms = 0
        self.current_piece = ActivePiece(0)
        self.next_shape_id = 0
        self.reset()

    def reset(self) -> None:
        self.grid = GameGrid(self.config.width, self.config.height)
        self.score = 0
        self.game_over = False
        self.paused = False
        self.gravity_interval_ms = self.gravity.initial_interval_ms
        self.speed_up_counter = 0
        self.last_gravity_ms = self.clock()
        self.current_piece = ActivePiece.spawn(self._random_shape_id(), self.grid.width)
        self.next_shape_id = self._random_shape_id()
        if self._collides(self.current_piece):
            self.game_over = True

    @property
    def status(self) -> GameStatus:
        if self.game_over:
            return GameStatus.GAME_OVER
        if self.paused:
            return GameStatus.PAUSED
        return GameStatus.PLAYING

    def _random_shape_id(self) -> int:
        return int(self.rng.choice(list(TetrominoType)))

    def _collides(self, piece: ActivePiece) -> bool:
        return self.grid.collides(piece.occupied_cells())

    def _try_move(self, dx: int, dy: int) -> bool:
        moved = self.current_piece.moved(dx, dy)
        if self._collides(moved):
            return False
        self.current_piece = moved
        return True

    def _try_rotate(self) -> bool:
        rotated = self.current_piece.rotated()
        original_x = self.current_piece.x
        for offset in KICK_OFFSETS:
            rotated.x = original_x + offset
            if not self._collides(rotated):
                self.current_piece = rotated
                return True
        return False

    def _spawn_next(self) -> None:
        self.speed_up_counter += 1
        if self.speed_up_counter >= self.gravity.locks_per_speed_up:
            self.gravity_interval_ms = self.gravity.next_interval(self.gravity_interval_ms)
            self.speed_up_counter = 0
        self.current_piece = ActivePiece.spawn(self.next_shape_id, self.grid.width)
        self.next_shape_id = self._random_shape_id()
        if self._collides(self.current_piece):
            self.game_over = True

    def _lock_piece(self) -> PlacementResult:
        self.grid.lock(self.current_piece.occupied_cells(), self.current_piece.color)
        lines = self.grid.clear_full_rows()
        points = self.rules.score_for_lines(lines)
        self.score += points
        self._spawn_next()
        return PlacementResult(lines_cleared=lines, points=points, game_over=self.game_over)

    def _accepts_input(self) -> bool:
        return not (self.game_over or self.paused)

    def move_left(self) -> bool:
        return self._accepts_input() and self._try_move(-1, 0)

    def move_right(self) -> bool:
        return self._accepts_input() and self._try_move(1, 0)

    def rotate(self) -> bool:
        return self._accepts_input() and self._try_rotate()

    def soft_drop(self) -> Optional[PlacementResult]:
        """Move down one row, or lock in place if blocked."""
        if not self._accepts_input():
            return None
        result = None
        if not self._try_move(0, 1):
            result = self._lock_piece()
        self.last_gravity_ms = self.clock()
        return result

    def hard_drop(self) -> Optional[PlacementResult]:
        if not self._accepts_input():
            return None
        # Drop distance is not scored
        while self._try_move(0, 1):
            pass
        result = self._lock_piece()
        self.last_gravity_ms = self.clock()
        return result

    def toggle_pause(self) -> bool:
        if self.game_over:
            return False
        self.paused = not self.paused
        return True

    def apply(self, intent: Intent) -> Optional[PlacementResult]:
        """Process one gameplay intent. Returns the placement result if a piece locked.

        SAVE, LOAD and QUIT are handled by the front end and ignored here.
        """
        if intent == Intent.PAUSE:
            self.toggle_pause()
        elif intent == Intent.MOVE_LEFT:
            self.move_left()
        elif intent == Intent.MOVE_RIGHT:
            self.move_right()
        elif intent == Intent.ROTATE:
            self.rotate()
        elif intent == Intent.SOFT_DROP:
            return self.soft_drop()
        elif intent == Intent.HARD_DROP:
            return self.hard_drop()
        return None

    def update(self, now_ms: Optional[int] = None) -> Optional[PlacementResult]:
        """Run a gravity step if the current interval has elapsed since the last one."""
        if not self._accepts_input():
            return None
        now = self.clock() if now_ms is None else now_ms
        if now - self.last_gravity_ms < self.gravity_interval_ms:
            return None
        result = None
        if not self._try_move(0, 1):
            result = self._lock_piece()
        self.last_gravity_ms = now
        return result

    def snapshot(self) -> "GameSnapshot":
        from tetris_clone.persistence.snapshot import GameSnapshot, PieceRecord

        piece = self.current_piece
        return GameSnapshot(
            board=self.grid.cells(),
            width=self.grid.width,
            height=self.grid.height,
            active_piece=PieceRecord(id=piece.shape_id, rotation=piece.rotation, x=piece.x, y=piece.y),
            next_piece_id=self.next_shape_id,
            is_game_over=self.game_over,
            gravity_delay_ms=self.gravity_interval_ms,
            speed_up_counter=self.speed_up_counter,
            score=self.score,
        )

    def restore(self, snapshot: "GameSnapshot") -> None:
        """Replace the whole session with `snapshot`.

        The snapshot is validated before anything is touched. A restored game is
        never paused and its gravity timer starts from now.
        """
        snapshot.validate()
        grid = GameGrid.from_cells(snapshot.width, snapshot.height, snapshot.board)
        record = snapshot.active_piece
        self.grid = grid
        self.current_piece = ActivePiece(record.id, record.rotation, record.x, record.y)
        self.next_shape_id = snapshot.next_piece_id
        self.game_over = snapshot.is_game_over
        self.gravity_interval_ms = snapshot.gravity_delay_ms
        self.speed_up_counter = snapshot.speed_up_counter
        self.score = snapshot.score
        self.paused = False
        self.last_gravity_ms = self.clock()

    def view(self) -> GameView:
        active: Tuple[Coordinate, ...] = ()
        if not self.game_over:
            active = tuple(self.current_piece.occupied_cells())
        return GameView(
            width=self.grid.width,
            height=self.grid.height,
            cells=tuple(self.grid.cells()),
            active_cells=active,
            active_color=self.current_piece.color,
            next_shape_id=self.next_shape_id,
            score=self.score,
            status=self.status,
        )

    def get_state(self) -> np.ndarray:
        # 0 empty, 1 locked, 2 falling piece
        state = self.grid.clone_state().astype(np.int8)
        if not self.game_over:
            for x, y in self.current_piece.occupied_cells():
                if 0 <= y < self.grid.height and 0 <= x < self.grid.width:
                    state[y, x] = 2
        return state


def piece_preview(shape_id: int) -> List[Coordinate]:
    """Cells of a shape's first rotation state relative to its bounding box."""
    return ActivePiece(shape_id).occupied_cells()
