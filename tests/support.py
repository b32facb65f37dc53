from __future__ import annotations

from typing import Iterable, Optional, Sequence

from tetris_clone.game import GameConfig, TetrisGame, TetrominoType


class ScriptedRng:
    """Hands out shape ids in a fixed order, then repeats the last one."""

    def __init__(self, ids: Iterable[int]) -> None:
        self.ids = list(ids)
        self.last = self.ids[-1] if self.ids else 0

    def choice(self, seq: Sequence):
        if self.ids:
            self.last = self.ids.pop(0)
        return seq[self.last]


class FakeClock:
    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_game(
    ids: Iterable[int] = (TetrominoType.O, TetrominoType.O),
    width: int = 10,
    height: int = 20,
    clock: Optional[FakeClock] = None,
) -> TetrisGame:
    return TetrisGame(GameConfig(width=width, height=height), rng=ScriptedRng(ids), clock=clock or FakeClock())


def fill_row(game: TetrisGame, y: int, except_columns: Iterable[int] = (), color=(9, 9, 9)) -> None:
    skip = set(except_columns)
    game.grid.lock([(x, y) for x in range(game.grid.width) if x not in skip], color)
