from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from .errors import PersistenceError, SnapshotError
from .snapshot import GameSnapshot, PieceRecord

if TYPE_CHECKING:
    from tetris_clone.game import TetrisGame


DEFAULT_SAVE_PATH = "tetris_save.json"

PathLike = Union[str, Path]


def snapshot_from_game(game: "TetrisGame") -> GameSnapshot:
    return game.snapshot()


def snapshot_to_dict(snapshot: GameSnapshot) -> Dict[str, Any]:
    piece = snapshot.active_piece
    return {
        "board": [None if cell is None else list(cell) for cell in snapshot.board],
        "width": snapshot.width,
        "height": snapshot.height,
        "active_piece": {"id": piece.id, "rotation": piece.rotation, "x": piece.x, "y": piece.y},
        "next_piece_id": snapshot.next_piece_id,
        "is_game_over": snapshot.is_game_over,
        "gravity_delay_ms": snapshot.gravity_delay_ms,
        "speed_up_counter": snapshot.speed_up_counter,
        "score": snapshot.score,
    }


def encode_snapshot(snapshot: GameSnapshot) -> str:
    return json.dumps(snapshot_to_dict(snapshot))


def _field(data: Dict[str, Any], key: str, kind: type) -> Any:
    if key not in data:
        raise SnapshotError(f"missing field '{key}'")
    value = data[key]
    # bool is an int subclass; keep the two apart
    if kind is int and (isinstance(value, bool) or not isinstance(value, int)):
        raise SnapshotError(f"field '{key}' must be an integer, got {value!r}")
    if kind is not int and not isinstance(value, kind):
        raise SnapshotError(f"field '{key}' must be of type {kind.__name__}, got {value!r}")
    return value


def _cell(value: Any, index: int) -> Optional[Tuple[int, int, int]]:
    if value is None:
        return None
    if (
        not isinstance(value, list)
        or len(value) != 3
        or any(isinstance(c, bool) or not isinstance(c, int) for c in value)
    ):
        raise SnapshotError(f"cell {index} must be null or an [r, g, b] triple, got {value!r}")
    r, g, b = value
    return (r, g, b)


def snapshot_from_dict(data: Any) -> GameSnapshot:
    """Build and validate a snapshot. Raises SnapshotError on any problem."""
    if not isinstance(data, dict):
        raise SnapshotError("snapshot must be a JSON object")
    raw_board = _field(data, "board", list)
    board: List[Optional[Tuple[int, int, int]]] = [_cell(v, i) for i, v in enumerate(raw_board)]
    piece_data = _field(data, "active_piece", dict)
    snapshot = GameSnapshot(
        board=board,
        width=_field(data, "width", int),
        height=_field(data, "height", int),
        active_piece=PieceRecord(
            id=_field(piece_data, "id", int),
            rotation=_field(piece_data, "rotation", int),
            x=_field(piece_data, "x", int),
            y=_field(piece_data, "y", int),
        ),
        next_piece_id=_field(data, "next_piece_id", int),
        is_game_over=_field(data, "is_game_over", bool),
        gravity_delay_ms=_field(data, "gravity_delay_ms", int),
        speed_up_counter=_field(data, "speed_up_counter", int),
        score=_field(data, "score", int),
    )
    snapshot.validate()
    return snapshot


def decode_snapshot(text: str) -> GameSnapshot:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"invalid JSON: {e}") from e
    return snapshot_from_dict(data)


def save_game(game: "TetrisGame", path: PathLike = DEFAULT_SAVE_PATH) -> None:
    """Write the session to `path`. The session itself is never modified."""
    text = encode_snapshot(snapshot_from_game(game))
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"could not write {path}: {e.strerror or e}") from e


def load_game(game: "TetrisGame", path: PathLike = DEFAULT_SAVE_PATH) -> None:
    """Replace the session with the snapshot at `path`; nothing is applied on failure."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"could not read {path}: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise SnapshotError(f"{path} is not a text file") from e
    game.restore(decode_snapshot(text))
