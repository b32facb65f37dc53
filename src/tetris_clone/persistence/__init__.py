"""Save/load of game sessions and the high-score record."""

from .errors import PersistenceError, SnapshotError
from .snapshot import GameSnapshot, PieceRecord
from .codec import (
    DEFAULT_SAVE_PATH,
    decode_snapshot,
    encode_snapshot,
    load_game,
    save_game,
    snapshot_from_dict,
    snapshot_from_game,
    snapshot_to_dict,
)
from .highscore import DEFAULT_HIGHSCORE_PATH, load_high_score, record_high_score, save_high_score

__all__ = [
    "PersistenceError",
    "SnapshotError",
    "GameSnapshot",
    "PieceRecord",
    "DEFAULT_SAVE_PATH",
    "decode_snapshot",
    "encode_snapshot",
    "load_game",
    "save_game",
    "snapshot_from_dict",
    "snapshot_from_game",
    "snapshot_to_dict",
    "DEFAULT_HIGHSCORE_PATH",
    "load_high_score",
    "record_high_score",
    "save_high_score",
]
