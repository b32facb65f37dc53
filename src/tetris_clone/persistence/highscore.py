from __future__ import annotations

from pathlib import Path
from typing import Union

from .errors import PersistenceError


DEFAULT_HIGHSCORE_PATH = "highscore.txt"

PathLike = Union[str, Path]


def load_high_score(path: PathLike = DEFAULT_HIGHSCORE_PATH) -> int:
    """Stored high score, or 0 if the file is missing or does not hold an unsigned integer."""
    try:
        text = Path(path).read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return 0
    try:
        score = int(text)
    except ValueError:
        return 0
    return max(score, 0)


def save_high_score(score: int, path: PathLike = DEFAULT_HIGHSCORE_PATH) -> None:
    try:
        Path(path).write_text(str(int(score)), encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"could not save the high score to {path}: {e.strerror or e}") from e


def record_high_score(score: int, best: int, path: PathLike = DEFAULT_HIGHSCORE_PATH) -> int:
    """Persist `score` if it beats `best` and return the new best."""
    if score <= best:
        return best
    save_high_score(score, path)
    return score
