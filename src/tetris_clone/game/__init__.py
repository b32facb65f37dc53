"""Game module for the Tetris clone.

Exports the rules engine and supporting classes:
- GameGrid: Board occupancy, collision and line clearing
- ActivePiece: The falling piece and its occupied cells
- PIECES / TetrominoType: The static shape catalog
- ScoringRules / GravityRules: Score table and speed-up ratchet
- TetrisGame: Session state machine driven by intents and gravity ticks
"""

from .grid import GameGrid
from .pieces import PIECES, ActivePiece, PieceDefinition, TetrominoType
from .rules import GravityRules, ScoringRules
from .core import (
    KICK_OFFSETS,
    GameConfig,
    GameStatus,
    GameView,
    Intent,
    PlacementResult,
    TetrisGame,
    piece_preview,
)

__all__ = [
    "GameGrid",
    "PIECES",
    "ActivePiece",
    "PieceDefinition",
    "TetrominoType",
    "GravityRules",
    "ScoringRules",
    "KICK_OFFSETS",
    "GameConfig",
    "GameStatus",
    "GameView",
    "Intent",
    "PlacementResult",
    "TetrisGame",
    "piece_preview",
]
