"""Gymnasium environments for the Tetris clone."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the default 10x20 environment
register(
    id="Tetris-10x20-v0",
    entry_point="tetris_clone.env.tetris_env:TetrisEnv",
)

__all__ = ["Tetris-10x20-v0"]
