from __future__ import annotations

import argparse
import sys
from typing import Dict, Optional, Sequence, Tuple

import pygame

from tetris_clone.game import GameConfig, Intent, TetrisGame
from tetris_clone.game.pieces import Color
from tetris_clone.persistence import (
    DEFAULT_HIGHSCORE_PATH,
    DEFAULT_SAVE_PATH,
    PersistenceError,
    load_game,
    load_high_score,
    record_high_score,
    save_game,
)
from .renderer import GAME_OVER, SCORE, STATUS, TEXT, Renderer


KEY_TO_INTENT: Dict[int, Intent] = {
    pygame.K_LEFT: Intent.MOVE_LEFT,
    pygame.K_RIGHT: Intent.MOVE_RIGHT,
    pygame.K_UP: Intent.ROTATE,
    pygame.K_DOWN: Intent.SOFT_DROP,
    pygame.K_SPACE: Intent.HARD_DROP,
    pygame.K_p: Intent.PAUSE,
    pygame.K_s: Intent.SAVE,
    pygame.K_l: Intent.LOAD,
    pygame.K_q: Intent.QUIT,
    pygame.K_ESCAPE: Intent.QUIT,
}

STATUS_DURATION_MS = 2000
SAVED_MESSAGE = "Game Saved!"
LOADED_MESSAGE = "Game Loaded!"


class StatusLine:
    """Short-lived message shown under the board."""

    def __init__(self, duration_ms: int = STATUS_DURATION_MS) -> None:
        self.duration_ms = duration_ms
        self.message: Optional[str] = None
        self.shown_at = 0

    def show(self, message: str, now_ms: int) -> None:
        self.message = message
        self.shown_at = now_ms

    def current(self, now_ms: int) -> Optional[str]:
        if self.message is not None and now_ms - self.shown_at > self.duration_ms:
            self.message = None
        return self.message


def handle_intent(game: TetrisGame, intent: Intent, save_path: str = DEFAULT_SAVE_PATH) -> Optional[str]:
    """Route one intent to the game or to persistence. Returns a status message, if any.

    QUIT is left to the caller. Once the game is over only LOAD gets through.
    """
    if game.game_over and intent != Intent.LOAD:
        return None
    if intent == Intent.SAVE:
        try:
            save_game(game, save_path)
        except PersistenceError as e:
            return f"Save Failed: {e}"
        return SAVED_MESSAGE
    if intent == Intent.LOAD:
        try:
            load_game(game, save_path)
        except PersistenceError as e:
            return f"Load Failed: {e}"
        return LOADED_MESSAGE
    game.apply(intent)
    return None


def _wait_for_key() -> Optional[int]:
    while True:
        event = pygame.event.wait()
        if event.type == pygame.QUIT:
            return None
        if event.type == pygame.KEYDOWN:
            return event.key


def fit_window(screen: pygame.Surface, renderer: Renderer, game: TetrisGame) -> pygame.Surface:
    """Return a display surface sized for `game`, resizing the window if a load changed the board."""
    size = renderer.window_size(game.grid.width, game.grid.height)
    if screen.get_size() == size:
        return screen
    return pygame.display.set_mode(size)


def play_session(screen: pygame.Surface, font: pygame.font.Font, renderer: Renderer, game: TetrisGame,
                 save_path: str, status_message: Optional[str] = None) -> bool:
    """Run one game until it ends or the player quits. Returns False on quit."""
    clock = pygame.time.Clock()
    status = StatusLine()
    if status_message:
        status.show(status_message, pygame.time.get_ticks())
    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                intent = KEY_TO_INTENT.get(event.key)
                if intent is None:
                    continue
                if intent == Intent.QUIT:
                    return False
                message = handle_intent(game, intent, save_path)
                if message:
                    status.show(message, pygame.time.get_ticks())
                if message == LOADED_MESSAGE:
                    screen = fit_window(screen, renderer, game)

        game.update()
        view = game.view()
        renderer.draw(screen, view, font, status.current(pygame.time.get_ticks()))
        if game.game_over:
            # Hold the final board briefly so the player sees what happened
            pygame.time.wait(800)
            return True
        clock.tick(60)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Falling-block puzzle game")
    p.add_argument("--columns", type=int, default=10, help="Number of columns on the board")
    p.add_argument("--lines", type=int, default=20, help="Number of lines on the board")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--save-file", type=str, default=DEFAULT_SAVE_PATH)
    p.add_argument("--highscore-file", type=str, default=DEFAULT_HIGHSCORE_PATH)
    return p


def _end_screen_lines(
    game: TetrisGame, high_score: int, notes: Sequence[str], status_message: Optional[str] = None
) -> Tuple[Tuple[str, Color], ...]:
    lines = [
        ("GAME OVER", GAME_OVER),
        (f"Final Score: {game.score}", TEXT),
        (f"High Score: {max(high_score, game.score)}", SCORE),
    ]
    lines.extend((note, GAME_OVER) for note in notes)
    if status_message:
        lines.append((status_message, STATUS))
    lines.append(("R: Restart, L: Load, Q: Quit", TEXT))
    return tuple(lines)


def run(args: argparse.Namespace) -> None:
    config = GameConfig(width=args.columns, height=args.lines, random_seed=args.seed)
    pygame.init()
    try:
        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("Tetris Clone")
        font = pygame.font.SysFont(None, 26)
        high_score = load_high_score(args.highscore_file)

        renderer.draw_centered_lines(screen, (("TETRIS CLONE", SCORE), ("Press any key to start", TEXT)), font)
        if _wait_for_key() is None:
            return
        pygame.event.clear()

        game = TetrisGame(config)
        message: Optional[str] = None
        while play_session(screen, font, renderer, game, args.save_file, message):
            screen = pygame.display.get_surface()
            message = None
            notes = []
            try:
                high_score = record_high_score(game.score, high_score, args.highscore_file)
            except PersistenceError as e:
                notes.append(str(e))
                print(e, file=sys.stderr)

            # Only restart, load and quit are accepted here
            while game.game_over:
                renderer.draw_centered_lines(screen, _end_screen_lines(game, high_score, notes, message), font)
                key = _wait_for_key()
                if key in (None, pygame.K_q, pygame.K_ESCAPE):
                    return
                if key == pygame.K_r:
                    game = TetrisGame(config)
                    message = None
                elif key == pygame.K_l:
                    message = handle_intent(game, Intent.LOAD, args.save_file)
                    if message == LOADED_MESSAGE:
                        notes = []
                        screen = fit_window(screen, renderer, game)
                    else:
                        notes = [message]
                        message = None
            screen = fit_window(screen, renderer, game)
            pygame.event.clear()
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    if args.columns <= 0 or args.lines <= 0:
        build_parser().error("--columns and --lines must be positive")
    run(args)


if __name__ == "__main__":  # pragma: no cover
    main()
