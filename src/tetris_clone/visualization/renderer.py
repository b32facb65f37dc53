from __future__ import annotations

from typing import Optional, Tuple

import pygame

from tetris_clone.game import PIECES, GameStatus, GameView, piece_preview
from tetris_clone.game.pieces import Color


BACKGROUND = (10, 10, 14)
GRID_DARK = (30, 30, 36)
GRID_LIGHT = (38, 38, 46)
TEXT = (230, 230, 230)
SCORE = (240, 220, 60)
GAME_OVER = (230, 40, 40)
PAUSED = (60, 220, 230)
STATUS = (80, 220, 100)

CONTROLS = (
    "Left/Right: Move",
    "Up: Rotate",
    "Down: Soft Drop",
    "Space: Hard Drop",
    "P: Pause",
    "S: Save",
    "L: Load",
    "Q: Quit",
)


class Renderer:
    def __init__(self, cell_size: int = 28, margin: int = 20, panel_width: int = 180) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            self.margin * 3 + width * self.cell_size + self.panel_width,
            self.margin * 2 + height * self.cell_size,
        )

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size,
            self.margin + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def draw_board(self, screen: pygame.Surface, view: GameView) -> None:
        """Draw the checkered background, locked cells and the falling piece."""
        for y in range(view.height):
            for x in range(view.width):
                cell = view.cells[y * view.width + x]
                if cell is None:
                    color = GRID_DARK if (x + y) % 2 == 0 else GRID_LIGHT
                else:
                    color = cell
                pygame.draw.rect(screen, color, self._cell_rect(x, y))
        for x, y in view.active_cells:
            # Cells above the top edge are not visible yet
            if y >= 0:
                pygame.draw.rect(screen, view.active_color, self._cell_rect(x, y))

    def draw_panel(self, screen: pygame.Surface, view: GameView, font: pygame.font.Font) -> None:
        x0 = self.margin * 2 + view.width * self.cell_size
        y = self.margin
        screen.blit(font.render("Score", True, TEXT), (x0, y))
        screen.blit(font.render(f"{view.score:08d}", True, SCORE), (x0, y + 22))

        y += 60
        screen.blit(font.render("Next Piece", True, TEXT), (x0, y))
        preview_cell = self.cell_size // 2 + 4
        color = PIECES[view.next_shape_id].color
        for px, py in piece_preview(view.next_shape_id):
            rect = pygame.Rect(x0 + px * preview_cell, y + 24 + py * preview_cell, preview_cell - 1, preview_cell - 1)
            pygame.draw.rect(screen, color, rect)

        y += 24 + preview_cell * 4 + 12
        screen.blit(font.render("Controls", True, TEXT), (x0, y))
        for i, line in enumerate(CONTROLS):
            screen.blit(font.render(line, True, TEXT), (x0, y + 22 * (i + 1)))

    def draw_overlay(
        self, screen: pygame.Surface, view: GameView, font: pygame.font.Font, status_message: Optional[str] = None
    ) -> None:
        board_center_x = self.margin + view.width * self.cell_size // 2
        board_center_y = self.margin + view.height * self.cell_size // 2
        if view.status is GameStatus.GAME_OVER:
            text = font.render("GAME OVER", True, GAME_OVER)
            screen.blit(text, text.get_rect(center=(board_center_x, board_center_y)))
        elif view.status is GameStatus.PAUSED:
            text = font.render("PAUSED", True, PAUSED)
            screen.blit(text, text.get_rect(center=(board_center_x, board_center_y)))
        if status_message:
            text = font.render(status_message, True, STATUS)
            bottom = self.margin + view.height * self.cell_size
            screen.blit(text, text.get_rect(center=(board_center_x, bottom + self.margin // 2)))

    def draw(
        self, screen: pygame.Surface, view: GameView, font: pygame.font.Font, status_message: Optional[str] = None
    ) -> None:
        screen.fill(BACKGROUND)
        self.draw_board(screen, view)
        self.draw_panel(screen, view, font)
        self.draw_overlay(screen, view, font, status_message)
        pygame.display.flip()

    def draw_centered_lines(
        self, screen: pygame.Surface, lines: Tuple[Tuple[str, Color], ...], font: pygame.font.Font
    ) -> None:
        """Full-screen message used by the start and end screens."""
        screen.fill(BACKGROUND)
        cx = screen.get_width() // 2
        top = screen.get_height() // 2 - 30 * len(lines) // 2
        for i, (line, color) in enumerate(lines):
            text = font.render(line, True, color)
            screen.blit(text, text.get_rect(center=(cx, top + 30 * i)))
        pygame.display.flip()
