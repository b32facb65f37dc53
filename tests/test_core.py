import random
import unittest

from tetris_clone.game import (
    PIECES,
    ActivePiece,
    GameConfig,
    GameStatus,
    Intent,
    TetrisGame,
    TetrominoType,
)

from support import FakeClock, ScriptedRng, fill_row, make_game


O = TetrominoType.O
I = TetrominoType.I
T = TetrominoType.T
GREY = (9, 9, 9)


class SessionCreationTests(unittest.TestCase):
    def test_new_session_spawns_piece_and_lookahead(self):
        game = make_game([TetrominoType.T, TetrominoType.Z])
        self.assertEqual(game.current_piece.shape_id, TetrominoType.T)
        self.assertEqual(game.next_shape_id, TetrominoType.Z)
        self.assertEqual(game.status, GameStatus.PLAYING)
        self.assertEqual(game.score, 0)
        self.assertEqual(game.gravity_interval_ms, 1000)
        self.assertEqual(game.speed_up_counter, 0)

    def test_seeded_sessions_are_reproducible(self):
        a = TetrisGame(GameConfig(random_seed=7))
        b = TetrisGame(GameConfig(random_seed=7))
        self.assertEqual(a.current_piece, b.current_piece)
        self.assertEqual(a.next_shape_id, b.next_shape_id)

    def test_random_draws_cover_catalog(self):
        game = TetrisGame(rng=random.Random(3))
        drawn = {game._random_shape_id() for _ in range(500)}
        self.assertEqual(drawn, set(range(len(PIECES))))

    def test_config_rejects_non_positive_dimensions(self):
        with self.assertRaises(ValueError):
            GameConfig(width=0)
        with self.assertRaises(ValueError):
            GameConfig(height=-3)

    def test_board_narrower_than_piece_is_over_immediately(self):
        game = make_game([I, I], width=1, height=5)
        self.assertTrue(game.game_over)


class MovementTests(unittest.TestCase):
    def test_o_piece_walks_to_wall_and_hard_drops(self):
        game = make_game([O, O, O])
        self.assertEqual((game.current_piece.x, game.current_piece.y), (4, 0))
        for _ in range(4):
            self.assertTrue(game.move_left())
        self.assertFalse(game.move_left())
        self.assertEqual(game.current_piece.x, 0)

        color = game.current_piece.color
        result = game.hard_drop()
        self.assertEqual(result.lines_cleared, 0)
        for cell in [(0, 18), (1, 18), (0, 19), (1, 19)]:
            self.assertEqual(game.grid.cell(*cell), color)
        self.assertEqual(int(game.grid.occupied.sum()), 4)
        # Distance dropped is not scored
        self.assertEqual(game.score, 0)
        self.assertEqual((game.current_piece.x, game.current_piece.y), (4, 0))

    def test_move_right_blocked_by_locked_cells(self):
        game = make_game([O, O])
        game.grid.lock([(6, 0)], GREY)
        self.assertFalse(game.move_right())
        self.assertEqual(game.current_piece.x, 4)

    def test_apply_dispatches_intents(self):
        game = make_game([O, O])
        game.apply(Intent.MOVE_RIGHT)
        self.assertEqual(game.current_piece.x, 5)
        game.apply(Intent.SOFT_DROP)
        self.assertEqual(game.current_piece.y, 1)
        game.apply(Intent.PAUSE)
        self.assertTrue(game.paused)

    def test_front_end_intents_are_ignored(self):
        game = make_game([O, O])
        before = game.snapshot()
        for intent in (Intent.SAVE, Intent.LOAD, Intent.QUIT):
            self.assertIsNone(game.apply(intent))
        self.assertEqual(game.snapshot(), before)


class RotationTests(unittest.TestCase):
    def setUp(self):
        self.game = make_game([O, O])

    def _rotate_i(self, x, obstacles=()):
        self.game.grid.reset()
        self.game.grid.lock([(ox, 7) for ox in obstacles], GREY)
        self.game.current_piece = ActivePiece(I, rotation=0, x=x, y=5)
        return self.game.rotate()

    def test_rotates_in_place_when_free(self):
        self.assertTrue(self._rotate_i(3))
        self.assertEqual((self.game.current_piece.rotation, self.game.current_piece.x), (1, 3))

    def test_kicks_right_first(self):
        self.assertTrue(self._rotate_i(0, obstacles=[0]))
        self.assertEqual(self.game.current_piece.x, 1)
        self.assertTrue(self._rotate_i(3, obstacles=[3]))
        self.assertEqual(self.game.current_piece.x, 4)

    def test_kicks_left_after_right_fails(self):
        self.assertTrue(self._rotate_i(3, obstacles=[3, 4]))
        self.assertEqual(self.game.current_piece.x, 2)

    def test_tries_two_right_before_two_left(self):
        self.assertTrue(self._rotate_i(3, obstacles=[2, 3, 4]))
        self.assertEqual(self.game.current_piece.x, 5)
        self.assertTrue(self._rotate_i(3, obstacles=[2, 3, 4, 5]))
        self.assertEqual(self.game.current_piece.x, 1)

    def test_rejected_rotation_keeps_orientation(self):
        self.assertFalse(self._rotate_i(3, obstacles=[1, 2, 3, 4, 5]))
        self.assertEqual(self.game.current_piece, ActivePiece(I, rotation=0, x=3, y=5))

    def test_kick_off_right_wall(self):
        self.game.current_piece = ActivePiece(T, rotation=1, x=8, y=5)
        self.assertTrue(self.game.rotate())
        self.assertEqual((self.game.current_piece.rotation, self.game.current_piece.x), (2, 7))

    def test_vertical_i_against_right_wall_cannot_rotate(self):
        self.game.current_piece = ActivePiece(I, rotation=1, x=9, y=5)
        self.assertFalse(self.game.rotate())
        self.assertEqual(self.game.current_piece.rotation, 1)

    def test_kick_choice_is_deterministic(self):
        offsets = set()
        for _ in range(5):
            self._rotate_i(3, obstacles=[3])
            offsets.add(self.game.current_piece.x)
        self.assertEqual(offsets, {4})


class LineClearTests(unittest.TestCase):
    def _drop_vertical_i(self, game):
        game.current_piece = ActivePiece(I, rotation=1, x=0, y=0)
        return game.hard_drop()

    def test_single_line_awards_100_and_shifts_rows(self):
        game = make_game([O, O])
        fill_row(game, 19, except_columns=[0])
        game.grid.lock([(5, 18)], (1, 2, 3))
        result = self._drop_vertical_i(game)
        self.assertEqual((result.lines_cleared, result.points), (1, 100))
        self.assertEqual(game.score, 100)
        self.assertEqual(game.grid.cell(5, 19), (1, 2, 3))
        self.assertIsNone(game.grid.cell(5, 18))
        self.assertEqual([game.grid.occupied[y, 0] for y in range(16, 20)], [False, True, True, True])

    def test_score_table_by_rows_cleared(self):
        for rows, points in [(1, 100), (2, 300), (3, 500), (4, 800)]:
            with self.subTest(rows=rows):
                game = make_game([O, O])
                for y in range(20 - rows, 20):
                    fill_row(game, y, except_columns=[0])
                result = self._drop_vertical_i(game)
                self.assertEqual(result.lines_cleared, rows)
                self.assertEqual(game.score, points)

    def test_score_accumulates_over_locks(self):
        game = make_game([O, O])
        fill_row(game, 19, except_columns=[0])
        self._drop_vertical_i(game)
        fill_row(game, 19, except_columns=[1])
        game.current_piece = ActivePiece(I, rotation=1, x=1, y=0)
        game.hard_drop()
        self.assertEqual(game.score, 200)


class GravityTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock(0)
        self.game = make_game([O, O, O], clock=self.clock)

    def test_waits_for_interval(self):
        self.assertIsNone(self.game.update(999))
        self.assertEqual(self.game.current_piece.y, 0)
        self.clock.advance(1000)
        self.game.update()
        self.assertEqual(self.game.current_piece.y, 1)
        self.assertEqual(self.game.last_gravity_ms, 1000)
        self.game.update(1500)
        self.assertEqual(self.game.current_piece.y, 1)

    def test_one_step_per_update(self):
        self.game.update(5000)
        self.assertEqual(self.game.current_piece.y, 1)

    def test_locks_when_blocked(self):
        self.game.current_piece = ActivePiece(O, x=4, y=18)
        result = self.game.update(1000)
        self.assertIsNotNone(result)
        self.assertTrue(self.game.grid.occupied[19, 4])
        self.assertEqual(self.game.last_gravity_ms, 1000)
        self.assertEqual(self.game.current_piece.y, 0)

    def test_soft_drop_resets_gravity_reference(self):
        self.clock.now = 700
        self.assertIsNone(self.game.soft_drop())
        self.assertEqual(self.game.current_piece.y, 1)
        self.assertEqual(self.game.last_gravity_ms, 700)
        self.assertIsNone(self.game.update(1500))

    def test_soft_drop_locks_when_blocked(self):
        self.game.current_piece = ActivePiece(O, x=0, y=18)
        result = self.game.soft_drop()
        self.assertIsNotNone(result)
        self.assertTrue(self.game.grid.occupied[18, 0])

    def test_hard_drop_resets_gravity_reference(self):
        self.clock.now = 450
        self.game.hard_drop()
        self.assertEqual(self.game.last_gravity_ms, 450)


class SpeedUpTests(unittest.TestCase):
    def test_every_ten_locks_speed_up(self):
        game = make_game([O], height=40)
        for _ in range(9):
            game.hard_drop()
        self.assertEqual((game.gravity_interval_ms, game.speed_up_counter), (1000, 9))
        game.hard_drop()
        self.assertEqual((game.gravity_interval_ms, game.speed_up_counter), (925, 0))

    def test_interval_is_floor_clamped(self):
        game = make_game([O], height=60)
        game.gravity_interval_ms = 160
        game.speed_up_counter = 9
        game.hard_drop()
        self.assertEqual(game.gravity_interval_ms, 150)
        for _ in range(10):
            game.hard_drop()
        self.assertFalse(game.game_over)
        self.assertEqual(game.gravity_interval_ms, 150)


class PauseTests(unittest.TestCase):
    def test_paused_session_ignores_input_and_gravity(self):
        clock = FakeClock()
        game = make_game([O, O], clock=clock)
        self.assertTrue(game.toggle_pause())
        self.assertEqual(game.status, GameStatus.PAUSED)
        before = game.snapshot()
        self.assertFalse(game.move_left())
        self.assertFalse(game.rotate())
        self.assertIsNone(game.soft_drop())
        self.assertIsNone(game.hard_drop())
        clock.advance(10_000)
        self.assertIsNone(game.update())
        self.assertEqual(game.snapshot(), before)

        game.apply(Intent.PAUSE)
        self.assertEqual(game.status, GameStatus.PLAYING)
        self.assertTrue(game.move_left())


class GameOverTests(unittest.TestCase):
    def _end_game(self, clock=None):
        game = make_game([O, O, O], clock=clock)
        game.grid.lock([(4, 0)], GREY)
        game.current_piece = ActivePiece(O, x=0, y=18)
        result = game.hard_drop()
        return game, result

    def test_spawn_collision_ends_game(self):
        game, result = self._end_game()
        self.assertTrue(result.game_over)
        self.assertTrue(game.game_over)
        self.assertEqual(game.status, GameStatus.GAME_OVER)

    def test_game_over_is_terminal(self):
        clock = FakeClock()
        game, _ = self._end_game(clock)
        before = game.snapshot()
        self.assertFalse(game.move_left())
        self.assertFalse(game.move_right())
        self.assertFalse(game.rotate())
        self.assertIsNone(game.soft_drop())
        self.assertIsNone(game.hard_drop())
        self.assertFalse(game.toggle_pause())
        self.assertFalse(game.paused)
        clock.advance(60_000)
        self.assertIsNone(game.update())
        self.assertEqual(game.snapshot(), before)

    def test_view_hides_active_piece_after_game_over(self):
        game, _ = self._end_game()
        view = game.view()
        self.assertEqual(view.active_cells, ())
        self.assertEqual(view.status, GameStatus.GAME_OVER)

    def test_reset_starts_a_new_game(self):
        game, _ = self._end_game()
        game.reset()
        self.assertEqual(game.status, GameStatus.PLAYING)
        self.assertEqual(game.score, 0)
        self.assertFalse(game.grid.occupied.any())


class ViewTests(unittest.TestCase):
    def test_view_exposes_display_state(self):
        game = make_game([O, TetrominoType.S])
        game.grid.lock([(0, 19)], GREY)
        view = game.view()
        self.assertEqual((view.width, view.height), (10, 20))
        self.assertEqual(view.cells[19 * 10], GREY)
        self.assertEqual(set(view.active_cells), {(4, 0), (5, 0), (4, 1), (5, 1)})
        self.assertEqual(view.active_color, PIECES[O].color)
        self.assertEqual(view.next_shape_id, TetrominoType.S)
        self.assertEqual(view.status, GameStatus.PLAYING)

    def test_get_state_marks_locked_and_falling_cells(self):
        game = make_game([O, O])
        game.grid.lock([(0, 19)], GREY)
        state = game.get_state()
        self.assertEqual(state[19, 0], 1)
        self.assertEqual(state[0, 4], 2)
        self.assertEqual(int((state == 2).sum()), 4)
        self.assertEqual(int((state == 1).sum()), 1)


if __name__ == "__main__":
    unittest.main()
