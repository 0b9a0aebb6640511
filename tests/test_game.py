"""Tests for Game class."""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import random
import unittest
from config import Config
from controls import Controls
from debug import DebugLogger, EventType
from game import Game, GameState, PointResult, StepResult


class TestGameInitialization(unittest.TestCase):
    """Test Game initialization."""

    def test_initial_state(self):
        """Game should start waiting for a serve with zero scores."""
        game = Game()
        self.assertEqual(game.state, GameState.WAITING_SERVE)
        self.assertTrue(game.is_waiting_serve)
        self.assertTrue(game.serve_to_left)
        self.assertEqual(game.score, (0, 0))

    def test_initial_ball_state(self):
        """Ball should be parked at the serve point at rest."""
        game = Game()
        x, y, vx, vy = game.ball_state
        self.assertEqual(x, game.config.court_width * 0.5)
        self.assertEqual(y, game.config.serve_height)
        self.assertEqual((vx, vy), (0.0, 0.0))

    def test_initial_player_positions(self):
        """Players should start grounded, mirrored around the net."""
        game = Game()
        (p1x, p1y), (p2x, p2y) = game.player_positions
        self.assertEqual((p1x, p2x), (20.0, 60.0))
        self.assertEqual(p1y, game.config.ground_y)
        self.assertEqual(p2y, game.config.ground_y)
        self.assertTrue(game.player_1.on_ground)
        self.assertTrue(game.player_2.on_ground)

    def test_custom_config(self):
        """Game should derive its tick from the configured rate."""
        game = Game(Config(tick_rate=100))
        self.assertAlmostEqual(game.dt, 0.01)


class TestServe(unittest.TestCase):
    """Test serve handling."""

    def setUp(self):
        self.game = Game()

    def test_ball_frozen_while_waiting(self):
        """Steps while waiting for a serve should not touch the ball."""
        before = self.game.ball_state
        for _ in range(50):
            self.game.step()
            self.assertEqual(self.game.ball_state, before)

    def test_ball_frozen_while_players_move(self):
        """Player input does not release the ball."""
        before = self.game.ball_state
        for key in "adwjli":
            self.game.handle_key(key)
            self.game.step()
        self.assertEqual(self.game.ball_state, before)
        self.assertTrue(self.game.is_waiting_serve)

    def test_serve_left(self):
        """Serve-left key should launch the ball toward the left."""
        self.game.handle_key(ord("S"))
        self.assertFalse(self.game.is_waiting_serve)
        self.assertTrue(self.game.serve_to_left)
        _, _, vx, vy = self.game.ball_state
        self.assertLess(vx, 0)
        self.assertEqual(vy, 0.0)

    def test_serve_right(self):
        """Serve-right key should launch the ball toward the right."""
        self.game.handle_key(ord("K"))
        self.assertFalse(self.game.serve_to_left)
        _, _, vx, _ = self.game.ball_state
        self.assertGreater(vx, 0)

    def test_serve_is_case_insensitive(self):
        """Lower-case serve key should work the same."""
        self.game.handle_key(ord("s"))
        self.assertFalse(self.game.is_waiting_serve)

    def test_serve_ignored_during_play(self):
        """Serve keys do nothing while the ball is in play."""
        self.game.handle_key("S")
        for _ in range(10):
            self.game.step()
        before = self.game.ball_state
        self.game.handle_key("K")
        self.assertEqual(self.game.ball_state, before)
        self.assertTrue(self.game.serve_to_left)

    def test_ball_moves_after_serve(self):
        """Ball should fly once served."""
        self.game.handle_key("S")
        before = self.game.ball_state
        self.game.step()
        self.assertNotEqual(self.game.ball_state, before)


class TestKeyHandling(unittest.TestCase):
    """Test player key handling."""

    def setUp(self):
        self.game = Game()

    def test_last_direction_wins(self):
        """Pressing the opposite direction replaces the held one."""
        self.game.handle_key("a")
        self.assertTrue(self.game.player_1.left_held)
        self.game.handle_key("d")
        self.assertTrue(self.game.player_1.right_held)
        self.assertFalse(self.game.player_1.left_held)

    def test_players_are_independent(self):
        """Player 2 keys should not affect player 1."""
        self.game.handle_key("j")
        self.assertTrue(self.game.player_2.left_held)
        self.assertFalse(self.game.player_1.left_held)
        self.assertFalse(self.game.player_1.right_held)

    def test_jump_request(self):
        """Jump key sets a pending jump."""
        self.game.handle_key("w")
        self.assertTrue(self.game.player_1.jump_requested)
        self.game.step()
        self.assertFalse(self.game.player_1.jump_requested)
        self.assertFalse(self.game.player_1.on_ground)

    def test_unknown_keys_ignored(self):
        """Unbound keys should change nothing."""
        for key in (ord("z"), 0, 27, 200, ord("?")):
            self.game.handle_key(key)
        self.assertFalse(self.game.player_1.left_held)
        self.assertFalse(self.game.player_2.right_held)
        self.assertTrue(self.game.is_waiting_serve)

    def test_non_single_character_strings_ignored(self):
        """Empty and multi-character strings are ignored, not errors."""
        for key in ("", "ab", "sk", "QQ"):
            self.game.handle_key(key)
        self.assertTrue(self.game.is_waiting_serve)
        self.assertFalse(self.game.player_1.left_held)
        self.assertFalse(self.game.player_2.left_held)

    def test_out_of_range_codes_ignored(self):
        """Codes outside the byte range match no binding."""
        for key in (300, -1):
            self.game.handle_key(key)
        self.assertTrue(self.game.is_waiting_serve)

    def test_custom_controls(self):
        """Bindings come from the Controls passed in."""
        controls = Controls(p1_left=ord("x"), serve_right=ord("m"))
        game = Game(controls=controls)
        game.handle_key("X")
        self.assertTrue(game.player_1.left_held)
        game.handle_key("m")
        self.assertFalse(game.is_waiting_serve)
        self.assertFalse(game.serve_to_left)


class TestGameStep(unittest.TestCase):
    """Test Game step mechanics."""

    def setUp(self):
        self.game = Game()

    def test_step_increments_counter(self):
        """Step should increment the step counter."""
        self.game.step()
        self.assertEqual(self.game.total_steps, 1)

    def test_step_returns_result(self):
        """Step should return StepResult."""
        result = self.game.step()
        self.assertIsInstance(result, StepResult)
        self.assertIsNone(result.point_result)
        self.assertEqual(result.contacts, (False, False))

    def test_player_moves_with_held_key(self):
        """Holding right moves player 1 right at move speed."""
        start = self.game.player_1.x
        self.game.handle_key("d")
        self.game.step()
        expected = start + self.game.config.move_speed * self.game.dt
        self.assertAlmostEqual(self.game.player_1.x, expected)

    def test_player_1_clamped_at_net(self):
        """Player 1 can never pass net_x - 2."""
        self.game.handle_key("d")
        for _ in range(1000):
            self.game.step()
            self.assertLessEqual(self.game.player_1.x, self.game.court.net_x - 2)
        self.assertEqual(self.game.player_1.x, self.game.court.net_x - 2)

    def test_player_2_clamped_at_net(self):
        """Player 2 can never pass net_x + 2."""
        self.game.handle_key("j")
        for _ in range(1000):
            self.game.step()
            self.assertGreaterEqual(self.game.player_2.x, self.game.court.net_x + 2)
        self.assertEqual(self.game.player_2.x, self.game.court.net_x + 2)

    def test_players_clamped_at_walls(self):
        """Players stop short of the side walls."""
        self.game.handle_key("a")
        self.game.handle_key("l")
        for _ in range(1000):
            self.game.step()
        self.assertEqual(self.game.player_1.x, 2.0)
        self.assertEqual(self.game.player_2.x, float(self.game.config.court_width - 3))

    def test_random_input_respects_halves(self):
        """Any key sequence keeps both players in their halves."""
        rng = random.Random(7)
        net_x = self.game.court.net_x
        for _ in range(5000):
            self.game.handle_key(rng.choice("adwjliSK"))
            self.game.step()
            self.assertLessEqual(self.game.player_1.x, net_x - 2)
            self.assertGreaterEqual(self.game.player_2.x, net_x + 2)

    def test_jump_lands_back_on_ground(self):
        """A jump rises, then lands back on the ground line."""
        ground = self.game.config.ground_y
        self.game.handle_key("w")
        self.game.step()
        self.assertLess(self.game.player_1.y, ground)
        for _ in range(1000):
            self.game.step()
            if self.game.player_1.on_ground:
                break
        self.assertTrue(self.game.player_1.on_ground)
        self.assertEqual(self.game.player_1.y, ground)
        self.assertEqual(self.game.player_1.vy, 0.0)


class TestGamePointScoring(unittest.TestCase):
    """Test point scoring mechanics."""

    def setUp(self):
        self.game = Game()
        self.game.handle_key("S")

    def _drop_ball_at(self, x: float) -> StepResult:
        ball = self.game.ball
        ball.x = x
        ball.y = self.game.court.ground_ball_y + 0.001
        ball.vx = 0.0
        ball.vy = 0.0
        return self.game.step()

    def test_landing_left_scores_for_player_2(self):
        """Ball on the left half gives player 2 the point."""
        result = self._drop_ball_at(self.game.court.net_x - 10)
        self.assertEqual(self.game.score, (0, 1))
        self.assertTrue(self.game.is_waiting_serve)
        self.assertIsInstance(result.point_result, PointResult)
        self.assertEqual(result.point_result.winner, 1)

    def test_landing_right_scores_for_player_1(self):
        """Ball on the right half gives player 1 the point."""
        result = self._drop_ball_at(self.game.court.net_x + 10)
        self.assertEqual(self.game.score, (1, 0))
        self.assertTrue(self.game.is_waiting_serve)
        self.assertEqual(result.point_result.winner, 0)

    def test_ball_reset_after_point(self):
        """Ball returns to the serve point with zero velocity."""
        self._drop_ball_at(self.game.court.net_x - 10)
        x, y, vx, vy = self.game.ball_state
        self.assertEqual((vx, vy), (0.0, 0.0))
        self.assertEqual(x, self.game.config.court_width * 0.5)
        self.assertEqual(y, self.game.config.serve_height)

    def test_serve_direction_after_point(self):
        """Next serve direction points at the scorer's half."""
        self._drop_ball_at(self.game.court.net_x - 10)
        self.assertFalse(self.game.serve_to_left)

        self.game.handle_key("S")
        self._drop_ball_at(self.game.court.net_x + 10)
        self.assertTrue(self.game.serve_to_left)
        self.assertEqual(self.game.score, (1, 1))

    def test_one_point_per_ground_contact(self):
        """Only one side scores, and the ball then stays frozen."""
        self._drop_ball_at(self.game.court.net_x - 10)
        for _ in range(100):
            self.game.step()
        self.assertEqual(self.game.score, (0, 1))

    def test_served_ball_eventually_scores(self):
        """An untouched serve lands and scores."""
        game = Game()
        game.handle_key("K")
        for _ in range(5000):
            if game.step().point_result is not None:
                break
        self.assertEqual(sum(game.score), 1)
        self.assertTrue(game.is_waiting_serve)


class TestGameCollisions(unittest.TestCase):
    """Test ball collisions inside a step."""

    def setUp(self):
        self.game = Game()
        self.game.handle_key("S")
        self.config = self.game.config

    def _place(self, x, y, vx, vy):
        ball = self.game.ball
        ball.x, ball.y, ball.vx, ball.vy = x, y, vx, vy

    def test_left_wall_bounce(self):
        """Ball hitting the left wall is clamped and reflected with damping."""
        self._place(2.0, 8.0, -40.0, 0.0)
        self.game.step()
        x, _, vx, _ = self.game.ball_state
        self.assertEqual(x, 1 + self.config.ball_radius)
        self.assertAlmostEqual(vx, 40.0 * self.config.ball_restitution)

    def test_right_wall_bounce(self):
        """Ball hitting the right wall is clamped and reflected."""
        right = self.config.court_width - 2 - self.config.ball_radius
        self._place(right - 0.05, 8.0, 40.0, 0.0)
        self.game.step()
        x, _, vx, _ = self.game.ball_state
        self.assertEqual(x, right)
        self.assertLess(vx, 0)

    def test_ceiling_bounce(self):
        """Ball hitting the ceiling comes back down."""
        self._place(30.0, 2.1, 0.0, -40.0)
        self.game.step()
        _, y, _, vy = self.game.ball_state
        self.assertEqual(y, 1 + self.config.ball_radius)
        self.assertGreater(vy, 0)

    def test_net_pushes_ball_back_left(self):
        """Ball entering the net from the left is pushed back out left."""
        net_x = self.game.court.net_x
        self._place(net_x - 1.5, 18.0, 40.0, 0.0)
        self.game.step()
        x, _, vx, _ = self.game.ball_state
        self.assertAlmostEqual(x, net_x - (1 + self.config.ball_radius))
        self.assertLess(vx, 0)

    def test_net_pushes_ball_back_right(self):
        """Ball entering the net from the right is pushed back out right."""
        net_x = self.game.court.net_x
        self._place(net_x + 1.5, 18.0, -40.0, 0.0)
        self.game.step()
        x, _, vx, _ = self.game.ball_state
        self.assertAlmostEqual(x, net_x + (1 + self.config.ball_radius))
        self.assertGreater(vx, 0)

    def test_ball_outside_push_threshold_left_alone(self):
        """Only balls within half thickness plus radius of the net are pushed."""
        net_x = self.game.court.net_x
        self._place(net_x - 1.8, 18.0, 0.0, 0.0)
        self.game.step()
        x, _, vx, _ = self.game.ball_state
        self.assertEqual(x, net_x - 1.8)
        self.assertEqual(vx, 0.0)
        self.assertLess(net_x - x, 1 + self.config.ball_radius)

    def test_ball_over_net_passes(self):
        """Ball above the net crosses freely."""
        net_x = self.game.court.net_x
        self._place(net_x - 0.1, 8.0, 40.0, 0.0)
        self.game.step()
        x, _, vx, _ = self.game.ball_state
        self.assertGreater(x, net_x)
        self.assertEqual(vx, 40.0)

    def test_ball_bounces_off_player_head(self):
        """Ball falling onto a player goes back up."""
        p1 = self.game.player_1
        self._place(p1.x, p1.y - 3.0, 0.0, 10.0)
        result = self.game.step()
        self.assertEqual(result.contacts, (True, False))
        _, _, _, vy = self.game.ball_state
        self.assertLess(vy, 0)

    def test_both_players_checked(self):
        """Player 2 contacts are reported too."""
        p2 = self.game.player_2
        self._place(p2.x + 0.5, p2.y - 3.0, 0.0, 10.0)
        result = self.game.step()
        self.assertEqual(result.contacts, (False, True))

    def test_energy_stays_bounded(self):
        """Long random rallies never make the ball speed diverge."""
        rng = random.Random(3)
        max_speed = 0.0
        for _ in range(20000):
            if self.game.is_waiting_serve:
                self.game.handle_key(rng.choice("SK"))
            if rng.random() < 0.1:
                self.game.handle_key(rng.choice("adwjli"))
            self.game.step()
            max_speed = max(max_speed, self.game.ball.get_speed())
        self.assertLess(max_speed, 1000.0)


class TestGameLogging(unittest.TestCase):
    """Test event logging from the game."""

    def setUp(self):
        self.logger = DebugLogger()
        self.game = Game(logger=self.logger)

    def test_serve_logged(self):
        """Serving records a serve event."""
        self.game.handle_key("K")
        events = self.logger.get_events_by_type(EventType.SERVE)
        self.assertEqual(len(events), 1)
        self.assertFalse(events[0].data["to_left"])

    def test_point_logged(self):
        """Scoring records a point event with the new score."""
        self.game.handle_key("S")
        self.game.ball.x = 10.0
        self.game.ball.y = self.game.court.ground_ball_y + 0.5
        self.game.step()
        events = self.logger.get_events_by_type(EventType.POINT_SCORED)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].data["score"], [0, 1])
        self.assertEqual(events[0].frame, 1)

    def test_jump_logged(self):
        """Taking off records a jump event."""
        self.game.handle_key("i")
        self.game.step()
        events = self.logger.get_events_by_type(EventType.PLAYER_JUMP)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].data["player_id"], 1)

    def test_frames_follow_steps(self):
        """Logger frame counter tracks steps."""
        for _ in range(5):
            self.game.step()
        self.assertEqual(self.logger.frame, 5)


class TestGameReset(unittest.TestCase):
    """Test Game reset."""

    def test_reset_restores_initial_state(self):
        """Reset should clear scores and park everything."""
        game = Game()
        game.handle_key("S")
        game.handle_key("d")
        game.scores = [3, 2]
        for _ in range(20):
            game.step()

        game.reset()

        self.assertEqual(game.score, (0, 0))
        self.assertTrue(game.is_waiting_serve)
        self.assertEqual(game.player_positions, ((20.0, 22.0), (60.0, 22.0)))
        self.assertFalse(game.player_1.right_held)
        self.assertEqual(game.ball_state[2:], (0.0, 0.0))


if __name__ == "__main__":
    unittest.main()
