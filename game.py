"""Game logic for Terminal Volley."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Optional, Union

from config import Config
from controls import Controls, DEFAULT_CONTROLS, normalize_key
from court import Court
from ball import create_serve_ball, resolve_blob_collision
from player import create_players
from debug import DebugLogger, EventType


class GameState(Enum):
    """Current state of the match."""

    WAITING_SERVE = "waiting_serve"  # Ball parked until a serve key is pressed
    PLAYING = "playing"  # Ball in flight


@dataclass
class PointResult:
    """Result of a completed point."""

    winner: int  # 0 for player 1, 1 for player 2
    landing_x: float  # Where the ball touched the ground


@dataclass
class StepResult:
    """Result of a single game step."""

    point_result: Optional[PointResult]  # Set if the ball hit the ground
    contacts: Tuple[bool, bool]  # Whether each player touched the ball


class Game:
    """
    Fixed-timestep volleyball simulation.

    Handles:
    - Player movement, jumping and the half-court clamp
    - Ball flight with wall, ceiling and net bounces
    - Ball contact with the player blobs
    - Serve and scoring state

    The host loop feeds key presses through handle_key() and then calls
    step() once per tick. The game does no I/O of its own.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        controls: Optional[Controls] = None,
        logger: Optional[DebugLogger] = None,
    ):
        self.config = config or Config()
        self.controls = controls or DEFAULT_CONTROLS
        self.logger = logger
        self.dt = self.config.dt

        self.court = Court(self.config)
        self.player_1, self.player_2 = create_players(self.court)

        self.state = GameState.WAITING_SERVE
        self.serve_to_left = True
        self.scores = [0, 0]  # [player_1_score, player_2_score]
        self.total_steps = 0
        self.ball = create_serve_ball(self.court, self.config, self.serve_to_left)

    def _log(self, event_type: EventType, data: dict, message: str) -> None:
        if self.logger is not None:
            self.logger.log(event_type, data, message)

    def _serve(self, to_left: bool) -> None:
        """Launch the ball from the serve point toward one side."""
        self.serve_to_left = to_left
        self.ball.reset(*self.court.serve_state(to_left))
        self.state = GameState.PLAYING
        self._log(
            EventType.SERVE,
            {"to_left": to_left, "vx": self.ball.vx},
            f"Serve to the {'left' if to_left else 'right'}",
        )

    def _end_point(self, winner: int) -> PointResult:
        """
        Award a point and park the ball for the next serve.

        Args:
            winner: 0 for player 1, 1 for player 2

        Returns:
            PointResult with details
        """
        result = PointResult(winner=winner, landing_x=self.ball.x)
        self.scores[winner] += 1
        self.state = GameState.WAITING_SERVE
        # Next serve points toward the scorer's half
        self.serve_to_left = winner == 0

        x, y, _, _ = self.court.serve_state(self.serve_to_left)
        self.ball.reset(x, y)

        self._log(
            EventType.POINT_SCORED,
            {"winner": winner, "landing_x": result.landing_x, "score": list(self.scores)},
            f"Point to P{winner + 1} ({self.scores[0]}:{self.scores[1]})",
        )
        return result

    def handle_key(self, key: Union[int, str]) -> None:
        """
        Apply one key press. Unknown keys are ignored.

        Args:
            key: Byte code or one-character string, any letter case
        """
        if isinstance(key, str) and len(key) != 1:
            return
        key = normalize_key(key)
        controls = self.controls

        if self.state == GameState.WAITING_SERVE:
            if key == controls.serve_left:
                self._serve(to_left=True)
            elif key == controls.serve_right:
                self._serve(to_left=False)

        if key == controls.p1_left:
            self.player_1.press_left()
        elif key == controls.p1_right:
            self.player_1.press_right()
        elif key == controls.p1_jump:
            self.player_1.request_jump()

        if key == controls.p2_left:
            self.player_2.press_left()
        elif key == controls.p2_right:
            self.player_2.press_right()
        elif key == controls.p2_jump:
            self.player_2.request_jump()

    def step(self) -> StepResult:
        """
        Advance the game by one fixed tick.

        Returns:
            StepResult describing contacts and any point scored
        """
        self.total_steps += 1
        if self.logger is not None:
            self.logger.next_frame()

        for player in (self.player_1, self.player_2):
            if player.update(self.court, self.config, self.dt):
                self._log(
                    EventType.PLAYER_JUMP,
                    {"player_id": player.player_id, "x": player.x},
                    f"P{player.player_id + 1} jumps",
                )

        if self.state == GameState.WAITING_SERVE:
            return StepResult(point_result=None, contacts=(False, False))

        ball = self.ball
        config = self.config
        ball.integrate(config.ball_gravity, self.dt)

        wall = ball.bounce_walls(self.court, config.ball_restitution)
        if wall is not None:
            self._log(EventType.WALL_BOUNCE, {"wall": wall, "y": ball.y}, f"Ball bounced off {wall} wall")

        if ball.bounce_ceiling(self.court, config.ball_restitution):
            self._log(EventType.CEILING_BOUNCE, {"x": ball.x}, "Ball bounced off ceiling")

        if ball.bounce_net(self.court, config):
            self._log(EventType.NET_BOUNCE, {"x": ball.x, "y": ball.y}, "Ball bounced off net")

        contacts = []
        for player in (self.player_1, self.player_2):
            before = self.ball
            self.ball = resolve_blob_collision(
                before, player.collision_center(config), player.vx, config
            )
            touched = self.ball is not before
            contacts.append(touched)
            if touched:
                self._log(
                    EventType.PLAYER_CONTACT,
                    {"player_id": player.player_id, "vx": self.ball.vx, "vy": self.ball.vy},
                    f"P{player.player_id + 1} touched the ball",
                )

        point_result = None
        if self.ball.y >= self.court.ground_ball_y:
            # Landing on a side scores for the other side
            winner = 1 - self.court.side_of(self.ball.x)
            point_result = self._end_point(winner)

        return StepResult(point_result=point_result, contacts=(contacts[0], contacts[1]))

    def reset(self) -> None:
        """Start a new match: scores cleared, everything back in place."""
        (pos_1, pos_2) = self.court.get_player_start_positions()
        self.player_1.reset(*pos_1)
        self.player_2.reset(*pos_2)

        self.scores = [0, 0]
        self.total_steps = 0
        self.state = GameState.WAITING_SERVE
        self.serve_to_left = True
        self.ball = create_serve_ball(self.court, self.config, self.serve_to_left)
        self._log(EventType.GAME_RESET, {}, "Match reset")

    @property
    def is_waiting_serve(self) -> bool:
        """True while the ball is parked waiting for a serve key."""
        return self.state == GameState.WAITING_SERVE

    @property
    def score(self) -> Tuple[int, int]:
        """(player_1_score, player_2_score)"""
        return (self.scores[0], self.scores[1])

    @property
    def ball_state(self) -> Tuple[float, float, float, float]:
        """(x, y, vx, vy)"""
        return self.ball.state

    @property
    def player_positions(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """((p1_x, p1_y), (p2_x, p2_y))"""
        return (self.player_1.position, self.player_2.position)
