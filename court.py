"""Court geometry for Terminal Volley."""

import math
from typing import Tuple

from config import Config


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Court:
    """
    The volleyball court: walls, ceiling, ground and a net in the middle.

    Coordinates are character cells with y growing downward. Player 1
    owns the left half, player 2 the right half.
    """

    # Keep blobs (3 cells wide) off the walls and the net
    PLAYER_MARGIN = 2

    def __init__(self, config: Config):
        self.config = config
        self.width = config.court_width
        self.height = config.court_height

        self.ground_y = config.ground_y
        self.ground_ball_y = config.ground_ball_y

        self.net_x = config.net_x
        self.net_top_y = config.net_top_y
        self.net_bottom_y = config.net_bottom_y

    @property
    def wall_bounds(self) -> Tuple[float, float]:
        """Leftmost and rightmost ball centre x."""
        r = self.config.ball_radius
        return (1 + r, float(self.width - 2) - r)

    @property
    def ceiling_y(self) -> float:
        """Topmost ball centre y."""
        return 1 + self.config.ball_radius

    def in_net_span(self, y: float) -> bool:
        """Check if a row (rounded) is covered by the net."""
        row = round_half_away(y)
        return self.net_top_y <= row <= self.net_bottom_y

    def player_bounds(self, player_id: int) -> Tuple[float, float]:
        """
        Horizontal range a player may occupy.

        Args:
            player_id: 0 for player 1 (left), 1 for player 2 (right)

        Returns:
            (min_x, max_x)
        """
        if player_id == 0:
            return (float(self.PLAYER_MARGIN), float(self.net_x - self.PLAYER_MARGIN))
        return (float(self.net_x + self.PLAYER_MARGIN), float(self.width - 3))

    def clamp_player_x(self, player_id: int, x: float) -> float:
        """Clamp a player position to its half of the court."""
        low, high = self.player_bounds(player_id)
        if x < low:
            return low
        if x > high:
            return high
        return x

    def side_of(self, x: float) -> int:
        """Side a ball at x is on: 0 strictly left of the net, otherwise 1."""
        return 0 if x < self.net_x else 1

    def serve_state(self, to_left: bool) -> Tuple[float, float, float, float]:
        """
        Ball state at the start of a serve.

        The ball starts high above the net and drifts slowly toward
        the chosen side.

        Returns:
            (x, y, vx, vy)
        """
        vx = self.config.serve_speed
        if to_left:
            vx = -vx
        return (self.width * 0.5, self.config.serve_height, vx, 0.0)

    def get_player_start_positions(
        self,
    ) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """
        Get starting positions for both players, on the ground and
        mirrored around the net.

        Returns:
            ((p1_x, p1_y), (p2_x, p2_y))
        """
        quarter = self.width // 4
        return (
            (float(quarter), float(self.ground_y)),
            (float(self.width - quarter), float(self.ground_y)),
        )
