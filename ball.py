"""Ball logic for Terminal Volley."""

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from config import Config
from court import Court


@dataclass
class Ball:
    """The volleyball: position and velocity in cells and cells/sec."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 1.05

    def integrate(self, gravity: float, dt: float) -> None:
        """Apply gravity, then advance position by one tick."""
        self.vy += gravity * dt
        self.x += self.vx * dt
        self.y += self.vy * dt

    def bounce_walls(self, court: Court, restitution: float) -> Optional[str]:
        """
        Keep the ball between the side walls.

        Returns:
            None if no bounce, otherwise 'left' or 'right'
        """
        left, right = court.wall_bounds
        if self.x <= left:
            self.x = left
            self.vx = -self.vx * restitution
            return "left"
        if self.x >= right:
            self.x = right
            self.vx = -self.vx * restitution
            return "right"
        return None

    def bounce_ceiling(self, court: Court, restitution: float) -> bool:
        """Keep the ball below the ceiling. Returns True on a bounce."""
        top = court.ceiling_y
        if self.y <= top:
            self.y = top
            self.vy = -self.vy * restitution
            return True
        return False

    def bounce_net(self, court: Court, config: Config) -> bool:
        """
        Push the ball out of the net to the side it came from.

        Returns:
            True if the ball touched the net
        """
        if not court.in_net_span(self.y):
            return False
        if abs(self.x - court.net_x) >= config.net_half_thickness + self.radius:
            return False

        if self.x < court.net_x:
            self.x = court.net_x - (1 + self.radius)
        else:
            self.x = court.net_x + (1 + self.radius)
        self.vx = -self.vx * config.ball_restitution
        return True

    def get_speed(self) -> float:
        """Get the current speed of the ball."""
        return math.sqrt(self.vx**2 + self.vy**2)

    @property
    def position(self) -> Tuple[float, float]:
        """Get ball position as tuple."""
        return (self.x, self.y)

    @property
    def velocity(self) -> Tuple[float, float]:
        """Get ball velocity as tuple."""
        return (self.vx, self.vy)

    @property
    def state(self) -> Tuple[float, float, float, float]:
        """(x, y, vx, vy)"""
        return (self.x, self.y, self.vx, self.vy)

    def reset(self, x: float, y: float, vx: float = 0.0, vy: float = 0.0) -> None:
        """Place the ball, by default at rest."""
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy


def resolve_blob_collision(
    ball: Ball, center: Tuple[float, float], player_vx: float, config: Config
) -> Ball:
    """
    Bounce the ball off a player blob.

    The blob is a circle of config.blob_radius around center. On contact
    the ball is pushed out to touching distance, the part of its velocity
    heading into the blob is mirrored, and it gets an outward kick plus a
    share of the player's horizontal speed. Both components are then
    damped so repeated contacts cannot pump energy forever.

    Args:
        ball: Ball before contact (not modified)
        center: Blob collision centre (x, y)
        player_vx: Estimated horizontal speed of the player
        config: Tuning constants

    Returns:
        The ball after contact, or the same ball if there is no contact
    """
    cx, cy = center
    dx = ball.x - cx
    dy = ball.y - cy
    d2 = dx * dx + dy * dy
    reach = config.blob_radius + ball.radius

    # Coincident centres have no usable normal
    if d2 > reach * reach or d2 <= config.collision_epsilon:
        return ball

    d = math.sqrt(d2)
    nx, ny = dx / d, dy / d

    penetration = reach - d
    x = ball.x + nx * penetration
    y = ball.y + ny * penetration

    vx, vy = ball.vx, ball.vy
    dot = vx * nx + vy * ny
    if dot < 0:
        vx -= 2 * dot * nx
        vy -= 2 * dot * ny

    vx += nx * config.player_kick
    vy += ny * config.player_kick

    vx += player_vx * config.player_carry

    vx *= config.contact_damping
    vy *= config.contact_damping

    return replace(ball, x=x, y=y, vx=vx, vy=vy)


def create_serve_ball(court: Court, config: Config, to_left: bool = True) -> Ball:
    """
    Create a ball parked at the serve point.

    Args:
        court: The court
        config: Game configuration
        to_left: Side the serve would travel toward

    Returns:
        Ball at the serve point with zero velocity
    """
    x, y, _, _ = court.serve_state(to_left)
    return Ball(x=x, y=y, radius=config.ball_radius)
