"""Player logic for Terminal Volley."""

from dataclasses import dataclass
from typing import Tuple

from config import Config
from court import Court


@dataclass
class Player:
    """
    A blob player standing on the ground of its half of the court.

    Terminal input only reports key presses, never releases, so a
    direction stays held until the opposite direction is pressed.
    """

    player_id: int  # 0 for player 1 (left), 1 for player 2 (right)
    x: float
    y: float
    vy: float = 0.0
    on_ground: bool = True
    left_held: bool = False
    right_held: bool = False
    jump_requested: bool = False
    prev_x: float = 0.0
    vx: float = 0.0  # Finite-difference estimate, used for ball carry

    def __post_init__(self):
        self.prev_x = self.x

    def press_left(self) -> None:
        self.left_held = True
        self.right_held = False

    def press_right(self) -> None:
        self.right_held = True
        self.left_held = False

    def request_jump(self) -> None:
        self.jump_requested = True

    def command_velocity(self, config: Config) -> float:
        """Horizontal speed requested by the held direction."""
        speed = config.move_speed if self.on_ground else config.air_move_speed
        velocity = 0.0
        if self.left_held:
            velocity -= speed
        if self.right_held:
            velocity += speed
        return velocity

    def update(self, court: Court, config: Config, dt: float) -> bool:
        """
        Advance the player by one tick.

        Args:
            court: The court (for half-court clamping and ground line)
            config: Tuning constants
            dt: Tick duration

        Returns:
            True if the player took off this tick
        """
        self.x += self.command_velocity(config) * dt
        self.x = court.clamp_player_x(self.player_id, self.x)

        jumped = False
        if self.jump_requested and self.on_ground:
            self.vy = config.jump_velocity
            self.on_ground = False
            jumped = True
        self.jump_requested = False

        if not self.on_ground:
            self.vy += config.gravity * dt
            self.y += self.vy * dt
            if self.y >= court.ground_y:
                self.y = float(court.ground_y)
                self.vy = 0.0
                self.on_ground = True

        self.vx = (self.x - self.prev_x) / dt
        self.prev_x = self.x
        return jumped

    def collision_center(self, config: Config) -> Tuple[float, float]:
        """Centre of the blob's collision circle."""
        return (self.x, self.y - config.blob_center_offset)

    @property
    def position(self) -> Tuple[float, float]:
        """Get player position as tuple."""
        return (self.x, self.y)

    def reset(self, x: float, y: float) -> None:
        """Put the player back on the ground at a position, controls released."""
        self.x = x
        self.y = y
        self.vy = 0.0
        self.on_ground = True
        self.left_held = False
        self.right_held = False
        self.jump_requested = False
        self.prev_x = x
        self.vx = 0.0


def create_players(court: Court) -> Tuple[Player, Player]:
    """
    Create both players at their starting positions.

    Args:
        court: The court

    Returns:
        Tuple of (player_1, player_2)
    """
    (pos_a, pos_b) = court.get_player_start_positions()

    player_1 = Player(player_id=0, x=pos_a[0], y=pos_a[1])
    player_2 = Player(player_id=1, x=pos_b[0], y=pos_b[1])

    return (player_1, player_2)
