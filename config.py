"""Configuration for Terminal Volley."""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Any


@dataclass
class Config:
    """Court size, timing and tuning parameters for the simulation."""

    # Court dimensions (character cells)
    court_width: int = 80
    court_height: int = 24

    # Fixed simulation rate (ticks per second)
    tick_rate: int = 200

    # Player movement (cells/sec, cells/sec^2)
    move_speed: float = 20.0
    air_move_speed: float = 12.0
    jump_velocity: float = -28.0  # Negative is upward
    gravity: float = 32.0

    # Ball physics
    ball_gravity: float = 18.0
    ball_restitution: float = 0.78
    player_kick: float = 10.0
    player_carry: float = 0.30
    contact_damping: float = 0.98
    collision_epsilon: float = 0.0001

    # Geometry
    ball_radius: float = 1.05
    blob_radius: float = 1.7
    blob_center_offset: float = 0.5  # Collision center sits above the feet
    net_half_thickness: float = 0.6
    net_height: int = 6

    # Serve
    serve_speed: float = 6.0
    serve_height: float = 4.0

    @property
    def dt(self) -> float:
        """Duration of one tick in seconds."""
        return 1.0 / self.tick_rate

    @property
    def ground_y(self) -> int:
        """Row the players stand on."""
        return self.court_height - 2

    @property
    def ground_ball_y(self) -> float:
        """Ball rows at or below this count as touching the ground."""
        return float(self.court_height - 2)

    @property
    def net_x(self) -> int:
        return self.court_width // 2

    @property
    def net_top_y(self) -> int:
        return self.court_height - 2 - self.net_height

    @property
    def net_bottom_y(self) -> int:
        return self.court_height - 2

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


# Default configuration instance
DEFAULT_CONFIG = Config()
