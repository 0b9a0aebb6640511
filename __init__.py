"""
Terminal Volley

Two-player volleyball on a character grid. Both players share one
keyboard; the simulation runs at a fixed tick rate and is drawn with
ANSI escape sequences.
"""

from ball import Ball, create_serve_ball, resolve_blob_collision
from config import DEFAULT_CONFIG, Config
from controls import DEFAULT_CONTROLS, Controls, ControlsError, load_controls
from court import Court, round_half_away
from game import Game, GameState, PointResult, StepResult
from player import Player, create_players

__version__ = "0.1.0"

__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "Controls",
    "ControlsError",
    "DEFAULT_CONTROLS",
    "load_controls",
    "Court",
    "round_half_away",
    "Ball",
    "create_serve_ball",
    "resolve_blob_collision",
    "Player",
    "create_players",
    "Game",
    "GameState",
    "PointResult",
    "StepResult",
]
