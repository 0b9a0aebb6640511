"""
Event log for Terminal Volley.

Records what happens inside the simulation (serves, bounces, contacts,
points) so a run can be inspected after the fact, and checks the game
state for rule violations.
"""

import json
import math
from collections import Counter, deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, TextIO


class EventType(Enum):
    """Types of game events."""

    # Ball
    SERVE = "serve"
    WALL_BOUNCE = "wall_bounce"
    CEILING_BOUNCE = "ceiling_bounce"
    NET_BOUNCE = "net_bounce"

    # Players
    PLAYER_JUMP = "player_jump"
    PLAYER_CONTACT = "player_contact"

    # Match
    POINT_SCORED = "point_scored"
    GAME_RESET = "game_reset"

    VALIDATION_ERROR = "validation_error"


@dataclass
class DebugEvent:
    """One event, stamped with the tick it happened on."""

    frame: int
    event_type: EventType
    data: Dict[str, Any]
    message: str

    def format(self) -> str:
        return f"[{self.frame:06d}] {self.event_type.value}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick": self.frame,
            "type": self.event_type.value,
            "message": self.message,
            "data": self.data,
        }


class DebugLogger:
    """
    Bounded, tick-stamped record of game events.

    The game calls next_frame() once per step, so `frame` is the number
    of steps taken. Only the newest `max_events` events are kept.
    """

    def __init__(
        self,
        enabled: bool = True,
        max_events: int = 10000,
        stream: Optional[TextIO] = None,
    ):
        self.enabled = enabled
        self.max_events = max_events
        self.events: Deque[DebugEvent] = deque(maxlen=max_events)
        self.frame = 0
        self.print_live = False
        self.stream = stream  # None means stdout

    def log(self, event_type: EventType, data: Dict[str, Any], message: str = ""):
        """Record an event at the current tick."""
        if not self.enabled:
            return
        event = DebugEvent(self.frame, event_type, data, message)
        self.events.append(event)
        if self.print_live:
            print(event.format(), file=self.stream)

    def next_frame(self):
        self.frame += 1

    def reset(self):
        """Drop all events and start counting ticks from zero."""
        self.events.clear()
        self.frame = 0

    def get_events_by_type(self, event_type: EventType) -> List[DebugEvent]:
        return [e for e in self.events if e.event_type is event_type]

    def get_last_n_events(self, n: int) -> List[DebugEvent]:
        if n <= 0:
            return []
        return list(self.events)[-n:]

    def count_by_type(self) -> Dict[str, int]:
        """Number of stored events per event type."""
        return dict(Counter(e.event_type.value for e in self.events))

    def summary_lines(self) -> List[str]:
        lines = [f"Ticks: {self.frame}", f"Events kept: {len(self.events)}"]
        for type_name, count in sorted(self.count_by_type().items()):
            lines.append(f"  {type_name}: {count}")

        errors = self.get_events_by_type(EventType.VALIDATION_ERROR)
        if errors:
            lines.append(f"Validation errors: {len(errors)}")
            lines.extend(f"  tick {e.frame}: {e.message}" for e in errors[:5])
            if len(errors) > 5:
                lines.append(f"  ... and {len(errors) - 5} more")
        return lines

    def print_summary(self):
        rule = "=" * 60
        print("\n" + rule, file=self.stream)
        print("EVENT LOG", file=self.stream)
        print(rule, file=self.stream)
        for line in self.summary_lines():
            print(line, file=self.stream)
        print(rule, file=self.stream)

    def export_json(self, filepath: str) -> int:
        """
        Write the kept events and per-type counts to a JSON file.

        Returns:
            Number of events written
        """
        payload = {
            "ticks": self.frame,
            "counts": self.count_by_type(),
            "events": [e.to_dict() for e in self.events],
        }
        with open(filepath, "w") as f:
            json.dump(payload, f, indent=2)
        return len(payload["events"])


class GameValidator:
    """
    Checks game state after a step and logs what is wrong.

    Rules checked:
    - Players outside their half of the court
    - Ball position or velocity becoming NaN or infinite
    - Ball moving while a serve is pending
    """

    def __init__(self, logger: DebugLogger):
        self.logger = logger
        self._frozen_ball = None

    def validate_player_position(self, game, player) -> bool:
        """Check the half-court clamp."""
        low, high = game.court.player_bounds(player.player_id)
        if low <= player.x <= high:
            return True
        self.logger.log(
            EventType.VALIDATION_ERROR,
            {"player_id": player.player_id, "x": player.x, "min": low, "max": high},
            f"Player {player.player_id + 1} left its half: x={player.x:.2f}",
        )
        return False

    def validate_ball_state(self, game) -> bool:
        """Check the ball state holds finite numbers."""
        state = game.ball_state
        if all(math.isfinite(v) for v in state):
            return True
        self.logger.log(
            EventType.VALIDATION_ERROR,
            {"state": list(state)},
            f"Ball state is not finite: {state}",
        )
        return False

    def validate_serve_freeze(self, game) -> bool:
        """Check the ball does not move while a serve is pending."""
        if not game.is_waiting_serve:
            self._frozen_ball = None
            return True

        state = game.ball_state
        previous, self._frozen_ball = self._frozen_ball, state
        if previous is None or previous == state:
            return True
        self.logger.log(
            EventType.VALIDATION_ERROR,
            {"before": list(previous), "after": list(state)},
            "Ball moved while waiting for serve",
        )
        return False

    def validate(self, game) -> bool:
        """Run every check against the current game state."""
        results = [
            self.validate_player_position(game, game.player_1),
            self.validate_player_position(game, game.player_2),
            self.validate_ball_state(game),
            self.validate_serve_freeze(game),
        ]
        return all(results)
