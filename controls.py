"""Keyboard bindings for Terminal Volley.

Bindings are single ASCII bytes. Letters are stored upper case so a key
matches regardless of shift state.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Union


class ControlsError(ValueError):
    """Raised when a controls file or binding is malformed."""


def normalize_key(key: Union[int, str]) -> int:
    """
    Convert a key to its upper-case byte code.

    Args:
        key: Byte code or one-character string

    Returns:
        Byte code with ASCII letters folded to upper case
    """
    if isinstance(key, str):
        key = ord(key)
    if ord("a") <= key <= ord("z"):
        return key - 32
    return key


def key_from_config(field: str, value: Any) -> int:
    """
    Validate a binding read from a config file.

    Args:
        field: Dotted name of the binding, used in error messages
        value: Raw value from the file

    Returns:
        Normalized byte code

    Raises:
        ControlsError: If the value is not exactly one ASCII character
    """
    if not isinstance(value, str) or len(value) != 1:
        raise ControlsError(f"{field} must be exactly 1 ASCII character, got {value!r}")
    if ord(value) > 127:
        raise ControlsError(f"{field} must be ASCII, got {value!r}")
    return normalize_key(value)


@dataclass
class Controls:
    """Byte codes bound to each game action."""

    p1_left: int = ord("A")
    p1_right: int = ord("D")
    p1_jump: int = ord("W")
    p2_left: int = ord("J")
    p2_right: int = ord("L")
    p2_jump: int = ord("I")
    serve_left: int = ord("S")
    serve_right: int = ord("K")
    quit: int = ord("Q")

    def __post_init__(self):
        for name in self.__dataclass_fields__:
            setattr(self, name, normalize_key(getattr(self, name)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the controls file layout."""
        return {
            "quit": chr(self.quit),
            "serveLeft": chr(self.serve_left),
            "serveRight": chr(self.serve_right),
            "player1": {
                "left": chr(self.p1_left),
                "right": chr(self.p1_right),
                "jump": chr(self.p1_jump),
            },
            "player2": {
                "left": chr(self.p2_left),
                "right": chr(self.p2_right),
                "jump": chr(self.p2_jump),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Controls":
        """
        Create controls from the controls file layout.

        Missing entries keep their default binding.

        Raises:
            ControlsError: If any present binding is invalid
        """
        if not isinstance(data, dict):
            raise ControlsError("controls must be a JSON object")

        defaults = cls().to_dict()
        kwargs = {}

        for key, attr in (("quit", "quit"), ("serveLeft", "serve_left"), ("serveRight", "serve_right")):
            kwargs[attr] = key_from_config(f"controls.{key}", data.get(key, defaults[key]))

        for player, prefix in (("player1", "p1"), ("player2", "p2")):
            section = data.get(player, {})
            if not isinstance(section, dict):
                raise ControlsError(f"controls.{player} must be a JSON object")
            for action in ("left", "right", "jump"):
                value = section.get(action, defaults[player][action])
                kwargs[f"{prefix}_{action}"] = key_from_config(
                    f"controls.{player}.{action}", value
                )

        return cls(**kwargs)


def load_controls(path: str) -> Controls:
    """
    Load controls from a JSON file.

    Raises:
        ControlsError: If the file cannot be read or parsed
    """
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except OSError as e:
        raise ControlsError(f"read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ControlsError(f"parse {path}: {e}") from e
    return Controls.from_dict(data)


# Default bindings
DEFAULT_CONTROLS = Controls()
