"""Keyboard input for Terminal Volley.

Puts the terminal in raw mode and polls stdin without blocking, so the
game loop can drain every pending key once per tick.
"""

import os
import select
import termios
import tty
from dataclasses import dataclass
from typing import List, Optional

from controls import Controls, normalize_key

CTRL_C = 0x03


class RawTerminal:
    """Raw mode for a terminal file descriptor, restorable on exit."""

    def __init__(self, fd: int):
        self.fd = fd
        self._saved: Optional[list] = None

    def enable(self) -> None:
        """
        Switch the terminal to raw mode.

        Raises:
            termios.error: If fd is not a terminal
        """
        self._saved = termios.tcgetattr(self.fd)
        tty.setraw(self.fd)

    def restore(self) -> None:
        """Put back the settings saved by enable()."""
        if self._saved is None:
            return
        termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
        self._saved = None

    @property
    def active(self) -> bool:
        return self._saved is not None

    def __enter__(self) -> "RawTerminal":
        self.enable()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()


class KeyReader:
    """Reads whatever bytes are waiting on a file descriptor, never blocking."""

    def __init__(self, fd: int, chunk_size: int = 64):
        self.fd = fd
        self.chunk_size = chunk_size
        self.closed = False

    def _ready(self) -> bool:
        readable, _, _ = select.select([self.fd], [], [], 0)
        return bool(readable)

    def read_available(self) -> bytes:
        """
        Drain all pending input.

        Returns:
            The bytes read, possibly empty. Sets `closed` at end of input.
        """
        if self.closed:
            return b""

        data = bytearray()
        while self._ready():
            chunk = os.read(self.fd, self.chunk_size)
            if not chunk:
                self.closed = True
                break
            data.extend(chunk)
        return bytes(data)


@dataclass
class InputState:
    """Current state of host-level controls."""

    quit_requested: bool = False
    keys_processed: int = 0


class InputHandler:
    """Routes raw key bytes to the game.

    Host-level keys (quit, Ctrl+C) are handled here; every other byte
    goes to Game.handle_key().
    """

    def __init__(self, controls: Controls, reader: KeyReader):
        self.controls = controls
        self.reader = reader
        self.state = InputState()

    def process_keys(self, keys: bytes, game) -> List[int]:
        """
        Apply a batch of key bytes in order.

        Returns:
            Normalized keys forwarded to the game
        """
        forwarded = []
        for raw in keys:
            key = normalize_key(raw)
            self.state.keys_processed += 1
            if key == self.controls.quit or key == CTRL_C:
                self.state.quit_requested = True
                break
            game.handle_key(key)
            forwarded.append(key)
        return forwarded

    def process_events(self, game) -> List[int]:
        """Drain pending input and apply it to the game."""
        forwarded = self.process_keys(self.reader.read_available(), game)
        if self.reader.closed:
            self.state.quit_requested = True
        return forwarded

    @property
    def running(self) -> bool:
        """True if game should continue running."""
        return not self.state.quit_requested
