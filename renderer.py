"""ANSI terminal renderer for Terminal Volley."""

from typing import BinaryIO, List, Union

import numpy as np

from controls import Controls
from court import round_half_away
from game import Game

# Escape sequences
CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
RESET_SCREEN = b"\x1b[0m\x1b[2J\x1b[H"

# Sprites
GROUND_CHAR = ord("_")
NET_CHAR = ord("|")
BLOB_CHAR = ord("O")
BALL_CHAR = ord("*")

BLOB_WIDTH = 3
BLOB_HEIGHT = 2


def _char(ch: Union[int, str]) -> int:
    return ord(ch) if isinstance(ch, str) else ch


class Frame:
    """A fixed-size character grid, one byte per cell, row-major."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.cells = np.full((height, width), ord(" "), dtype=np.uint8)

    def clear(self, ch: Union[int, str] = " ") -> None:
        self.cells.fill(_char(ch))

    def set(self, x: int, y: int, ch: Union[int, str]) -> None:
        """Write one cell. Writes outside the grid are dropped."""
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return
        self.cells[y, x] = _char(ch)

    def get(self, x: int, y: int) -> str:
        return chr(self.cells[y, x])

    def draw_ground(self) -> None:
        if self.height > 0:
            self.cells[self.height - 1, :] = GROUND_CHAR

    def draw_net(self) -> None:
        """Vertical net rising from just above the ground, six rows high."""
        net_x = self.width // 2
        y = self.height - 2
        while y >= self.height - 8 and y >= 0:
            self.set(net_x, y, NET_CHAR)
            y -= 1

    def draw_blob(self, x: int, y: int) -> None:
        """3x2 blob with its feet at (x, y)."""
        for dy in range(BLOB_HEIGHT):
            for dx in range(-(BLOB_WIDTH // 2), BLOB_WIDTH // 2 + 1):
                self.set(x + dx, y - dy, BLOB_CHAR)

    def draw_ball(self, x: int, y: int) -> None:
        self.set(x, y, BALL_CHAR)

    def draw_text(self, x: int, y: int, text: str) -> int:
        """
        Write text left to right, clipped at the right edge.

        Returns:
            Number of characters written
        """
        written = 0
        for i, ch in enumerate(text):
            if x + i >= self.width:
                break
            self.set(x + i, y, ord(ch))
            written += 1
        return written

    def rows(self) -> List[bytes]:
        """Frame content as one bytes object per row."""
        return [row.tobytes() for row in self.cells]


class TerminalRenderer:
    """
    Writes frames to a terminal using ANSI escapes.

    The screen is cleared once on the first draw; later draws only move
    the cursor home and overwrite, which avoids flicker.
    """

    def __init__(self, out: BinaryIO, width: int, height: int):
        self.out = out
        self.width = width
        self.height = height
        self._cleared_once = False

    def _write(self, data: bytes) -> None:
        self.out.write(data)
        self.out.flush()

    def hide_cursor(self) -> None:
        self._write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._write(SHOW_CURSOR)

    def reset_screen(self) -> None:
        """Clear attributes and screen, cursor home."""
        self._write(RESET_SCREEN)

    def draw(self, frame: Frame) -> None:
        """
        Draw a full frame.

        Rows are separated by CRLF because raw mode disables output
        post-processing. No newline follows the last row so the screen
        never scrolls.

        Raises:
            ValueError: If the frame size differs from the renderer size
        """
        if frame.width != self.width or frame.height != self.height:
            raise ValueError(
                f"frame size {frame.width}x{frame.height} != renderer {self.width}x{self.height}"
            )

        parts = []
        if not self._cleared_once:
            parts.append(CLEAR_SCREEN)
            self._cleared_once = True
        parts.append(CURSOR_HOME)
        parts.append(b"\r\n".join(frame.rows()))
        self._write(b"".join(parts))


def compose_frame(game: Game, controls: Controls) -> Frame:
    """
    Build the frame for the current game state.

    Args:
        game: Game to draw
        controls: Bindings, for the serve hint

    Returns:
        Frame with court, players, ball and the status line
    """
    config = game.config
    frame = Frame(config.court_width, config.court_height)
    frame.draw_ground()
    frame.draw_net()

    for x, y in game.player_positions:
        frame.draw_blob(round_half_away(x), round_half_away(y))

    bx, by, _, _ = game.ball_state
    frame.draw_ball(round_half_away(bx), round_half_away(by))

    p1_score, p2_score = game.score
    status = f"P1 {p1_score} : {p2_score} P2"
    written = frame.draw_text(0, 0, status)

    if game.is_waiting_serve:
        hint = (
            f"  ({chr(controls.serve_left)} = serve left, "
            f"{chr(controls.serve_right)} = serve right)"
        )
        frame.draw_text(written, 0, hint)

    return frame
