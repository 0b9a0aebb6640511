#!/usr/bin/env python3
"""
Terminal Volley - Main Entry Point

Two players share one keyboard and knock a ball over a net, drawn with
plain characters in the terminal.
"""

import argparse
import os
import random
import signal
import sys
import termios
import time
from typing import Optional

from tqdm import tqdm

from config import Config
from controls import Controls, ControlsError, DEFAULT_CONTROLS, load_controls
from debug import DebugLogger, GameValidator
from game import Game

DEFAULT_CONTROLS_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "controls.json")


def resolve_controls(path: Optional[str]) -> Controls:
    """
    Load bindings for this run.

    An explicit path must exist. Without one, controls.json next to this
    module is used when present, otherwise the built-in defaults.

    Raises:
        ControlsError: If the file is missing or malformed
    """
    if path is not None:
        return load_controls(path)
    if os.path.exists(DEFAULT_CONTROLS_PATH):
        return load_controls(DEFAULT_CONTROLS_PATH)
    return DEFAULT_CONTROLS


def _raise_system_exit(signum, frame):
    raise SystemExit(128 + signum)


def run_terminal_game(config: Config, controls: Controls) -> int:
    """Run an interactive game in the current terminal.

    Responsibilities are separated:
    - RawTerminal/KeyReader: raw mode and non-blocking key polling
    - InputHandler: quit handling, forwards keys to the game
    - Game: runs simulation logic
    - TerminalRenderer: draws game state to the screen (passive)

    Returns:
        Process exit status
    """
    from input_handler import InputHandler, KeyReader, RawTerminal
    from renderer import TerminalRenderer, compose_frame

    stdin_fd = sys.stdin.fileno()
    out = sys.stdout.buffer

    game = Game(config, controls)
    renderer = TerminalRenderer(out, config.court_width, config.court_height)
    input_handler = InputHandler(controls, KeyReader(stdin_fd))
    terminal = RawTerminal(stdin_fd)

    try:
        terminal.enable()
    except (termios.error, OSError) as e:
        print(f"raw mode: {e}", file=sys.stderr)
        return 1

    previous_sigterm = signal.signal(signal.SIGTERM, _raise_system_exit)
    try:
        renderer.hide_cursor()
        tick = config.dt
        next_tick = time.perf_counter()

        while True:
            input_handler.process_events(game)
            if not input_handler.running:
                break

            game.step()

            try:
                renderer.draw(compose_frame(game, controls))
            except BrokenPipeError:
                break

            # Fixed rate; if we fall behind, skip ahead instead of bursting
            next_tick += tick
            delay = next_tick - time.perf_counter()
            if delay > 0:
                time.sleep(delay)
            else:
                next_tick = time.perf_counter()
    finally:
        signal.signal(signal.SIGTERM, previous_sigterm)
        terminal.restore()
        try:
            renderer.reset_screen()
            renderer.show_cursor()
        except BrokenPipeError:
            pass

    p1_score, p2_score = game.score
    print(f"Final score: P1 {p1_score} : {p2_score} P2")
    return 0


def run_soak(
    config: Config,
    controls: Controls,
    num_ticks: int = 60000,
    seed: Optional[int] = None,
    key_rate: float = 0.05,
    export_path: Optional[str] = None,
) -> DebugLogger:
    """Run the simulation headless with random key presses.

    Every step is checked by GameValidator; the event summary is printed
    at the end.

    Returns:
        The logger holding every recorded event
    """
    print("\n=== Soak Run ===")
    print(f"Ticks: {num_ticks} ({num_ticks / config.tick_rate:.1f}s of play)")
    print(f"Seed: {seed}")
    print("================\n")

    rng = random.Random(seed)
    logger = DebugLogger(max_events=max(10000, num_ticks))
    validator = GameValidator(logger)
    game = Game(config, controls, logger=logger)

    game_keys = [
        controls.p1_left,
        controls.p1_right,
        controls.p1_jump,
        controls.p2_left,
        controls.p2_right,
        controls.p2_jump,
        controls.serve_left,
        controls.serve_right,
    ]

    tick_iterator = tqdm(range(1, num_ticks + 1), desc="Simulating", unit="tick")
    for tick in tick_iterator:
        for key in game_keys:
            if rng.random() < key_rate:
                game.handle_key(key)
        game.step()
        validator.validate(game)

        if tick % 1000 == 0:
            tick_iterator.set_postfix({"P1": game.score[0], "P2": game.score[1]})

    logger.print_summary()
    print(f"\nFinal: P1={game.score[0]} P2={game.score[1]}")

    if export_path:
        written = logger.export_json(export_path)
        print(f"Exported {written} events to {export_path}")

    return logger


def main(argv=None) -> int:
    defaults = Config()
    parser = argparse.ArgumentParser(
        description="Terminal Volley - two-player volleyball in your terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Play with the bundled controls.json
  python main.py

  # Play with custom key bindings
  python main.py --controls my_controls.json

  # Headless soak run: 100k ticks of random input, with validation
  python main.py --mode soak --ticks 100000 --seed 1

Default keys: P1 A/D move, W jump. P2 J/L move, I jump.
S serves left, K serves right, Q quits.
""",
    )
    parser.add_argument(
        "--mode",
        choices=["play", "soak"],
        default="play",
        help="Run mode (default: %(default)s)\n"
        "  play: interactive game in this terminal\n"
        "  soak: headless random-input run with validation",
    )
    parser.add_argument(
        "--controls",
        type=str,
        default=None,
        metavar="PATH",
        help="Controls JSON file (default: controls.json beside main.py)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=None,
        metavar="RATE",
        help=f"Simulation ticks per second (default: {defaults.tick_rate})",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=60000,
        metavar="N",
        help="Number of ticks for soak mode (default: %(default)s)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        metavar="SEED",
        help="Random seed for soak mode",
    )
    parser.add_argument(
        "--export",
        type=str,
        default=None,
        metavar="PATH",
        help="Write the soak event log to a JSON file",
    )

    args = parser.parse_args(argv)

    if args.fps is not None and args.fps <= 0:
        parser.error("--fps must be positive")

    try:
        controls = resolve_controls(args.controls)
    except ControlsError as e:
        print(f"load controls: {e}", file=sys.stderr)
        return 1

    config_kwargs = {}
    if args.fps is not None:
        config_kwargs["tick_rate"] = args.fps
    config = Config(**config_kwargs)

    if args.mode == "soak":
        run_soak(config, controls, num_ticks=args.ticks, seed=args.seed, export_path=args.export)
        return 0

    return run_terminal_game(config, controls)


if __name__ == "__main__":
    sys.exit(main())
