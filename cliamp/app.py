"""Command-line entry point and the terminal event loop."""

from __future__ import annotations

import argparse
import glob
import sys
import time
from typing import Iterable, Sequence

from cliamp.model import TICK_INTERVAL, Model
from cliamp.player import Player
from cliamp.playlist import Playlist, track_from_path

SAMPLE_RATE = 44100
USAGE_ERROR = "usage: cliamp [--autoplay] <file.mp3> [file2.mp3 ...]"

_SEQUENCE_NAMES = {
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_ENTER": "enter",
    "KEY_TAB": "tab",
}

_CONTROL_NAMES = {
    "\x03": "ctrl+c",
    "\t": "tab",
    "\r": "enter",
    "\n": "enter",
}


def expand_args(args: Iterable[str]) -> list[str]:
    """Expand glob patterns, keeping arguments that match nothing as they are."""
    files: list[str] = []
    for arg in args:
        matches = sorted(glob.glob(arg))
        files.extend(matches if matches else [arg])
    return files


def build_playlist(files: Iterable[str]) -> Playlist:
    """Create a playlist holding one track per file path."""
    playlist = Playlist()
    playlist.add(*(track_from_path(f) for f in files))
    return playlist


def key_name(keystroke) -> str:
    """Name a key press the way the model expects; "" for keys it ignores."""
    name = getattr(keystroke, "name", None)
    if name in _SEQUENCE_NAMES:
        return _SEQUENCE_NAMES[name]
    text = str(keystroke)
    if text in _CONTROL_NAMES:
        return _CONTROL_NAMES[text]
    if getattr(keystroke, "is_sequence", False):
        return ""
    return text


def _draw(terminal, screen: str) -> None:
    body = screen.replace("\n", terminal.clear_eol + "\r\n")
    terminal.stream.write(terminal.home + body + terminal.clear_eol + terminal.clear_eos)
    terminal.stream.flush()


def run(model: Model, terminal) -> None:
    """Drive ``model`` from key presses and timer ticks until it quits."""
    with terminal.fullscreen(), terminal.raw(), terminal.hidden_cursor():
        size = (terminal.width, terminal.height)
        model.resize(*size)
        model.start()
        next_tick = time.monotonic() + TICK_INTERVAL
        while True:
            current = (terminal.width, terminal.height)
            if current != size:
                size = current
                model.resize(*size)
            _draw(terminal, model.view())

            timeout = max(0.0, next_tick - time.monotonic())
            keystroke = terminal.inkey(timeout=timeout)
            if keystroke:
                name = key_name(keystroke)
                if name and model.handle_key(name):
                    return

            now = time.monotonic()
            if now >= next_tick:
                model.tick()
                next_tick = now + TICK_INTERVAL


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cliamp",
        usage="cliamp [flags] <file.mp3> [file2.mp3 ...]",
    )
    parser.add_argument(
        "-autoplay",
        "--autoplay",
        action="store_true",
        help="start playing the first track immediately",
    )
    parser.add_argument(
        "-mini",
        "--mini",
        action="store_true",
        help="compact minimal UI with less width",
    )
    parser.add_argument("files", nargs="*", help=argparse.SUPPRESS)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the player on the files named in ``argv``; return the exit status."""
    args = _parser().parse_args(argv)
    if not args.files:
        print(USAGE_ERROR, file=sys.stderr)
        return 1

    playlist = build_playlist(expand_args(args.files))

    from blessed import Terminal

    with Player(SAMPLE_RATE) as player:
        model = Model(player, playlist, auto_play=args.autoplay, mini=args.mini)
        run(model, Terminal())
    return 0