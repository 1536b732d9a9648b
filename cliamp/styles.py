"""Terminal text styling: ANSI colours, bold text and rounded frames."""

from __future__ import annotations

import re
from dataclasses import dataclass

from wcwidth import wcswidth, wcwidth

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_RESET = "\x1b[0m"


def _strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def _cell_width(line: str) -> int:
    width = wcswidth(line)
    if width >= 0:
        return width
    return sum(max(wcwidth(ch), 0) for ch in line)


def visible_width(text: str) -> int:
    """Return the widest line of ``text`` in terminal cells, ignoring escapes."""
    return max(_cell_width(_strip_ansi(line)) for line in text.split("\n"))


def _foreground_code(color: int) -> int:
    if 0 <= color <= 7:
        return 30 + color
    if 8 <= color <= 15:
        return 90 + color - 8
    raise ValueError(f"ANSI colour must be in 0..15, got {color}")


@dataclass(frozen=True)
class Style:
    """A foreground colour from the 16-colour ANSI palette plus bold."""

    foreground: int | None = None
    bold: bool = False

    def __post_init__(self) -> None:
        if self.foreground is not None:
            _foreground_code(self.foreground)

    def _prefix(self) -> str:
        codes = []
        if self.bold:
            codes.append("1")
        if self.foreground is not None:
            codes.append(str(_foreground_code(self.foreground)))
        return f"\x1b[{';'.join(codes)}m" if codes else ""

    def render(self, text: str) -> str:
        """Wrap each non-empty line of ``text`` in this style's escapes."""
        prefix = self._prefix()
        if not prefix:
            return text
        return "\n".join(
            f"{prefix}{line}{_RESET}" if line else line for line in text.split("\n")
        )


COLOR_BORDER = 8
COLOR_TITLE = 10
COLOR_TEXT = 7
COLOR_DIM = 8
COLOR_ACCENT = 11
COLOR_PLAYING = 10
COLOR_SEEK_BAR = 11
COLOR_VOLUME = 2
COLOR_ERROR = 9

SPECTRUM_LOW = 10
SPECTRUM_MID = 11
SPECTRUM_HIGH = 9

FRAME_WIDTH = 66
FRAME_PADDING = (1, 2)
MINI_FRAME_PADDING = (0, 1)

BORDER = Style(COLOR_BORDER)
TITLE = Style(COLOR_TITLE, bold=True)
TRACK = Style(COLOR_ACCENT)
TIME = Style(COLOR_TEXT)
STATUS = Style(COLOR_PLAYING, bold=True)
DIM = Style(COLOR_DIM)
LABEL = Style(COLOR_TEXT, bold=True)
EQ_ACTIVE = Style(COLOR_ACCENT, bold=True)
EQ_INACTIVE = Style(COLOR_DIM)
PLAYLIST_ACTIVE = Style(COLOR_PLAYING, bold=True)
PLAYLIST_ITEM = Style(COLOR_TEXT)
PLAYLIST_SELECTED = Style(COLOR_ACCENT, bold=True)
HELP = Style(COLOR_DIM)
ERROR = Style(COLOR_ERROR)


def frame(content: str, width: int, padding_v: int, padding_h: int) -> str:
    """Draw a rounded border around ``content``.

    ``width`` is the outer width including the border; each content line is
    padded on the right to fill the space inside the horizontal padding.
    """
    if padding_v < 0 or padding_h < 0:
        raise ValueError("padding must not be negative")
    inner = width - 2 - 2 * padding_h
    if inner < 0:
        raise ValueError(f"width {width} is too small for padding {padding_h}")

    body_width = width - 2
    blank = " " * body_width
    side_pad = " " * padding_h
    body = [
        side_pad + line + " " * max(0, inner - visible_width(line)) + side_pad
        for line in content.split("\n")
    ]
    rows = [blank] * padding_v + body + [blank] * padding_v

    side = BORDER.render("│")
    top = BORDER.render("╭" + "─" * body_width + "╮")
    bottom = BORDER.render("╰" + "─" * body_width + "╯")
    return "\n".join([top, *(side + row + side for row in rows), bottom])