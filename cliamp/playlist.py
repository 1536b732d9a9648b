"""An ordered track list with shuffle and repeat modes."""

from __future__ import annotations

import os
import random
from dataclasses import dataclass
from enum import IntEnum


class RepeatMode(IntEnum):
    """How the playlist behaves when it runs out of tracks."""

    OFF = 0
    ALL = 1
    ONE = 2

    def __str__(self) -> str:
        return {RepeatMode.ALL: "All", RepeatMode.ONE: "One"}.get(self, "Off")


@dataclass(frozen=True)
class Track:
    """A single audio file."""

    path: str
    title: str
    artist: str = ""

    def display_name(self) -> str:
        """Return "Artist - Title", or just the title when there is no artist."""
        if self.artist:
            return f"{self.artist} - {self.title}"
        return self.title


def _base_name(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/" + os.sep)
    if not stripped:
        return os.sep
    return os.path.basename(stripped)


def track_from_path(path: str) -> Track:
    """Build a track from a file name of the form "Artist - Title.ext"."""
    base = _base_name(path)
    dot = base.rfind(".")
    name = base[:dot] if dot >= 0 else base
    artist, sep, title = name.partition(" - ")
    if sep:
        return Track(path=path, title=title.strip(), artist=artist.strip())
    return Track(path=path, title=name)


class Playlist:
    """Tracks in play order, with optional shuffle and repeat."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._tracks: list[Track] = []
        self._order: list[int] = []
        self._pos = 0
        self._shuffle = False
        self._repeat = RepeatMode.OFF
        self._rng = rng if rng is not None else random.Random()

    def add(self, *tracks: Track) -> None:
        """Append tracks to the end of the list and the play order."""
        start = len(self._tracks)
        self._tracks.extend(tracks)
        self._order.extend(range(start, len(self._tracks)))

    def __len__(self) -> int:
        return len(self._tracks)

    def _current_track(self) -> Track:
        return self._tracks[self._order[self._pos]]

    def current(self) -> tuple[Track | None, int]:
        """Return the current track and its index, or (None, -1) when empty."""
        if not self._tracks:
            return None, -1
        idx = self._order[self._pos]
        return self._tracks[idx], idx

    def index(self) -> int:
        """Return the track index at the current position, or -1 when empty."""
        if not self._order:
            return -1
        return self._order[self._pos]

    def next(self) -> Track | None:
        """Advance and return the next track; None at the end with repeat off."""
        if not self._tracks:
            return None
        if self._repeat is RepeatMode.ONE:
            return self._current_track()
        if self._pos + 1 < len(self._order):
            self._pos += 1
            return self._current_track()
        if self._repeat is RepeatMode.ALL:
            self._pos = 0
            if self._shuffle:
                self._shuffle_order()
            return self._current_track()
        return None

    def prev(self) -> Track | None:
        """Step back one track, wrapping to the end with repeat all."""
        if not self._tracks:
            return None
        if self._pos > 0:
            self._pos -= 1
        elif self._repeat is RepeatMode.ALL:
            self._pos = len(self._order) - 1
        return self._current_track()

    def set_index(self, i: int) -> None:
        """Move to the position holding track index ``i``, if there is one."""
        try:
            self._pos = self._order.index(i)
        except ValueError:
            pass

    def tracks(self) -> list[Track]:
        """Return the tracks in the order they were added."""
        return list(self._tracks)

    def toggle_shuffle(self) -> None:
        """Switch shuffle on or off, keeping the current track current."""
        self._shuffle = not self._shuffle
        if not self._tracks:
            return
        if self._shuffle:
            self._shuffle_order()
            return
        current = self._order[self._pos]
        self._order = list(range(len(self._tracks)))
        self._pos = current

    def _shuffle_order(self) -> None:
        current = self._order[self._pos]
        others = [i for i in range(len(self._tracks)) if i != current]
        self._rng.shuffle(others)
        self._order = [current, *others]
        self._pos = 0

    def cycle_repeat(self) -> None:
        """Cycle repeat through off, all and one."""
        self._repeat = RepeatMode((self._repeat + 1) % len(RepeatMode))

    def shuffled(self) -> bool:
        return self._shuffle

    def repeat(self) -> RepeatMode:
        return self._repeat