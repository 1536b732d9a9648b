"""Player screen state and the key handling that drives it."""

from __future__ import annotations

from enum import Enum, auto

from cliamp.player import EQ_FREQS, Player
from cliamp.playlist import Playlist
from cliamp.visualizer import Visualizer

SEEK_STEP = 5.0
RESTART_THRESHOLD = 3.0
TICK_INTERVAL = 0.05
LAST_EQ_BAND = len(EQ_FREQS) - 1


class Focus(Enum):
    """Which panel the arrow keys act on."""

    PLAYLIST = auto()
    EQ = auto()


class Model:
    """State of the player screen, tied to a player and a playlist."""

    def __init__(
        self,
        player: Player,
        playlist: Playlist,
        auto_play: bool = False,
        mini: bool = False,
        visualizer: Visualizer | None = None,
    ) -> None:
        self.player = player
        self.playlist = playlist
        self.vis = visualizer if visualizer is not None else Visualizer(44100)
        self.focus = Focus.PLAYLIST
        self.eq_cursor = 0
        self.pl_cursor = 0
        self.pl_scroll = 0
        self.pl_visible = 3 if mini else 5
        self.title_off = 0
        self.auto_play = auto_play
        self.mini = mini
        self.err: Exception | None = None
        self.quitting = False
        self.width = 0
        self.height = 0

    def start(self) -> None:
        """Begin the session, playing the first track when auto-play is on."""
        if self.auto_play:
            self.play_current_track()

    def handle_key(self, key: str) -> bool:
        """Act on one key press; return True when the key asks to quit."""
        in_eq = self.focus is Focus.EQ
        match key:
            case "q" | "ctrl+c":
                self.player.close()
                self.quitting = True
                return True
            case " ":
                if self.player.is_playing():
                    self.player.toggle_pause()
                else:
                    self.play_current_track()
            case "s":
                self.player.stop()
            case ">" | ".":
                self.next_track()
            case "<" | ",":
                self.prev_track()
            case "left":
                if in_eq:
                    self.eq_cursor = max(0, self.eq_cursor - 1)
                else:
                    self.player.seek(-SEEK_STEP)
            case "right":
                if in_eq:
                    self.eq_cursor = min(LAST_EQ_BAND, self.eq_cursor + 1)
                else:
                    self.player.seek(SEEK_STEP)
            case "up" | "k":
                if in_eq:
                    self._nudge_eq(1)
                elif self.pl_cursor > 0:
                    self.pl_cursor -= 1
                    self.adjust_scroll()
            case "down" | "j":
                if in_eq:
                    self._nudge_eq(-1)
                elif self.pl_cursor < len(self.playlist) - 1:
                    self.pl_cursor += 1
                    self.adjust_scroll()
            case "enter":
                if not in_eq:
                    self.playlist.set_index(self.pl_cursor)
                    self.play_current_track()
            case "+" | "=":
                self.player.set_volume(self.player.volume() + 1)
            case "-":
                self.player.set_volume(self.player.volume() - 1)
            case "r":
                self.playlist.cycle_repeat()
            case "z":
                self.playlist.toggle_shuffle()
            case "tab":
                self.focus = Focus.PLAYLIST if in_eq else Focus.EQ
            case "h":
                if in_eq:
                    self.eq_cursor = max(0, self.eq_cursor - 1)
            case "l":
                if in_eq:
                    self.eq_cursor = min(LAST_EQ_BAND, self.eq_cursor + 1)
        return False

    def _nudge_eq(self, step: float) -> None:
        bands = self.player.eq_bands()
        self.player.set_eq_band(self.eq_cursor, bands[self.eq_cursor] + step)

    def tick(self) -> None:
        """Periodic update: advance after a finished track and scroll the title."""
        player = self.player
        if player.is_playing() and not player.is_paused() and player.track_done():
            self.next_track()
        self.title_off += 1

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def _play(self, path: str) -> None:
        try:
            self.player.play(path)
        except (OSError, ValueError) as exc:
            self.err = exc

    def next_track(self) -> None:
        """Play the next track, or stop when the playlist has run out."""
        track = self.playlist.next()
        if track is None:
            self.player.stop()
            return
        self.pl_cursor = self.playlist.index()
        self.adjust_scroll()
        self._play(track.path)

    def prev_track(self) -> None:
        """Restart the track if past a few seconds, else play the previous one."""
        position = self.player.position()
        if position > RESTART_THRESHOLD:
            self.player.seek(-position)
            return
        track = self.playlist.prev()
        if track is None:
            return
        self.pl_cursor = self.playlist.index()
        self.adjust_scroll()
        self._play(track.path)

    def play_current_track(self) -> None:
        track, idx = self.playlist.current()
        if track is None or idx < 0:
            return
        self.title_off = 0
        self._play(track.path)

    def adjust_scroll(self) -> None:
        """Scroll the playlist view so the cursor stays visible."""
        if self.pl_cursor < self.pl_scroll:
            self.pl_scroll = self.pl_cursor
        if self.pl_cursor >= self.pl_scroll + self.pl_visible:
            self.pl_scroll = self.pl_cursor - self.pl_visible + 1

    def view(self) -> str:
        from cliamp.view import render_view

        return render_view(self)