import re

import numpy as np

from cliamp.model import Focus, Model
from cliamp.player import Player
from cliamp.playlist import Playlist, Track, track_from_path
from cliamp.styles import visible_width
from cliamp.view import (
    panel_width,
    render_eq,
    render_help,
    render_playlist,
    render_playlist_header,
    render_seek_bar,
    render_spectrum,
    render_time_status,
    render_title,
    render_track_info,
    render_view,
    render_volume,
)

RATE = 100


def strip(text):
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


class FakeOutput:
    def start(self, source):
        pass

    def clear(self):
        pass


def loader(path, rate):
    return np.zeros((600 * rate, 2))


def make_model(tracks=None, mini=False, width=80):
    player = Player(RATE, output=FakeOutput(), loader=loader)
    playlist = Playlist()
    if tracks is None:
        tracks = [track_from_path(f"Artist {i} - Song {i}.mp3") for i in range(3)]
    playlist.add(*tracks)
    model = Model(player, playlist, mini=mini)
    model.resize(width, 40)
    return model


def test_panel_width_modes():
    assert panel_width(make_model()) == 60
    assert panel_width(make_model(mini=True, width=100)) == 96
    assert panel_width(make_model(mini=True, width=10)) == 28


def test_view_empty_when_quitting():
    model = make_model()
    model.quitting = True
    assert render_view(model) == ""


def test_full_view_lines_fill_frame():
    model = make_model()
    lines = render_view(model).split("\n")
    assert all(visible_width(line) == 66 for line in lines)
    assert strip(lines[0]).startswith("╭")
    assert strip(lines[-1]).startswith("╰")


def test_mini_view_lines_fill_frame():
    model = make_model(mini=True, width=40)
    model.player.play("a.mp3")
    lines = render_view(model).split("\n")
    assert all(visible_width(line) == 40 for line in lines)


def test_title():
    assert strip(render_title(make_model())) == "C L I A M P"


def test_track_info_without_tracks():
    model = make_model(tracks=[])
    assert "No track loaded" in strip(render_track_info(model))


def test_track_info_short_name():
    model = make_model()
    assert strip(render_track_info(model)).endswith("Artist 0 - Song 0")


def test_long_title_scrolls_at_fixed_width():
    model = make_model(tracks=[Track(path="x.mp3", title="A" * 40 + "B" * 40)])
    first = strip(render_track_info(model))
    model.title_off = 45
    later = strip(render_track_info(model))
    assert len(first) == panel_width(model)
    assert len(later) == panel_width(model)
    assert first != later
    assert first[2:].startswith("A" * 40)


def test_time_status_texts():
    model = make_model()
    assert strip(render_time_status(model)).startswith("00:00 / 00:00")
    assert strip(render_time_status(model)).endswith("Stopped")
    model.player.play("a.mp3")
    model.player.seek(65)
    text = strip(render_time_status(model))
    assert text.startswith("01:05 / 10:00")
    assert text.endswith("Playing")
    model.player.toggle_pause()
    assert strip(render_time_status(model)).endswith("Paused")
    assert visible_width(render_time_status(model)) == panel_width(model)


def test_seek_bar_marker_moves_forward():
    model = make_model()
    model.player.play("a.mp3")
    start = strip(render_seek_bar(model))
    model.player.seek(300)
    middle = strip(render_seek_bar(model))
    assert start.index("●") == 0
    assert 0 < middle.index("●") < panel_width(model) - 1
    assert len(start) == len(middle) == panel_width(model)
    assert middle.count("●") == 1


def test_volume_extremes():
    model = make_model()
    model.player.set_volume(6)
    assert strip(render_volume(model)) == "VOL " + "█" * 22 + " +6.0dB"
    model.player.set_volume(-30)
    assert strip(render_volume(model)) == "VOL " + "░" * 22 + " -30.0dB"


def test_mini_volume_fits_panel():
    model = make_model(mini=True, width=40)
    text = strip(render_volume(model))
    assert text.startswith("V ")
    assert text.endswith(" +0")
    assert len(text) <= panel_width(model)


def test_eq_labels_and_focused_band():
    model = make_model()
    assert strip(render_eq(model)) == "EQ  70 180 320 600 1k 3k 6k 12k 14k 16k"
    model.focus = Focus.EQ
    model.player.set_eq_band(0, 3)
    assert strip(render_eq(model)).startswith("EQ  +3 180")


def test_playlist_header_full_and_mini():
    model = make_model()
    assert strip(render_playlist_header(model)) == (
        "── Playlist ── [Shuffle] [Repeat: Off] ──"
    )
    model.playlist.cycle_repeat()
    assert "[Repeat: All]" in strip(render_playlist_header(model))
    mini = make_model(mini=True)
    assert strip(render_playlist_header(mini)) == "─ Playlist ─ [S] [R]"
    mini.playlist.cycle_repeat()
    assert strip(render_playlist_header(mini)).endswith("[R:All]")


def test_playlist_empty():
    assert strip(render_playlist(make_model(tracks=[]))) == "  No tracks loaded"


def test_playlist_marks_playing_track():
    model = make_model()
    model.player.play("a.mp3")
    lines = strip(render_playlist(model)).split("\n")
    assert lines[0] == "\uf04b 1. Artist 0 - Song 0"
    assert lines[1] == "  2. Artist 1 - Song 1"


def test_playlist_truncates_long_names():
    model = make_model(tracks=[Track(path="x.mp3", title="Z" * 80)])
    line = strip(render_playlist(model))
    assert line.endswith("…")
    assert len(line) <= panel_width(model)


def test_playlist_shows_only_visible_window():
    tracks = [track_from_path(f"t{i}.mp3") for i in range(10)]
    model = make_model(tracks=tracks)
    assert len(render_playlist(model).split("\n")) == model.pl_visible


def test_help_and_spectrum():
    assert strip(render_help(make_model(mini=True))) == "[Spc]Play [<>]Trk [Q]Quit"
    spectrum = strip(render_spectrum(make_model()))
    assert spectrum == " ".join([" " * 5] * 10)


def test_error_is_shown():
    model = make_model()
    model.err = OSError("boom")
    assert "ERR: boom" in strip(render_view(model))