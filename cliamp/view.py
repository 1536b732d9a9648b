"""Rendering of the player screen from a model's state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cliamp.model import Focus
from cliamp.styles import (
    COLOR_ACCENT,
    COLOR_DIM,
    COLOR_SEEK_BAR,
    COLOR_VOLUME,
    DIM,
    EQ_ACTIVE,
    EQ_INACTIVE,
    ERROR,
    FRAME_PADDING,
    FRAME_WIDTH,
    HELP,
    LABEL,
    MINI_FRAME_PADDING,
    PLAYLIST_ACTIVE,
    PLAYLIST_ITEM,
    PLAYLIST_SELECTED,
    STATUS,
    TIME,
    TITLE,
    TRACK,
    Style,
    frame,
    visible_width,
)

if TYPE_CHECKING:
    from cliamp.model import Model

PANEL_WIDTH = FRAME_WIDTH - 2 - 2 * FRAME_PADDING[1]
MINI_PANEL_MIN_WIDTH = 28
MINI_FRAME_OVERHEAD = 2 + 2 * MINI_FRAME_PADDING[1]

EQ_LABELS = ("70", "180", "320", "600", "1k", "3k", "6k", "12k", "14k", "16k")

_SEEK_FILL = Style(COLOR_SEEK_BAR)
_SEEK_DIM = Style(COLOR_DIM)
_VOLUME_BAR = Style(COLOR_VOLUME)
_ACTIVE_TOGGLE = Style(COLOR_ACCENT, bold=True)


def panel_width(model: Model) -> int:
    """Usable width inside the frame for the model's current mode."""
    if model.mini:
        return max(model.width - MINI_FRAME_OVERHEAD, MINI_PANEL_MIN_WIDTH)
    return PANEL_WIDTH


def _mini_frame_width(model: Model) -> int:
    return max(model.width, MINI_PANEL_MIN_WIDTH + MINI_FRAME_OVERHEAD)


def render_view(model: Model) -> str:
    """Render the whole framed screen; empty once the model is quitting."""
    if model.quitting:
        return ""

    if model.mini:
        sections = [
            render_title(model),
            render_track_info(model),
            render_time_status(model),
            render_spectrum(model),
            render_seek_bar(model),
            render_volume(model),
            render_playlist_header(model),
            render_playlist(model),
            render_help(model),
        ]
    else:
        sections = [
            render_title(model),
            render_track_info(model),
            render_time_status(model),
            "",
            render_spectrum(model),
            render_seek_bar(model),
            "",
            render_volume(model),
            render_eq(model),
            "",
            render_playlist_header(model),
            render_playlist(model),
            "",
            render_help(model),
        ]

    if model.err is not None:
        sections.append(ERROR.render(f"ERR: {model.err}"))

    content = "\n".join(sections)
    if model.mini:
        return frame(content, _mini_frame_width(model), *MINI_FRAME_PADDING)
    return frame(content, FRAME_WIDTH, *FRAME_PADDING)


def render_title(model: Model) -> str:
    return TITLE.render("C L I A M P")


def render_track_info(model: Model) -> str:
    """The current track name, scrolled cyclically when it is too long."""
    track, _ = model.playlist.current()
    name = track.display_name() if track is not None else ""
    if not name:
        name = "No track loaded"

    prefix = "♫ " if model.mini else "\U000f0e1e "
    max_width = panel_width(model) - len(prefix)
    if len(name) <= max_width:
        return TRACK.render(prefix + name)

    separator = "  ♫  " if model.mini else "   \U000f0e1e   "
    padded = name + separator
    offset = model.title_off % len(padded)
    repeated = padded * (max_width // len(padded) + 2)
    return TRACK.render(prefix + repeated[offset : offset + max_width])


def _clock(seconds: float) -> str:
    return f"{int(seconds / 60):02d}:{int(seconds) % 60:02d}"


def render_time_status(model: Model) -> str:
    player = model.player
    time_text = f"{_clock(player.position())} / {_clock(player.duration())}"

    playing = player.is_playing()
    if playing and player.is_paused():
        icon, word, style = "\uf04c", "Paused", STATUS
    elif playing:
        icon, word, style = "\uf04b", "Playing", STATUS
    else:
        icon, word, style = "\uf04d", "Stopped", DIM
    status = style.render(icon if model.mini else f"{icon} {word}")

    left = TIME.render(time_text)
    gap = max(1, panel_width(model) - visible_width(left) - visible_width(status))
    return left + " " * gap + status


def render_spectrum(model: Model) -> str:
    bands = model.vis.analyze(model.player.samples())
    if model.mini:
        return model.vis.render_dynamic(bands, panel_width(model))
    return model.vis.render(bands)


def render_seek_bar(model: Model) -> str:
    position = model.player.position()
    duration = model.player.duration()
    progress = position / duration if duration > 0 else 0.0
    progress = max(0.0, min(1.0, progress))

    width = panel_width(model)
    filled = int(progress * (width - 1))
    return (
        _SEEK_FILL.render("━" * filled)
        + _SEEK_FILL.render("●")
        + _SEEK_DIM.render("━" * max(0, width - filled - 1))
    )


def render_volume(model: Model) -> str:
    volume = model.player.volume()
    fraction = max(0.0, min(1.0, (volume + 30) / 36))

    if model.mini:
        bar_width = max(4, panel_width(model) - 6)
        label, suffix = "V ", f" {volume:+.0f}"
    else:
        bar_width = 22
        label, suffix = "VOL ", f" {volume:+.1f}dB"

    filled = int(fraction * bar_width)
    bar = _VOLUME_BAR.render("█" * filled) + DIM.render("░" * (bar_width - filled))
    return LABEL.render(label) + bar + DIM.render(suffix)


def render_eq(model: Model) -> str:
    bands = model.player.eq_bands()
    parts = []
    for i, label in enumerate(EQ_LABELS):
        if model.focus is Focus.EQ and i == model.eq_cursor:
            parts.append(EQ_ACTIVE.render(f"{bands[i]:+.0f}"))
        else:
            parts.append(EQ_INACTIVE.render(label))
    return LABEL.render("EQ  ") + " ".join(parts)


def render_playlist_header(model: Model) -> str:
    shuffled = model.playlist.shuffled()
    repeat = model.playlist.repeat()
    shuffle_style = _ACTIVE_TOGGLE if shuffled else DIM
    repeat_style = _ACTIVE_TOGGLE if repeat else DIM

    if model.mini:
        repeat_text = f"[R:{str(repeat)}]" if repeat else "[R]"
        return (
            DIM.render("─ Playlist ─ ")
            + shuffle_style.render("[S]")
            + " "
            + repeat_style.render(repeat_text)
        )

    return (
        DIM.render("── Playlist ── ")
        + shuffle_style.render("[Shuffle]")
        + " "
        + repeat_style.render(f"[Repeat: {str(repeat)}]")
        + " "
        + DIM.render("──")
    )


def render_playlist(model: Model) -> str:
    tracks = model.playlist.tracks()
    if not tracks:
        return DIM.render("  No tracks loaded")

    current = model.playlist.index()
    visible = min(model.pl_visible, len(tracks))
    scroll = max(0, min(model.pl_scroll, len(tracks) - visible))
    max_width = panel_width(model) - 6
    playing = model.player.is_playing()

    lines = []
    for i, track in enumerate(tracks[scroll : scroll + visible], start=scroll):
        prefix, style = "  ", PLAYLIST_ITEM
        if i == current and playing:
            prefix, style = "\uf04b ", PLAYLIST_ACTIVE
        if model.focus is Focus.PLAYLIST and i == model.pl_cursor:
            style = PLAYLIST_SELECTED

        name = track.display_name()
        if len(name) > max_width:
            name = name[: max_width - 1] + "…"
        lines.append(style.render(f"{prefix}{i + 1}. {name}"))
    return "\n".join(lines)


def render_help(model: Model) -> str:
    if model.mini:
        return HELP.render("[Spc]Play [<>]Trk [Q]Quit")
    return HELP.render(
        "[Spc]\U000f040e  [<>]Trk [\uf060\uf061]Seek [+-]Vol [Tab]Focus [Q]Quit"
    )