# cliamp

A small music player that runs in your terminal. It plays audio files
through a 10-band equalizer and shows a live spectrum, a seek bar, the
volume, the equalizer gains and a scrolling playlist.

## Installation

```
pip install .
```

This installs the `cliamp` command. Audio is decoded and played through
pygame's mixer, so a working sound device is needed, and the file
formats that can be played (MP3 among them) are the ones your pygame
build can load.

## Usage

```
cliamp [--autoplay] [--mini] <file.mp3> [file2.mp3 ...]
```

The flags may also be written with a single dash (`-autoplay`, `-mini`).
With no files, `cliamp` prints a usage line and exits with status 1.

Arguments that look like glob patterns (`"music/*.mp3"`) are expanded
even if your shell did not expand them; matches are added in sorted
order, and an argument that matches nothing is kept as it is. A file
named `Artist - Title.mp3` is shown as artist and title; any other file
name is shown as the title.

Flags:

- `--autoplay`: start playing the first track straight away
- `--mini`: a compact layout that follows the terminal width (at least
  32 columns) and shows three playlist entries instead of five

If a track cannot be opened or decoded, the error is shown at the bottom
of the screen as `ERR: ...`.

## Keys

| Key               | Action                                                    |
|-------------------|-----------------------------------------------------------|
| `Space`           | Play the current track, or pause and resume               |
| `s`               | Stop                                                      |
| `>` `.` / `<` `,` | Next track / previous track (more than 3 s in, `<` restarts the track) |
| `←` `→`           | Seek 5 s; with the EQ focused, move between bands         |
| `↑` `k` / `↓` `j` | Move in the playlist; with the EQ focused, change the band gain by 1 dB |
| `h` `l`           | Move between EQ bands when the EQ has focus               |
| `Enter`           | Play the selected playlist entry                          |
| `+` `=` / `-`     | Volume up / down by 1 dB (range -30 to +6 dB)             |
| `r`               | Cycle repeat: Off → All → One                             |
| `z`               | Toggle shuffle (the current track stays current)          |
| `Tab`             | Move focus between the playlist and the equalizer         |
| `q` `Ctrl+C`      | Quit                                                      |

When a track ends, the next one starts; with repeat off the player stops
after the last track. The equalizer bands are centred at 70, 180, 320,
600 Hz and 1, 3, 6, 12, 14 and 16 kHz. Each band goes from -12 dB to
+12 dB.

## Using it as a library

The building blocks can be used on their own:

```python
from cliamp.playlist import Playlist, track_from_path

playlist = Playlist()
playlist.add(track_from_path("Artist - Song.mp3"), track_from_path("other.mp3"))
playlist.cycle_repeat()          # repeat all
track = playlist.next()          # a Track, or None at the end with repeat off
print(track.display_name())      # "other"
```

- `cliamp.playlist`: `Track`, `track_from_path`, `RepeatMode` and
  `Playlist` (`next`, `prev`, `current`, `index`, `set_index`,
  `toggle_shuffle`, `cycle_repeat`).
- `cliamp.dsp`: the processing stages, each with a `stream(n)` method
  returning stereo frames as a NumPy array of shape `(k, 2)`:
  `SampleBuffer`, `Biquad` (peaking EQ band), `VolumeStreamer` and `Tap`
  (keeps the latest mono samples), plus `resample`.
- `cliamp.player`: `load_audio` decodes a file to stereo frames at a given
  sample rate; `Player` runs the EQ → volume → tap chain, feeds a
  `PygameOutput`, and can be used as a context manager. Its output device
  and loader can be replaced through the constructor.
- `cliamp.visualizer`: `Visualizer` turns raw samples into ten smoothed
  spectrum levels and draws them as coloured bars.
- `cliamp.model` and `cliamp.view`: the screen state (`Model`, with
  `handle_key`, `tick` and `view`) and its rendering.
- `cliamp.app`: `main`, the `cliamp` command, and `run`, the event loop
  on a `blessed` terminal.

## Limitations

Each track is decoded whole into memory before it starts playing. There
is no track metadata (tags) reading: artist and title come only from the
file name. Playlists cannot be saved or loaded; the playlist is the list
of files given on the command line.