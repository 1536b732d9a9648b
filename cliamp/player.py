"""Audio playback engine: decoding, the filter chain and the output device.

The chain runs: decoded samples -> ten peaking EQ bands -> volume -> tap,
and the output device pulls blocks from :meth:`Player.read`.
"""

from __future__ import annotations

import threading
import time
from functools import partial
from typing import Callable, Protocol

import numpy as np
import pygame

from cliamp.dsp import Biquad, SampleBuffer, Tap, VolumeStreamer, resample

EQ_FREQS = (70.0, 180.0, 320.0, 600.0, 1000.0, 3000.0, 6000.0, 12000.0, 14000.0, 16000.0)
EQ_Q = 1.4
VOLUME_MIN, VOLUME_MAX = -30.0, 6.0
EQ_MIN, EQ_MAX = -12.0, 12.0
TAP_SIZE = 4096
SPECTRUM_SAMPLES = 2048


class Output(Protocol):
    def start(self, source: Callable[[int], np.ndarray]) -> None: ...

    def clear(self) -> None: ...


def _ensure_mixer(sample_rate: int) -> tuple[int, int, int]:
    if pygame.mixer.get_init() is None:
        pygame.mixer.init(frequency=int(sample_rate), size=-16, channels=2, buffer=1024)
    return pygame.mixer.get_init()


def _to_float(raw: np.ndarray) -> np.ndarray:
    kind = raw.dtype.kind
    if kind == "f":
        return raw.astype(np.float64)
    scale = float(1 << (raw.dtype.itemsize * 8 - 1))
    if kind == "u":
        return (raw.astype(np.float64) - scale) / scale
    return raw.astype(np.float64) / scale


def _to_stereo(frames: np.ndarray) -> np.ndarray:
    if frames.ndim == 1:
        return np.column_stack([frames, frames])
    if frames.shape[1] == 1:
        return np.column_stack([frames[:, 0], frames[:, 0]])
    return frames[:, :2]


def _to_mixer(frames: np.ndarray, size: int, channels: int) -> np.ndarray:
    frames = np.clip(frames, -1.0, 1.0)
    if channels == 1:
        data = frames.mean(axis=1)
    else:
        data = frames[:, [i % 2 for i in range(channels)]]
    bits = abs(size)
    if bits == 32:
        return np.ascontiguousarray(data, dtype=np.float32)
    scale = (1 << (bits - 1)) - 1
    if size < 0:
        dtype = np.int16 if bits == 16 else np.int8
        out = np.round(data * scale)
    else:
        dtype = np.uint16 if bits == 16 else np.uint8
        out = np.round(data * scale) + scale + 1
    return np.ascontiguousarray(out.astype(dtype))


def load_audio(path: str, sample_rate: int) -> np.ndarray:
    """Decode an audio file into stereo float frames at ``sample_rate``.

    Raises ``OSError`` when the file cannot be opened and ``ValueError``
    when it cannot be decoded.
    """
    with open(path, "rb"):
        pass
    freq, _, _ = _ensure_mixer(sample_rate)
    try:
        sound = pygame.mixer.Sound(path)
    except pygame.error as exc:
        raise ValueError(f"decode: {exc}") from exc
    frames = _to_stereo(_to_float(pygame.sndarray.array(sound)))
    return resample(frames, freq, sample_rate)


class PygameOutput:
    """Feeds blocks pulled from a source into a pygame mixer channel."""

    def __init__(self, sample_rate: int, block: int | None = None) -> None:
        self._sample_rate = sample_rate
        self._block = block or max(1, int(sample_rate) // 10)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._channel = None

    def start(self, source: Callable[[int], np.ndarray]) -> None:
        """Start pulling audio from ``source`` until it runs dry or is cleared."""
        self.clear()
        _ensure_mixer(self._sample_rate)
        self._channel = pygame.mixer.Channel(0)
        stop = threading.Event()
        self._stop_event = stop
        self._thread = threading.Thread(
            target=self._feed, args=(source, self._channel, stop), daemon=True
        )
        self._thread.start()

    def _feed(self, source, channel, stop: threading.Event) -> None:
        init = pygame.mixer.get_init()
        if init is None:
            return
        _, size, channels = init
        while not stop.is_set():
            frames = source(self._block)
            if len(frames) == 0:
                return
            sound = pygame.sndarray.make_sound(_to_mixer(frames, size, channels))
            while channel.get_queue() is not None and not stop.is_set():
                time.sleep(0.005)
            if stop.is_set():
                return
            channel.queue(sound)

    def clear(self) -> None:
        """Stop feeding and silence the channel."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None
        if self._channel is not None:
            self._channel.stop()


class Player:
    """Plays one track at a time through the EQ, volume and tap stages."""

    def __init__(
        self,
        sample_rate: int = 44100,
        output: Output | None = None,
        loader: Callable[[str, int], np.ndarray] = load_audio,
    ) -> None:
        self._sample_rate = sample_rate
        self._output = output if output is not None else PygameOutput(sample_rate)
        self._loader = loader
        self._lock = threading.RLock()
        self._buffer: SampleBuffer | None = None
        self._tap: Tap | None = None
        self._volume = 0.0
        self._eq = [0.0] * len(EQ_FREQS)
        self._playing = False
        self._paused = False
        self._track_done = False

    def _band(self, i: int) -> float:
        return self._eq[i]

    def _current_volume(self) -> float:
        return self._volume

    def play(self, path: str) -> None:
        """Load ``path`` and start playing it, replacing any current track."""
        self.stop()
        buffer = SampleBuffer(self._loader(path, self._sample_rate))
        with self._lock:
            self._buffer = buffer
            self._track_done = False
            chain = buffer
            for i, freq in enumerate(EQ_FREQS):
                chain = Biquad(
                    chain, freq, EQ_Q, partial(self._band, i), float(self._sample_rate)
                )
            chain = VolumeStreamer(chain, self._current_volume)
            self._tap = Tap(chain, TAP_SIZE)
            self._playing = True
            self._paused = False
        self._output.start(self.read)

    def read(self, n: int) -> np.ndarray:
        """Return up to ``n`` processed frames; silence while paused."""
        with self._lock:
            if self._tap is None:
                return np.zeros((0, 2))
            if self._paused:
                return np.zeros((n, 2))
            chunk = self._tap.stream(n)
            if len(chunk) == 0:
                self._track_done = True
            return chunk

    def toggle_pause(self) -> None:
        with self._lock:
            if self._tap is not None:
                self._paused = not self._paused

    def stop(self) -> None:
        """Halt playback and drop the current track."""
        self._output.clear()
        with self._lock:
            self._buffer = None
            self._tap = None
            self._playing = False
            self._paused = False
            self._track_done = False

    def seek(self, seconds: float) -> None:
        """Move the playback position by ``seconds``, forwards or back."""
        with self._lock:
            if self._buffer is None:
                return
            target = self._buffer.position() + int(seconds * self._sample_rate)
            target = max(target, 0)
            if target >= len(self._buffer):
                target = len(self._buffer) - 1
            self._buffer.seek(target)

    def position(self) -> float:
        """Current position in seconds."""
        with self._lock:
            if self._buffer is None:
                return 0.0
            return self._buffer.position() / self._sample_rate

    def duration(self) -> float:
        """Length of the current track in seconds."""
        with self._lock:
            if self._buffer is None:
                return 0.0
            return len(self._buffer) / self._sample_rate

    def set_volume(self, db: float) -> None:
        with self._lock:
            self._volume = max(min(db, VOLUME_MAX), VOLUME_MIN)

    def volume(self) -> float:
        with self._lock:
            return self._volume

    def set_eq_band(self, band: int, db: float) -> None:
        """Set one band's gain in dB; out-of-range bands are ignored."""
        if not 0 <= band < len(EQ_FREQS):
            return
        with self._lock:
            self._eq[band] = max(min(db, EQ_MAX), EQ_MIN)

    def eq_bands(self) -> tuple[float, ...]:
        with self._lock:
            return tuple(self._eq)

    def is_playing(self) -> bool:
        with self._lock:
            return self._playing

    def is_paused(self) -> bool:
        with self._lock:
            return self._paused

    def track_done(self) -> bool:
        return self._track_done

    def samples(self) -> np.ndarray:
        """Latest mono samples for spectrum analysis; empty when idle."""
        with self._lock:
            tap = self._tap
        if tap is None:
            return np.zeros(0)
        return tap.samples(SPECTRUM_SAMPLES)

    def close(self) -> None:
        self.stop()

    def __enter__(self) -> Player:
        return self

    def __exit__(self, *args) -> None:
        self.close()