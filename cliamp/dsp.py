"""Stereo sample sources and the filters that make up the playback chain.

Every stage exposes ``stream(n)``, which returns up to ``n`` frames as a
float array of shape ``(k, 2)``; an empty array means the source is drained.
"""

from __future__ import annotations

import math
import threading
from typing import Callable, Protocol

import numpy as np


class Source(Protocol):
    def stream(self, n: int) -> np.ndarray: ...


def _empty() -> np.ndarray:
    return np.zeros((0, 2))


def _as_frames(data) -> np.ndarray:
    frames = np.array(data, dtype=np.float64)
    if frames.size == 0:
        return _empty()
    if frames.ndim != 2 or frames.shape[1] != 2:
        raise ValueError(f"expected stereo frames of shape (n, 2), got {frames.shape}")
    return frames


class SampleBuffer:
    """Decoded stereo audio held in memory, read from a movable position."""

    def __init__(self, data) -> None:
        self._data = _as_frames(data)
        self._pos = 0

    def stream(self, n: int) -> np.ndarray:
        if n <= 0:
            return _empty()
        chunk = self._data[self._pos : self._pos + n].copy()
        self._pos += len(chunk)
        return chunk

    def seek(self, sample: int) -> None:
        """Move to frame ``sample``; it must lie within 0..len."""
        if not 0 <= sample <= len(self._data):
            raise ValueError(
                f"seek position {sample} out of range [0, {len(self._data)}]"
            )
        self._pos = sample

    def position(self) -> int:
        return self._pos

    def __len__(self) -> int:
        return len(self._data)


def resample(data, src_rate: float, dst_rate: float) -> np.ndarray:
    """Convert stereo frames from ``src_rate`` to ``dst_rate`` by interpolation."""
    if src_rate <= 0 or dst_rate <= 0:
        raise ValueError(f"invalid sample rates: {src_rate} -> {dst_rate}")
    frames = _as_frames(data)
    if src_rate == dst_rate or len(frames) == 0:
        return frames
    out_len = max(1, round(len(frames) * dst_rate / src_rate))
    times = np.arange(out_len) * (src_rate / dst_rate)
    known = np.arange(len(frames))
    return np.column_stack([np.interp(times, known, frames[:, ch]) for ch in range(2)])


class Biquad:
    """Peaking equaliser band from the Audio EQ Cookbook.

    The gain in dB is read from ``gain()`` on every call, so changes take
    effect on the next block. Gains within 0.1 dB of zero pass audio through.
    """

    def __init__(
        self,
        source: Source,
        freq: float,
        q: float,
        gain: Callable[[], float],
        sample_rate: float,
    ) -> None:
        self._source = source
        self._freq = freq
        self._q = q
        self._gain = gain
        self._sample_rate = sample_rate
        # Rows hold the two previous frames: [n-2, n-1].
        self._x = np.zeros((2, 2))
        self._y = np.zeros((2, 2))
        self._last_gain: float | None = None
        self._coeffs = (1.0, 0.0, 0.0, 0.0, 0.0)
        self._impulse = np.zeros(0)

    def _update_coeffs(self, db: float) -> None:
        if self._last_gain == db:
            return
        self._last_gain = db
        a = 10 ** (db / 40)
        w0 = 2 * math.pi * self._freq / self._sample_rate
        cos_w0 = math.cos(w0)
        alpha = math.sin(w0) / (2 * self._q)
        a0 = 1 + alpha / a
        self._coeffs = (
            (1 + alpha * a) / a0,
            -2 * cos_w0 / a0,
            (1 - alpha * a) / a0,
            -2 * cos_w0 / a0,
            (1 - alpha / a) / a0,
        )
        self._impulse = np.zeros(0)

    def _impulse_response(self, n: int) -> np.ndarray:
        """Impulse response of the recursive part, 1 / (1 + a1 z^-1 + a2 z^-2)."""
        if len(self._impulse) < n:
            _, _, _, a1, a2 = self._coeffs
            h = [1.0, -a1]
            while len(h) < n:
                h.append(-a1 * h[-1] - a2 * h[-2])
            self._impulse = np.array(h)
        return self._impulse[:n]

    def stream(self, n: int) -> np.ndarray:
        chunk = self._source.stream(n)
        db = self._gain()
        if -0.1 < db < 0.1 or len(chunk) == 0:
            return chunk
        self._update_coeffs(db)
        b0, b1, b2, a1, a2 = self._coeffs
        count = len(chunk)

        history = np.vstack([self._x, chunk])
        feed = b0 * history[2:] + b1 * history[1:-1] + b2 * history[:-2]
        # Fold the previous outputs into the first inputs so the recursion
        # can be run as a convolution from a zero state.
        y2, y1 = self._y
        feed[0] -= a1 * y1 + a2 * y2
        if count > 1:
            feed[1] -= a2 * y1

        h = self._impulse_response(count)
        size = 1 << (2 * count - 1).bit_length()
        spectrum = np.fft.rfft(feed, size, axis=0) * np.fft.rfft(h, size)[:, None]
        out = np.fft.irfft(spectrum, size, axis=0)[:count]

        self._x = history[-2:].copy()
        self._y = np.vstack([self._y, out])[-2:].copy()
        return out


class VolumeStreamer:
    """Applies a gain in dB, read from ``volume()`` on every block."""

    def __init__(self, source: Source, volume: Callable[[], float]) -> None:
        self._source = source
        self._volume = volume

    def stream(self, n: int) -> np.ndarray:
        chunk = self._source.stream(n)
        return chunk * 10 ** (self._volume() / 20)


class Tap:
    """Passes audio through while keeping the latest mono mix in a ring buffer."""

    def __init__(self, source: Source, size: int = 4096) -> None:
        if size <= 0:
            raise ValueError("tap size must be positive")
        self._source = source
        self._size = size
        self._buf = np.zeros(size)
        self._pos = 0
        self._lock = threading.Lock()

    def stream(self, n: int) -> np.ndarray:
        chunk = self._source.stream(n)
        mono = (chunk[:, 0] + chunk[:, 1]) / 2
        with self._lock:
            if len(mono) > self._size:
                self._pos = (self._pos + len(mono) - self._size) % self._size
                mono = mono[-self._size :]
            slots = (self._pos + np.arange(len(mono))) % self._size
            self._buf[slots] = mono
            self._pos = (self._pos + len(mono)) % self._size
        return chunk

    def samples(self, n: int) -> np.ndarray:
        """Return the last ``n`` mono samples, oldest first."""
        if n < 0:
            raise ValueError("sample count must not be negative")
        n = min(n, self._size)
        with self._lock:
            start = (self._pos - n) % self._size
            return self._buf[(start + np.arange(n)) % self._size]