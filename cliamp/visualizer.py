"""FFT spectrum analysis and bar rendering for the player display."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from cliamp.styles import SPECTRUM_HIGH, SPECTRUM_LOW, SPECTRUM_MID, Style

NUM_BANDS = 10
FFT_SIZE = 2048
BAR_WIDTH = 5

BAR_BLOCKS = (" ", "▁", "▂", "▃", "▄", "▅", "▆", "▇", "█")
BAND_EDGES = (20, 100, 200, 400, 800, 1600, 3200, 6400, 12800, 16000, 20000)

_LOW = Style(SPECTRUM_LOW)
_MID = Style(SPECTRUM_MID)
_HIGH = Style(SPECTRUM_HIGH)


def _bar(level: float, width: int) -> str:
    idx = int(level * (len(BAR_BLOCKS) - 1))
    idx = max(0, min(idx, len(BAR_BLOCKS) - 1))
    if level > 0.75:
        style = _HIGH
    elif level > 0.45:
        style = _MID
    else:
        style = _LOW
    return style.render(BAR_BLOCKS[idx] * width)


class Visualizer:
    """Turns raw samples into ten smoothed band levels and draws them."""

    def __init__(self, sample_rate: float = 44100.0) -> None:
        self._sample_rate = float(sample_rate)
        self._prev = np.zeros(NUM_BANDS)
        self._window = 0.5 * (
            1 - np.cos(2 * np.pi * np.arange(FFT_SIZE) / (FFT_SIZE - 1))
        )

    def analyze(self, samples: Iterable[float] | None) -> list[float]:
        """Return ten band levels in 0..1; with no samples the last levels decay."""
        data = np.asarray([] if samples is None else samples, dtype=np.float64).ravel()
        if data.size == 0:
            self._prev = self._prev * 0.8
            return self._prev.tolist()

        buf = np.zeros(FFT_SIZE)
        chunk = data[:FFT_SIZE]
        buf[: len(chunk)] = chunk
        magnitudes = np.abs(np.fft.rfft(buf * self._window))

        bin_hz = self._sample_rate / FFT_SIZE
        half = FFT_SIZE // 2
        bands = []
        for b, (lo_edge, hi_edge) in enumerate(zip(BAND_EDGES, BAND_EDGES[1:])):
            lo = max(1, int(lo_edge / bin_hz))
            hi = min(int(hi_edge / bin_hz), half - 1)
            level = float(magnitudes[lo : hi + 1].mean()) if hi >= lo else 0.0
            value = (20 * math.log10(level) + 10) / 50 if level > 0 else 0.0
            value = max(0.0, min(1.0, value))
            prev = float(self._prev[b])
            if value > prev:
                value = value * 0.6 + prev * 0.4
            else:
                value = value * 0.25 + prev * 0.75
            bands.append(value)
        self._prev = np.array(bands)
        return bands

    def render_dynamic(self, bands: Sequence[float], avail_width: int) -> str:
        """Draw the bands with bars sized to fill ``avail_width`` cells."""
        if avail_width < NUM_BANDS:
            return ""
        width = max(1, (avail_width - (NUM_BANDS - 1)) // NUM_BANDS)
        return " ".join(_bar(level, width) for level in bands)

    def render(self, bands: Sequence[float]) -> str:
        """Draw the bands as fixed-width coloured bars."""
        return " ".join(_bar(level, BAR_WIDTH) for level in bands)