import numpy as np
import pytest

from cliamp.dsp import Biquad, SampleBuffer, Tap, VolumeStreamer, resample

RATE = 44100


def sine(freq, frames, amplitude=0.5):
    t = np.arange(frames) / RATE
    wave = amplitude * np.sin(2 * np.pi * freq * t)
    return np.column_stack([wave, wave])


def noise(frames, seed=0):
    return np.random.default_rng(seed).uniform(-1, 1, size=(frames, 2))


def test_sample_buffer_streams_in_chunks():
    data = np.arange(20, dtype=float).reshape(10, 2)
    buf = SampleBuffer(data)
    assert len(buf) == 10
    first = buf.stream(4)
    assert np.array_equal(first, data[:4])
    assert buf.position() == 4
    rest = buf.stream(100)
    assert np.array_equal(rest, data[4:])
    assert buf.position() == 10
    assert buf.stream(5).shape == (0, 2)


def test_sample_buffer_returns_copies():
    data = np.ones((4, 2))
    buf = SampleBuffer(data)
    chunk = buf.stream(4)
    chunk *= 0
    buf.seek(0)
    assert np.array_equal(buf.stream(4), np.ones((4, 2)))


def test_sample_buffer_seek():
    buf = SampleBuffer(np.zeros((10, 2)))
    buf.seek(7)
    assert buf.position() == 7
    buf.seek(10)
    assert buf.position() == 10
    with pytest.raises(ValueError):
        buf.seek(11)
    with pytest.raises(ValueError):
        buf.seek(-1)


def test_sample_buffer_rejects_mono():
    with pytest.raises(ValueError):
        SampleBuffer(np.zeros((5, 3)))


def test_resample_same_rate_is_identity():
    data = noise(50)
    assert np.array_equal(resample(data, RATE, RATE), data)


def test_resample_scales_length():
    data = noise(1000)
    assert len(resample(data, 22050, 44100)) == 2000
    assert len(resample(data, 48000, 24000)) == 500


def test_resample_keeps_constant_signal():
    data = np.full((300, 2), 0.25)
    out = resample(data, 48000, 44100)
    assert np.allclose(out, 0.25)


def test_resample_rejects_bad_rate():
    with pytest.raises(ValueError):
        resample(np.zeros((4, 2)), 0, RATE)


def test_volume_zero_db_is_identity():
    data = noise(64)
    vol = VolumeStreamer(SampleBuffer(data), lambda: 0.0)
    assert np.allclose(vol.stream(64), data)


def test_volume_attenuates():
    data = noise(64)
    vol = VolumeStreamer(SampleBuffer(data), lambda: -20.0)
    assert np.allclose(vol.stream(64), data * 0.1)


def test_volume_read_each_block():
    data = noise(20)
    level = {"db": 0.0}
    vol = VolumeStreamer(SampleBuffer(data), lambda: level["db"])
    first = vol.stream(10)
    level["db"] = -6.0
    second = vol.stream(10)
    assert np.allclose(first, data[:10])
    assert np.all(np.abs(second) < np.abs(data[10:]) + 1e-12)


def test_biquad_flat_gain_passes_through():
    data = noise(256)
    band = Biquad(SampleBuffer(data), 1000, 1.4, lambda: 0.05, RATE)
    assert np.array_equal(band.stream(256), data)


def test_biquad_chunked_matches_whole():
    data = noise(1000, seed=4)
    whole = Biquad(SampleBuffer(data), 1000, 1.4, lambda: 6.0, RATE).stream(1000)
    band = Biquad(SampleBuffer(data), 1000, 1.4, lambda: 6.0, RATE)
    parts = [band.stream(size) for size in (1, 7, 100, 892)]
    assert np.allclose(np.vstack(parts), whole, atol=1e-9)


def test_biquad_boosts_centre_frequency():
    data = sine(1000, 8820)
    out = Biquad(SampleBuffer(data), 1000, 1.4, lambda: 6.0, RATE).stream(8820)
    ratio = np.max(np.abs(out[4410:, 0])) / 0.5
    assert ratio == pytest.approx(10 ** (6 / 20), rel=0.02)


def test_biquad_cut_reduces_centre_frequency():
    data = sine(3000, 8820)
    out = Biquad(SampleBuffer(data), 3000, 1.4, lambda: -12.0, RATE).stream(8820)
    assert np.max(np.abs(out[4410:])) < 0.5 * 0.5


def test_biquad_leaves_dc_unchanged():
    data = np.full((20000, 2), 0.5)
    out = Biquad(SampleBuffer(data), 1000, 1.4, lambda: 12.0, RATE).stream(20000)
    assert out[-1, 0] == pytest.approx(0.5, abs=1e-3)
    assert out[-1, 1] == pytest.approx(0.5, abs=1e-3)


def test_tap_passes_audio_through():
    data = noise(32)
    tap = Tap(SampleBuffer(data), 16)
    assert np.array_equal(tap.stream(32), data)


def test_tap_starts_silent():
    tap = Tap(SampleBuffer(np.zeros((0, 2))), 8)
    assert np.array_equal(tap.samples(3), np.zeros(3))


def test_tap_records_mono_mix_in_order():
    left = np.arange(6, dtype=float)
    data = np.column_stack([left - 1, left + 1])
    tap = Tap(SampleBuffer(data), 4)
    tap.stream(3)
    tap.stream(3)
    assert np.allclose(tap.samples(4), left[2:])
    assert np.allclose(tap.samples(2), left[4:])


def test_tap_handles_block_larger_than_ring():
    left = np.arange(10, dtype=float)
    tap = Tap(SampleBuffer(np.column_stack([left, left])), 4)
    tap.stream(10)
    assert np.allclose(tap.samples(4), left[-4:])


def test_tap_caps_request_at_size():
    tap = Tap(SampleBuffer(noise(10)), 4)
    tap.stream(10)
    assert len(tap.samples(100)) == 4


def test_tap_rejects_bad_sizes():
    with pytest.raises(ValueError):
        Tap(SampleBuffer(noise(2)), 0)
    with pytest.raises(ValueError):
        Tap(SampleBuffer(noise(2)), 4).samples(-1)