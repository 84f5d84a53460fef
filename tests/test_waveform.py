"""Tests for waveform generation and the sample buffer."""

import pytest

from cpuecg.waveform import (
    MAX_AMPLITUDE,
    MIN_AMPLITUDE,
    PULSE_INTERVAL_MAX,
    PULSE_INTERVAL_MIN,
    SIGNAL_MAX,
    SIGNAL_MIN,
    WaveformBuffer,
    WaveformGenerator,
    amplitude_for,
    pulse_interval,
)


class TestWaveformGenerator:
    """Tests for WaveformGenerator."""

    def test_idle_is_minimal(self):
        """Test load 0 keeps the trace within the minimum amplitude."""
        generator = WaveformGenerator()
        for tick in range(1, 500):
            point = generator.next_point(0.0, tick)
            assert abs(point) <= MIN_AMPLITUDE + 1e-9
            assert generator.amplitude == pytest.approx(MIN_AMPLITUDE)
        assert generator.pulse == 0.0

    def test_full_load_never_overflows(self):
        """Test load 100 stays within the drawable range."""
        generator = WaveformGenerator()
        for tick in range(1, 1000):
            point = generator.next_point(100.0, tick)
            assert SIGNAL_MIN <= point <= SIGNAL_MAX
            assert generator.amplitude <= SIGNAL_MAX

    def test_out_of_range_load_is_clamped(self):
        """Test loads outside [0, 100] behave like the nearest bound."""
        high, bound = WaveformGenerator(), WaveformGenerator()
        for tick in range(1, 100):
            assert high.next_point(250.0, tick) == bound.next_point(100.0, tick)

    def test_deterministic(self):
        """Test two generators fed the same loads agree."""
        loads = [5.0, 40.0, 90.0, 100.0, 0.0, 65.0] * 20
        first, second = WaveformGenerator(), WaveformGenerator()
        a = [first.next_point(load, tick) for tick, load in enumerate(loads, 1)]
        b = [second.next_point(load, tick) for tick, load in enumerate(loads, 1)]
        assert a == b

    def test_amplitude_rises_with_load(self):
        """Test load sequence [10, 10, 90, 90] raises amplitude at the third point."""
        generator = WaveformGenerator()
        amplitudes = []
        for tick, load in enumerate([10.0, 10.0, 90.0, 90.0], 1):
            generator.next_point(load, tick)
            amplitudes.append(generator.amplitude)
        assert amplitudes[2] > amplitudes[1]

    def test_phase_speeds_up_with_load(self):
        """Test phase advances faster under higher load."""
        idle, busy = WaveformGenerator(), WaveformGenerator()
        idle.next_point(0.0, 1)
        busy.next_point(100.0, 1)
        assert busy.phase_delta > idle.phase_delta

    def test_beats_spike_and_decay(self):
        """Test a beat fires after the interval then decays."""
        generator = WaveformGenerator()
        interval = pulse_interval(100.0)
        for tick in range(1, interval):
            generator.next_point(100.0, tick)
        assert generator.pulse == 0.0

        generator.next_point(100.0, interval)
        peak = generator.pulse
        assert peak > 0.0

        generator.next_point(100.0, interval + 1)
        assert generator.pulse < peak


def test_amplitude_bounds():
    """Test envelope spans the minimum and maximum amplitude."""
    assert amplitude_for(0.0) == pytest.approx(MIN_AMPLITUDE)
    assert amplitude_for(100.0) == pytest.approx(MAX_AMPLITUDE)
    assert amplitude_for(10.0) < amplitude_for(90.0)


def test_pulse_interval_shrinks_with_load():
    """Test heartbeat spacing is inversely related to load."""
    assert pulse_interval(0.0) == PULSE_INTERVAL_MAX
    assert pulse_interval(100.0) == PULSE_INTERVAL_MIN
    assert pulse_interval(80.0) < pulse_interval(20.0)


class TestWaveformBuffer:
    """Tests for WaveformBuffer."""

    def test_bounded(self):
        """Test length never exceeds capacity."""
        buffer = WaveformBuffer(capacity=16)
        for i in range(1000):
            buffer.append(float(i))
            assert len(buffer) <= buffer.capacity
        assert buffer.samples[-1] == 999.0
        assert buffer.samples[0] == 984.0

    def test_seed_fills_window(self):
        """Test seeding fills the whole window with one value."""
        buffer = WaveformBuffer()
        assert buffer.is_empty
        buffer.seed(8, 0.5)
        assert buffer.samples == [0.5] * 8
        assert buffer.capacity == 8

    def test_grow_pads_with_newest(self):
        """Test growing pads with the newest value."""
        buffer = WaveformBuffer(capacity=3)
        for value in (0.1, 0.2, 0.3):
            buffer.append(value)
        buffer.resize(5)
        assert buffer.samples == [0.1, 0.2, 0.3, 0.3, 0.3]

    def test_shrink_drops_oldest(self):
        """Test shrinking keeps the newest points."""
        buffer = WaveformBuffer(capacity=4)
        for value in (0.1, 0.2, 0.3, 0.4):
            buffer.append(value)
        buffer.resize(2)
        assert buffer.samples == [0.3, 0.4]
        assert buffer.capacity == 2

    def test_samples_is_copy(self):
        """Test samples returns a copy."""
        buffer = WaveformBuffer(capacity=2)
        buffer.append(1.0)
        buffer.samples.append(2.0)
        assert len(buffer) == 1
