import math

import pytest

from sbitxkit.fft_filter import (
    FftFilter,
    i0,
    i1,
    make_hann_window,
    make_kaiser,
    window_filter,
)


def test_bessel_at_zero():
    assert i0(0.0) == 1.0
    assert i1(0.0) == 0.0


def test_i0_known_value():
    assert i0(1.0) == pytest.approx(1.2660658777, rel=1e-9)


def test_i0_is_even_and_i1_is_odd():
    assert i0(2.5) == pytest.approx(i0(-2.5))
    assert i1(2.5) == pytest.approx(-i1(-2.5))


def test_kaiser_symmetric_and_peaks_at_middle():
    window = make_kaiser(9, 5.0)
    assert len(window) == 9
    for a, b in zip(window, window[::-1]):
        assert a == pytest.approx(b)
    assert window[4] == 1.0
    assert window[0] == pytest.approx(1.0 / i0(math.pi * 5.0))
    assert all(0 < value <= 1 for value in window)


def test_kaiser_even_length_has_no_unity_point():
    window = make_kaiser(8, 3.0)
    assert len(window) == 8
    assert window[3] == pytest.approx(window[4])
    assert window[3] < 1.0


def test_kaiser_single_point():
    assert list(make_kaiser(1, 5.0)) == [1.0]


def test_kaiser_negative_length_rejected():
    with pytest.raises(ValueError):
        make_kaiser(-1, 5.0)


def test_hann_window_shape():
    window = make_hann_window(11)
    assert window[0] == pytest.approx(0.0, abs=1e-12)
    assert window[10] == pytest.approx(0.0, abs=1e-12)
    assert window[5] == pytest.approx(1.0)
    for a, b in zip(window, window[::-1]):
        assert a == pytest.approx(b)


def test_window_filter_of_silence_is_silence():
    result = window_filter(16, 17, [0j] * 32, 5.0)
    assert len(result) == 32
    assert all(abs(value) == 0 for value in result)


def test_window_filter_short_response_rejected():
    with pytest.raises(ValueError):
        window_filter(16, 17, [0j] * 10, 5.0)


def test_window_filter_bad_lengths_rejected():
    with pytest.raises(ValueError):
        window_filter(0, 4, [0j] * 3, 5.0)


def test_tune_passes_band_and_stops_outside():
    filt = FftFilter(64, 65)
    assert filt.length == 128
    filt.tune(0.1, 0.3, 5.0)
    passband = abs(filt.coefficients[26])
    stopband = abs(filt.coefficients[100])
    assert passband == pytest.approx(1.0 / 128, rel=0.05)
    assert passband > 10 * stopband


def test_tune_negative_band_uses_upper_bins():
    filt = FftFilter(64, 65)
    filt.tune(-0.3, -0.1, 5.0)
    assert abs(filt.coefficients[102]) > 10 * abs(filt.coefficients[26])


def test_tune_rejects_nan():
    filt = FftFilter(64, 65)
    with pytest.raises(ValueError):
        filt.tune(float("nan"), 0.3, 5.0)


def test_format_coefficients():
    filt = FftFilter(4, 5)
    filt.tune(0.0, 0.5, 5.0)
    lines = filt.format_coefficients().splitlines()
    assert lines[0] == "#Filter windowed FIR frequency coefficients"
    assert len(lines) == 1 + filt.length
    index, real, imag = lines[1].split(",")
    assert index == "0"
    assert float(real) == pytest.approx(filt.coefficients[0].real, abs=1e-12)
    assert len(real.split(".")[1]) == 17