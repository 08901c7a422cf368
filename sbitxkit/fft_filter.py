"""Kaiser-windowed FIR filters applied in the frequency domain."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np


def i0(z: float) -> float:
    """Modified Bessel function of the first kind, order zero."""
    t = (z * z) / 4
    total = 1 + t
    term = t
    for k in range(2, 40):
        term *= t / (k * k)
        total += term
        if term < 1e-12 * total:
            break
    return total


def i1(z: float) -> float:
    """Modified Bessel function of the first kind, order one."""
    t = (z * z) / 4
    term = 1.0
    total = term
    for k in range(1, 40):
        term *= t / (k * (k + 1))
        total += term
        if term < 1e-12 * total:
            break
    return 0.5 * z * total


def make_kaiser(m: int, beta: float) -> np.ndarray:
    """Return a symmetric Kaiser window of ``m`` points."""
    if m < 0:
        raise ValueError("window length must not be negative")
    window = np.ones(m, dtype=float)
    if m >= 2:
        numc = math.pi * beta
        inv_denom = 1.0 / i0(numc)
        pc = 2.0 / (m - 1)
        for n in range(m // 2):
            p = pc * n - 1
            value = i0(numc * math.sqrt(max(0.0, 1 - p * p))) * inv_denom
            window[n] = value
            window[m - 1 - n] = value
    if m & 1:
        window[(m - 1) // 2] = 1.0
    return window


def make_hann_window(count: int) -> np.ndarray:
    """Return a Hann window of ``count`` points."""
    n = np.arange(count, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return 0.5 - 0.5 * np.cos(2 * math.pi * n / (count - 1))


def window_filter(l: int, m: int, response: Sequence[complex], beta: float) -> np.ndarray:
    """Limit a frequency response to an ``m``-tap Kaiser-windowed impulse.

    ``response`` holds ``l + m - 1`` complex bins; the windowed response is
    returned with the impulse centred at ``m // 2``.
    """
    if l < 1 or m < 1:
        raise ValueError("input and impulse lengths must be positive")
    total = l + m - 1
    bins = np.asarray(response, dtype=complex)
    if bins.shape[0] < total:
        raise ValueError(f"response needs {total} bins, got {bins.shape[0]}")

    # unnormalised inverse transform, as the forward/backward pair scales by N
    buffer = np.fft.ifft(bins[:total]) * total

    # shift to make the impulse causal; order matters when the ranges overlap
    half = m // 2
    for n in range(m - 1, -1, -1):
        buffer[n] = buffer[(n - half + total) % total]

    buffer[:m] *= make_kaiser(m, beta)
    buffer[m:] = 0
    return np.fft.fft(buffer)


class FftFilter:
    """A band-pass filter held as frequency-domain FIR coefficients."""

    def __init__(self, input_length: int, impulse_length: int) -> None:
        if input_length < 1 or impulse_length < 1:
            raise ValueError("input and impulse lengths must be positive")
        self.input_length = input_length
        self.impulse_length = impulse_length
        self.length = input_length + impulse_length - 1
        self.coefficients = np.zeros(self.length, dtype=complex)

    def tune(self, low: float, high: float, kaiser_beta: float) -> None:
        """Pass frequencies between ``low`` and ``high`` (fractions of the sample rate)."""
        if math.isnan(low) or math.isnan(high) or math.isnan(kaiser_beta):
            raise ValueError("filter edges and beta must be numbers")
        size = self.length
        n = np.arange(size)
        s = np.where(n <= size // 2, n / size, (n - size) / size)
        gain = 1.0 / size
        ideal = np.where((s >= low) & (s <= high), gain, 0.0).astype(complex)
        self.coefficients = window_filter(
            self.input_length, self.impulse_length, ideal, kaiser_beta
        )

    def format_coefficients(self) -> str:
        """Return the coefficients as ``index,real,imag`` lines under a header."""
        lines = ["#Filter windowed FIR frequency coefficients"]
        lines.extend(
            f"{index},{value.real:.17f},{value.imag:.17f}"
            for index, value in enumerate(self.coefficients)
        )
        return "\n".join(lines) + "\n"