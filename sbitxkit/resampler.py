"""Linear-interpolation resampling of integer sample blocks."""

from __future__ import annotations

import sys
from collections.abc import Sequence

DEMO_SAMPLES = (
    0, 10, 20, 30, 40, 50, 60, 50, 40, 30, 20, 10, 0, -10, -20, -30, -40, -50,
    -60, -50, -40, -30, -20, -10, 0, 10, 20, 30, 40, 50, 60, 50, 30, 20, 10, 0,
)


def _cdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def resample(samples: Sequence[int], in_count: int, out_count: int) -> list[int]:
    """Turn ``in_count`` samples into ``out_count`` by linear interpolation.

    Raises ValueError for non-positive counts or too few samples.
    """
    if in_count < 1 or out_count < 1:
        raise ValueError("sample counts must be positive")
    out = []
    for position in range(0, in_count * out_count, in_count):
        si, p = divmod(position, out_count)
        q = out_count - p
        try:
            nxt = samples[si + 1] if p else 0
            value = samples[si] * q + nxt * p
        except IndexError:
            raise ValueError("not enough input samples") from None
        out.append(_cdiv(value, out_count))
    return out


def main(argv: Sequence[str] | None = None) -> int:
    """Resample the demo block from 20 to 24 samples and print both."""
    in_count, out_count = 20, 24
    print(f"Resampling from {in_count} to {out_count}")
    out = resample(DEMO_SAMPLES, in_count, out_count)
    for index, value in enumerate(out):
        print(f"{index}: {DEMO_SAMPLES[index]} : {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())