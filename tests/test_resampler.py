import pytest

from sbitxkit.resampler import DEMO_SAMPLES, main, resample


def test_same_rate_is_identity():
    assert resample(list(range(10)), 5, 5) == [0, 1, 2, 3, 4]


def test_output_length():
    assert len(resample(DEMO_SAMPLES, 20, 24)) == 24
    assert len(resample(DEMO_SAMPLES, 24, 20)) == 20


def test_constant_stays_constant():
    assert resample([7] * 6, 4, 8) == [7] * 8


def test_values_between_neighbours():
    out = resample(DEMO_SAMPLES, 20, 24)
    assert out[0] == DEMO_SAMPLES[0]
    for k, value in enumerate(out):
        si = (k * 20) // 24
        low = min(DEMO_SAMPLES[si], DEMO_SAMPLES[si + 1])
        high = max(DEMO_SAMPLES[si], DEMO_SAMPLES[si + 1])
        assert low <= value <= high


def test_too_few_samples():
    with pytest.raises(ValueError):
        resample([1, 2, 3], 3, 4)


def test_bad_counts():
    with pytest.raises(ValueError):
        resample([1, 2], 0, 4)


def test_main_prints_table(capsys):
    assert main([]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Resampling from 20 to 24"
    assert len(lines) == 25
    assert lines[1] == "0: 0 : 0"