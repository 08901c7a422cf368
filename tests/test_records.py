import pytest

from sbitxkit.records import RecordStore


@pytest.fixture
def rc_path(tmp_path):
    return tmp_path / "sbitx.rc"


def test_missing_file_gives_defaults(rc_path):
    store = RecordStore(rc_path)
    store.load()
    assert store.get_integer("mic_gain", 70) == 70
    assert store.get_string("mode", "USB") == "USB"


def test_load_reads_pairs_and_skips_comments(rc_path):
    rc_path.write_text("# comment=1\nmic_gain=45\nmode=LSB\n", encoding="utf-8")
    store = RecordStore(rc_path)
    store.load()
    assert store.get_integer("mic_gain", 70) == 45
    assert store.get_string("mode", "USB") == "LSB"
    assert store.get_string("# comment") is None


def test_later_line_overrides_earlier(rc_path):
    rc_path.write_text("mode=USB\nmode=CW\n", encoding="utf-8")
    store = RecordStore(rc_path)
    store.load()
    assert store.get_string("mode") == "CW"


def test_lines_without_key_or_value_are_skipped(rc_path):
    rc_path.write_text("novalue=\njustatext\n==x=y\n", encoding="utf-8")
    store = RecordStore(rc_path)
    store.load()
    assert store.get_string("novalue") is None
    assert store.get_string("justatext") is None
    assert store.get_string("x") == "y"


def test_value_may_contain_equals(rc_path):
    rc_path.write_text("macro=a=b\n", encoding="utf-8")
    store = RecordStore(rc_path)
    store.load()
    assert store.get_string("macro") == "a=b"


def test_get_integer_parses_leading_digits(rc_path):
    store = RecordStore(rc_path)
    store.set_string("gain", " -12dB")
    store.set_string("word", "abc")
    assert store.get_integer("gain", 0) == -12
    assert store.get_integer("word", 5) == 0


def test_save_format(rc_path):
    store = RecordStore(rc_path)
    store.set_integer("mic_gain", 70)
    store.save()
    assert rc_path.read_text(encoding="utf-8") == "mic_gain =70\n"


def test_save_load_round_trip(rc_path):
    store = RecordStore(rc_path)
    store.set_integer("mic_gain", 70)
    store.set_string("mode", "USB")
    store.save()
    other = RecordStore(rc_path)
    other.load()
    assert other.get_integer("mic_gain", 0) == 70
    assert other.get_string("mode") == "USB"


def test_dump_lists_records(rc_path):
    store = RecordStore(rc_path)
    store.set_string("mode", "USB")
    assert store.dump() == "[mode] = <USB>\n"


def test_too_long_key_rejected(rc_path):
    store = RecordStore(rc_path)
    with pytest.raises(ValueError):
        store.set_string("k" * 64, "v")
    with pytest.raises(ValueError):
        store.set_string("k", "v" * 256)


def test_save_to_directory_raises(tmp_path):
    store = RecordStore(tmp_path)
    store.set_string("mode", "USB")
    with pytest.raises(OSError):
        store.save()