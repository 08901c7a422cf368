import pytest

from sbitxkit.hist_disp import (
    HdMessage,
    Style,
    create_grid_list,
    decorate,
    is_valid_grid,
    length_no_decoration,
    lookup_style,
    markup,
    next_token,
    parse_message,
    strip_decoration,
)
from sbitxkit.logbook import Logbook


class FakeLog:
    def __init__(self, callers=(), grids=()):
        self.callers = set(callers)
        self.grids = set(grids)

    def caller_exists(self, callsign):
        return callsign in self.callers

    def grid_exists(self, grid):
        return grid in self.grids


CQ_LINE = "12:00 -10 1500~ CQ K1ABC FN42"


def test_is_valid_grid():
    assert is_valid_grid("FN42")
    assert not is_valid_grid("fn42")
    assert not is_valid_grid("FN4")
    assert not is_valid_grid("F142")


def test_next_token_skips_empty_tokens():
    first = next_token("a  b", 0, " ")
    assert first == ("a", 2)
    second = next_token("a  b", first[1], " ")
    assert second[0] == "b"
    assert next_token("a  b", second[1], " ") is None


def test_next_token_too_long():
    with pytest.raises(ValueError):
        next_token("abcd", 0, " ", 2)


def test_next_token_ignores_trailing_newline():
    assert next_token("word\n", 0, " ")[0] == "word"


def test_parse_message():
    msg = parse_message(CQ_LINE)
    assert msg == HdMessage("12:00 -10 1500", "CQ", "K1ABC", "FN42", "")


def test_parse_message_incomplete():
    with pytest.raises(ValueError):
        parse_message("abc")


def test_markup_values():
    assert markup(Style.FIELD_LABEL) == "#A"
    assert markup(Style.LOG) == markup(Style.CALLEE)


def test_lookup_style_rr73_is_not_a_grid():
    assert lookup_style("RR73", Style.GRID, Style.FT8_RX, FakeLog()) is Style.FT8_RX
    assert lookup_style("FN42", Style.GRID, Style.FT8_RX, FakeLog()) is Style.GRID
    assert lookup_style("FN42", Style.GRID, Style.FT8_RX, FakeLog(grids=["FN42"])) is Style.FT8_RX


def test_decorate_cq_line():
    decorated = decorate(Style.FT8_RX, CQ_LINE, "N0CALL", FakeLog())
    expected = (
        markup(Style.FT8_RX) + "12:00 -10 1500~ "
        + markup(Style.LOG) + "CQ "
        + markup(Style.CALLER) + "K1ABC "
        + markup(Style.GRID) + "FN42\n"
    )
    assert decorated == expected


def test_decorate_worked_caller_uses_default():
    decorated = decorate(Style.FT8_RX, CQ_LINE, "N0CALL", FakeLog(callers=["K1ABC"]))
    assert markup(Style.FT8_RX) + "K1ABC" in decorated
    assert markup(Style.CALLER) not in decorated


def test_decorate_my_call():
    line = "123~ N0CALL K1ABC RR73"
    decorated = decorate(Style.FT8_TX, line, "N0CALL", FakeLog())
    assert markup(Style.MYCALL) + "N0CALL" in decorated
    assert markup(Style.FT8_TX) + "RR73" in decorated


def test_decorate_round_trip():
    decorated = decorate(Style.FT8_RX, CQ_LINE, "N0CALL", None)
    assert strip_decoration(decorated) == CQ_LINE + "\n"
    assert length_no_decoration(decorated) == len(CQ_LINE) + 1


def test_decorate_other_style_passes_through():
    assert decorate(Style.CW_RX, "hello", "N0CALL") == "hello"


def test_decorate_unparseable():
    with pytest.raises(ValueError):
        decorate(Style.FT8_RX, "", "N0CALL")


def test_strip_decoration_removes_brackets():
    assert strip_decoration("#G<K1ABC> x#") == "K1ABC x#"


def test_length_never_negative():
    assert length_no_decoration("##") == 0


def test_create_grid_list(tmp_path):
    with Logbook(tmp_path / "log.db") as log:
        for exch in ("JO22", "599", "FN42"):
            log.add("K1ABC", "-10", "FN00", "-12", exch, now=0)
        out = tmp_path / "grids.txt"
        count = create_grid_list(log, out)
    assert count == 2
    assert out.read_bytes() == b"FN42JO22\0\0"