import calendar
import re
import time

import pytest

from dstargate.ircutils import current_time, parse_time, tokenize, truncate


def test_parse_time_round_trip_with_local_time():
    text = "2021-06-15 12:34:56"
    seconds = parse_time(text)
    assert time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(seconds)) == text


def test_parse_time_orders_times():
    assert parse_time("2020-01-01 00:00:00") < parse_time("2020-01-01 00:00:01")


def test_parse_time_rejects_garbage():
    with pytest.raises(ValueError):
        parse_time("not a time")


def test_tokenize():
    assert tokenize("  UPDATE  2020-01-01\t12:00:00\nKEY ") == [
        "UPDATE", "2020-01-01", "12:00:00", "KEY"]
    assert tokenize("   ") == []


def test_current_time_format_and_value():
    text = current_time()
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", text)
    seconds = calendar.timegm(time.strptime(text, "%Y-%m-%d %H:%M:%S"))
    assert abs(seconds - time.time()) < 5


def test_truncate():
    assert truncate("hello", 3) == "he"
    assert truncate("hello", 100) == "hello"
    assert truncate("ab\0cd", 10) == "ab"
    assert truncate("anything", 1) == ""


def test_truncate_bad_size():
    with pytest.raises(ValueError):
        truncate("x", 0)