import pytest

from dstargate.textutil import ltrim, rtrim, trim


def test_ltrim():
    assert ltrim(" \t\n value  ") == "value  "


def test_rtrim():
    assert rtrim("  value \r\n\v\f") == "  value"


def test_trim():
    assert trim("\t  inner space  \n") == "inner space"


@pytest.mark.parametrize("text", ["", "   ", "\t\r\n\v\f "])
def test_all_space_becomes_empty(text):
    assert trim(text) == ""
    assert ltrim(text) == ""
    assert rtrim(text) == ""


def test_non_c_space_is_kept():
    assert trim("\u00a0x\u00a0") == "\u00a0x\u00a0"


def test_trim_is_idempotent():
    text = "  abc  "
    assert trim(trim(text)) == trim(text)
    assert trim(text) == ltrim(rtrim(text))