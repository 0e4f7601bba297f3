import os
import uuid

import pytest

from dstargate.unixdgram import UnixDgramReader, UnixDgramWriter


def _name():
    return f"dstargate-test-{os.getpid()}-{uuid.uuid4().hex}"


def test_write_then_read():
    name = _name()
    with UnixDgramReader() as reader:
        reader.open(name)
        payload = b"DSVT" + bytes(52)
        assert UnixDgramWriter(name).write(payload) == len(payload)
        assert reader.read(100) == payload


def test_datagrams_keep_boundaries_and_order():
    name = _name()
    with UnixDgramReader() as reader:
        reader.open(name)
        writer = UnixDgramWriter(name)
        writer.write(b"first")
        writer.write(b"second")
        assert reader.read(100) == b"first"
        assert reader.read(100) == b"second"


def test_read_truncates_to_size():
    name = _name()
    with UnixDgramReader() as reader:
        reader.open(name)
        UnixDgramWriter(name).write(b"abcdef")
        assert reader.read(3) == b"abc"


def test_long_names_are_truncated_consistently():
    name = _name() + "x" * 200
    writer = UnixDgramWriter(name)
    assert len(writer.path) == 106
    with UnixDgramReader() as reader:
        reader.open(name)
        assert writer.write(b"hello") == 5
        assert reader.read(10) == b"hello"


def test_write_without_reader_raises():
    with pytest.raises(OSError):
        UnixDgramWriter(_name()).write(b"nobody listens")


def test_read_when_closed_raises():
    with pytest.raises(OSError):
        UnixDgramReader().read(10)


def test_fileno_and_close():
    reader = UnixDgramReader()
    assert reader.fileno() == -1
    reader.open(_name())
    assert reader.fileno() >= 0
    reader.close()
    assert reader.fileno() == -1


def test_name_in_use_raises():
    name = _name()
    with UnixDgramReader() as first:
        first.open(name)
        second = UnixDgramReader()
        with pytest.raises(OSError):
            second.open(name)
        assert second.fileno() == -1