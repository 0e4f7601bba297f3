import select
import socket

import pytest

from dstargate.sockaddress import SockAddress
from dstargate.udpsocket import UDPSocket


def _wait_readable(sock):
    ready, _, _ = select.select([sock], [], [], 2.0)
    return bool(ready)


def test_closed_socket_has_no_fileno():
    sock = UDPSocket()
    assert sock.fileno() == -1
    assert sock.port == 0


def test_open_binds_port_and_close_resets():
    sock = UDPSocket()
    sock.open(SockAddress(socket.AF_INET, 0, "loc"))
    assert sock.fileno() >= 0
    assert 0 < sock.port <= 0xFFFF
    sock.close()
    assert sock.fileno() == -1


def test_round_trip_between_two_sockets():
    with UDPSocket() as rx, UDPSocket() as tx:
        rx.open(SockAddress(socket.AF_INET, 0, "loc"))
        tx.open(SockAddress(socket.AF_INET, 0, "loc"))
        payload = b"DSVT" + bytes(range(23))
        sent = tx.write(payload, SockAddress(socket.AF_INET, rx.port, "loc"))
        assert sent == len(payload)
        assert _wait_readable(rx)
        data, sender = rx.read()
        assert data == payload
        assert sender == SockAddress(socket.AF_INET, 0, "127.0.0.1")
        assert sender.port == tx.port


def test_read_without_data_would_block():
    with UDPSocket() as sock:
        sock.open(SockAddress(socket.AF_INET, 0, "loc"))
        with pytest.raises(BlockingIOError):
            sock.read()


def test_read_when_closed_raises():
    with pytest.raises(OSError):
        UDPSocket().read()


def test_write_when_closed_raises():
    with pytest.raises(OSError):
        UDPSocket().write(b"x", SockAddress(socket.AF_INET, 9, "loc"))


def test_bind_failure_raises():
    sock = UDPSocket()
    with pytest.raises(OSError):
        sock.open(SockAddress(socket.AF_INET, 0, "192.0.2.1"))
    assert sock.fileno() == -1


def test_context_manager_closes():
    with UDPSocket() as sock:
        sock.open(SockAddress(socket.AF_INET, 0, "loc"))
        assert sock.fileno() >= 0
    assert sock.fileno() == -1