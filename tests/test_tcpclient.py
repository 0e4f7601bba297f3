import socket

import pytest

from dstargate.tcpclient import TCPClient


@pytest.fixture
def server():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(1)
    yield srv
    srv.close()


@pytest.fixture
def pair(server):
    client = TCPClient("127.0.0.1", socket.AF_INET, server.getsockname()[1])
    client.open()
    conn, _ = server.accept()
    yield client, conn
    conn.close()
    client.close()


def test_open_sets_fileno(pair):
    client, _ = pair
    assert client.fileno() >= 0
    assert client.socket_family == socket.AF_INET


def test_open_twice_fails(pair):
    client, _ = pair
    with pytest.raises(OSError):
        client.open()


def test_write_and_read(pair):
    client, conn = pair
    client.write(b"abc")
    assert conn.recv(16) == b"abc"
    conn.sendall(b"xyz")
    assert client.read_exact(3) == b"xyz"


def test_read_line(pair):
    client, conn = pair
    conn.sendall(b"first line\nsecond\n")
    assert client.read_line() == "first line\n"
    assert client.read_line() == "second\n"


def test_write_line_appends_newline(pair):
    client, conn = pair
    client.write_line("PING x")
    client.write_line("PONG\n")
    data = b""
    while data.count(b"\n") < 2:
        data += conn.recv(64)
    assert data == b"PING x\nPONG\n"


def test_read_after_peer_close(pair):
    client, conn = pair
    conn.sendall(b"ab")
    conn.close()
    with pytest.raises(ConnectionError):
        client.read_exact(4)


def test_read_line_after_peer_close(pair):
    client, conn = pair
    conn.sendall(b"partial")
    conn.close()
    with pytest.raises(ConnectionError):
        client.read_line()


def test_close_resets(pair):
    client, _ = pair
    client.close()
    assert client.fileno() == -1
    with pytest.raises(OSError):
        client.read(1)


@pytest.mark.parametrize("address,port", [("", "20001"), ("127.0.0.1", ""),
                                          ("127.0.0.1", "0"), ("127.0.0.1", "abc")])
def test_malformed(address, port):
    with pytest.raises(ValueError):
        TCPClient(address, socket.AF_INET, port).open()


def test_bad_family():
    with pytest.raises(ValueError):
        TCPClient("127.0.0.1", socket.AF_UNIX, "20001").open()


def test_connection_refused():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    client = TCPClient("127.0.0.1", socket.AF_UNSPEC, port)
    with pytest.raises(OSError):
        client.open()
    assert client.fileno() == -1


def test_empty_write_rejected(pair):
    client, _ = pair
    with pytest.raises(ValueError):
        client.write(b"")