"""Non-blocking UDP socket bound to a local address."""

import logging
import socket

from dstargate.sockaddress import SockAddress

UDP_BUFFER_LENMAX = 1024

log = logging.getLogger(__name__)


class UDPSocket:
    """A bound, non-blocking datagram socket."""

    def __init__(self):
        self._sock = None
        self._addr = None

    def open(self, addr):
        """Create, configure and bind the socket; raises OSError on failure."""
        self.close()
        sock = socket.socket(addr.family, socket.SOCK_DGRAM)
        try:
            sock.setblocking(False)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(addr.sockaddr())
        except OSError as err:
            sock.close()
            raise OSError(err.errno, f"cannot open UDP socket on {addr}: {err.strerror}") from err
        bound = SockAddress(addr.family, sock.getsockname()[1], addr.address)
        self._sock = sock
        self._addr = bound

    def close(self):
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    @property
    def port(self):
        return self._addr.port if self._addr is not None else 0

    def fileno(self):
        return self._sock.fileno() if self._sock is not None else -1

    def read(self, size=UDP_BUFFER_LENMAX):
        """Receive one datagram; returns its bytes and the sender's address."""
        if self._sock is None:
            raise OSError("UDP socket is not open")
        data, sender = self._sock.recvfrom(size)
        return data, SockAddress(self._sock.family, sender[1], sender[0])

    def write(self, data, addr):
        """Send ``data`` to ``addr`` and return the number of bytes sent."""
        if self._sock is None:
            raise OSError("UDP socket is not open")
        sent = self._sock.sendto(data, addr.sockaddr())
        if sent != len(data):
            log.warning("Short write, %d<%d to %s", sent, len(data), addr)
        return sent

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()