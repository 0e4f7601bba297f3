"""Datagram sockets in the abstract Unix namespace used between local programs."""

import logging
import socket
import time

log = logging.getLogger(__name__)

# sun_path holds 108 bytes; the leading NUL and a terminator take two of them.
_MAX_NAME = 106
_MAX_ATTEMPTS = 100
_RETRY_PAUSE = 5e-6


def _abstract_name(path):
    return "\0" + path[:_MAX_NAME]


class UnixDgramReader:
    """Receives datagrams sent to an abstract socket name."""

    def __init__(self):
        self._sock = None

    def open(self, path):
        """Bind to the abstract name ``path``; raises OSError on failure."""
        self.close()
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
        try:
            sock.bind(_abstract_name(path))
        except OSError:
            sock.close()
            raise
        self._sock = sock

    def read(self, size):
        """Block until a datagram arrives and return at most ``size`` bytes of it."""
        if self._sock is None:
            raise OSError("reader is not open")
        data = self._sock.recv(size)
        if not data:
            log.warning("read returned no data")
        return data

    def close(self):
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def fileno(self):
        return self._sock.fileno() if self._sock is not None else -1

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class UnixDgramWriter:
    """Sends datagrams to an abstract socket name, connecting anew for each write."""

    def __init__(self, path):
        self.path = path[:_MAX_NAME]

    def write(self, data):
        """Send ``data`` and return the number of bytes written.

        Failed or empty writes are retried up to 100 times; OSError is raised
        if the receiver cannot be reached or every attempt fails.
        """
        data = bytes(data)
        with socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM) as sock:
            sock.connect("\0" + self.path)
            last_error = None
            for _ in range(_MAX_ATTEMPTS):
                try:
                    written = sock.send(data)
                except OSError as err:
                    log.error("failed to write to %s: %s", self.path, err)
                    last_error = err
                else:
                    if written == len(data):
                        return written
                    if written > 0:
                        log.error("only %d of %d bytes written to %s",
                                  written, len(data), self.path)
                        return written
                    log.warning("zero bytes written to %s", self.path)
                time.sleep(_RETRY_PAUSE)
        raise OSError(f"write to {self.path} failed after {_MAX_ATTEMPTS} attempts") from last_error