"""A TCP client connection with byte, exact-length and line reads."""

import logging
import socket
import time

log = logging.getLogger(__name__)

_FAMILIES = (socket.AF_INET, socket.AF_INET6, socket.AF_UNSPEC)


class TCPClient:
    """Connects to ``address``:``port``, trying every address the name resolves to."""

    resolve_attempts = 20
    resolve_pause = 3.0

    def __init__(self, address="", family=socket.AF_UNSPEC, port=""):
        self.address = address
        self.family = family
        self.port = str(port)
        self._sock = None

    def _resolve(self):
        for attempt in range(self.resolve_attempts):
            try:
                return socket.getaddrinfo(self.address, self.port, socket.AF_UNSPEC,
                                          socket.SOCK_STREAM, socket.IPPROTO_TCP)
            except socket.gaierror as err:
                if err.errno != socket.EAI_AGAIN:
                    raise OSError(err.errno,
                                  f"getaddrinfo of {self.address}: {err.strerror}") from err
                if attempt + 1 < self.resolve_attempts:
                    time.sleep(self.resolve_pause)
        raise OSError(f"getaddrinfo of {self.address} failed {self.resolve_attempts} times")

    def open(self):
        """Connect; raises ValueError for bad settings and OSError if no address answers."""
        if self._sock is not None:
            raise OSError(f"port for '{self.address}' is already open")
        try:
            port_number = int(self.port) if self.port else 0
        except ValueError:
            raise ValueError(f"'[{self.address}]:{self.port}' is malformed") from None
        if not self.address or port_number == 0:
            raise ValueError(f"'[{self.address}]:{self.port}' is malformed")
        if self.family not in _FAMILIES:
            raise ValueError("family must be AF_INET, AF_INET6 or AF_UNSPEC")

        for family, socktype, proto, _name, sockaddr in self._resolve():
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError:
                continue
            try:
                sock.connect(sockaddr)
            except OSError:
                sock.close()
                continue
            log.info("Successfully connected to %s at [%s]:%s",
                     self.address, sockaddr[0], self.port)
            self._sock = sock
            return
        raise OSError(f"Could not connect to any system returned by {self.address}")

    def _require_open(self):
        if self._sock is None:
            raise OSError("connection is not open")
        return self._sock

    @property
    def socket_family(self):
        """The family of the connected socket, or None when closed."""
        return self._sock.family if self._sock is not None else None

    def read(self, size):
        """Receive up to ``size`` bytes; an empty result means the peer closed."""
        if size <= 0:
            raise ValueError("size must be positive")
        return self._require_open().recv(size)

    def read_exact(self, size):
        """Receive exactly ``size`` bytes; raises ConnectionError if the peer closes."""
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self.read(remaining)
            if not chunk:
                raise ConnectionError("connection closed before all data arrived")
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def read_line(self):
        """Receive one line, newline included; raises ConnectionError if the peer closes."""
        line = bytearray()
        while not line.endswith(b"\n"):
            byte = self.read(1)
            if not byte:
                raise ConnectionError("connection closed before end of line")
            line += byte
        return line.decode("latin-1")

    def write(self, data):
        """Send ``data`` in one call; raises OSError on a short write."""
        data = bytes(data)
        if not data:
            raise ValueError("nothing to write")
        sent = self._require_open().send(data)
        if sent != len(data):
            raise OSError(f"only wrote {sent} of {len(data)} bytes")

    def write_line(self, line):
        """Send ``line``, adding a newline if it lacks one."""
        if not line:
            raise ValueError("nothing to write")
        if not line.endswith("\n"):
            line += "\n"
        self._require_open().sendall(line.encode("latin-1"))

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