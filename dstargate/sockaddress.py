"""An IPv4 or IPv6 socket address with a port."""

import socket

_LOOPBACK = {socket.AF_INET: "127.0.0.1", socket.AF_INET6: "::1"}
_ANY = {socket.AF_INET: "0.0.0.0", socket.AF_INET6: "::"}
_SIZES = {socket.AF_INET: 4, socket.AF_INET6: 16}


class SockAddress:
    """Address family, packed IP address and port.

    Equality compares family and address only, never the port. An address
    starting with "loc" means loopback and one starting with "any" means the
    wildcard address, case-insensitively.
    """

    def __init__(self, family, port=0, address=None):
        if family not in _SIZES:
            raise ValueError(f"wrong address family type {family} for [{address}]:{port}")
        self._family = socket.AddressFamily(family)
        self._packed = bytes(_SIZES[family])
        self.port = port
        if address is not None:
            self._packed = self._parse(address)

    def _parse(self, address):
        lowered = address[:3].lower()
        if lowered == "loc":
            address = _LOOPBACK[self._family]
        elif lowered == "any":
            address = _ANY[self._family]
        else:
            address = address.split("%", 1)[0]
        try:
            return socket.inet_pton(self._family, address)
        except OSError:
            kind = "IPV4" if self._family == socket.AF_INET else "IPV6"
            raise ValueError(f"'{address}' is not a valid {kind} address") from None

    @property
    def family(self):
        return self._family

    @property
    def port(self):
        return self._port

    @port.setter
    def port(self, value):
        if not 0 <= value <= 0xFFFF:
            raise ValueError(f"port must be in 0..65535, not {value}")
        self._port = value

    @property
    def address(self):
        """The address in its textual form."""
        return socket.inet_ntop(self._family, self._packed)

    def is_zero(self):
        return not any(self._packed)

    def clear_address(self):
        self._packed = bytes(_SIZES[self._family])

    def sockaddr(self):
        """The address tuple the socket module expects for this family."""
        if self._family == socket.AF_INET:
            return (self.address, self._port)
        return (self.address, self._port, 0, 0)

    def __eq__(self, other):
        if not isinstance(other, SockAddress):
            return NotImplemented
        return self._family == other._family and self._packed == other._packed

    def __hash__(self):
        return hash((self._family, self._packed))

    def __str__(self):
        text = self.address
        if self._family == socket.AF_INET6:
            text = f"[{text}]"
        if self._port:
            text += f":{self._port}"
        return text

    def __repr__(self):
        return f"SockAddress({self._family.name}, {self._port}, {self.address!r})"