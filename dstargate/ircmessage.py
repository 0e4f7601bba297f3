"""An IRC protocol message: optional prefix, command and parameters."""

from dataclasses import dataclass, field


@dataclass
class IRCMessage:
    command: str = ""
    params: list = field(default_factory=list)
    prefix: str = ""

    @classmethod
    def privmsg(cls, to_nick, text):
        """Build a PRIVMSG addressed to ``to_nick``."""
        return cls("PRIVMSG", [to_nick, text])

    def add_param(self, param):
        self.params.append(param)

    @property
    def param_count(self):
        return len(self.params)

    def _prefix_parts(self):
        parts = ["", "", ""]
        slot = 0
        for ch in self.prefix:
            if ch == "!":
                slot = 1
            elif ch == "@":
                slot = 2
            else:
                parts[slot] += ch
        return parts

    @property
    def prefix_nick(self):
        return self._prefix_parts()[0]

    @property
    def prefix_name(self):
        return self._prefix_parts()[1]

    @property
    def prefix_host(self):
        return self._prefix_parts()[2]

    def compose(self):
        """Return the wire form, the last parameter written as a trailing one."""
        pieces = []
        if self.prefix:
            pieces.append(f":{self.prefix} ")
        pieces.append(self.command)
        if self.params:
            *head, last = self.params
            pieces.extend(f" {param}" for param in head)
            pieces.append(f" :{last}")
        pieces.append("\r\n")
        return "".join(pieces)