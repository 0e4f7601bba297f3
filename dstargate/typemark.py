"""Per-module store of the three flag bytes (type, mark, module) of a stream."""

_MODULES = ("A", "B", "C")


class TypeMarkModule:
    """Holds the flagb bytes for repeater modules A, B and C."""

    def __init__(self):
        self._values = {module: bytearray(3) for module in _MODULES}

    def _slot(self, module):
        if module not in self._values:
            raise ValueError(f"module must be one of A, B or C, not {module!r}")
        return self._values[module]

    @staticmethod
    def _byte(value):
        if not 0 <= value <= 0xFF:
            raise ValueError(f"value must fit in one byte, not {value}")
        return value

    def load_flagb(self, module, flagb):
        """Store the first three bytes of ``flagb`` for ``module``."""
        raw = bytes(flagb)
        if len(raw) < 3:
            raise ValueError(f"flagb needs three bytes, got {len(raw)}")
        self._slot(module)[:] = raw[:3]

    def get_flagb(self, module):
        """Return the three stored bytes for ``module``."""
        return bytes(self._slot(module))

    def set_type(self, module, value):
        self._slot(module)[0] = self._byte(value)

    def set_mark(self, module, value):
        self._slot(module)[1] = self._byte(value)

    def set_module(self, module, value):
        self._slot(module)[2] = self._byte(value)

    def is_equal(self, module, flagb):
        """True if ``module`` is valid and its bytes equal the first three of ``flagb``."""
        if module not in self._values:
            return False
        return bytes(self._values[module]) == bytes(flagb)[:3]