"""Generator of random non-zero 16-bit stream identifiers."""

import os
import random


class StreamIdGenerator:
    """Produces stream ids in 1..0xFFFF, seeded from the process id by default."""

    def __init__(self, seed=None):
        self._rng = random.Random(os.getpid() if seed is None else seed)

    def new_stream_id(self):
        while True:
            value = self._rng.getrandbits(16)
            if value:
                return value