"""A restartable stopwatch on a monotonic clock."""

import time


class Timer:
    """Measures seconds elapsed since it was created or last started."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self.start()

    def start(self):
        self._start = self._clock()

    def elapsed(self):
        return self._clock() - self._start