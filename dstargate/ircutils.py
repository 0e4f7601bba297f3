"""Time and string helpers for the ircDDB client."""

import time

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_time(text):
    """Convert a local ``YYYY-MM-DD HH:MM:SS`` string to seconds since the epoch."""
    return int(time.mktime(time.strptime(text, TIME_FORMAT)))


def tokenize(text):
    """Split ``text`` into whitespace-separated words."""
    return text.split()


def current_time():
    """Return the current UTC time as ``YYYY-MM-DD HH:MM:SS``."""
    return time.strftime(TIME_FORMAT, time.gmtime())


def truncate(text, buf_size):
    """Return what fits in a buffer of ``buf_size`` with a terminator, stopping at NUL."""
    if buf_size < 1:
        raise ValueError(f"buffer size must be at least 1, not {buf_size}")
    return text.split("\0", 1)[0][:buf_size - 1]