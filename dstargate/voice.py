"""Queue a voice announcement for the gateway to play on a module."""

from pathlib import Path

_TEXT_WIDTH = 20
_SPACES = " \t\n\v\f\r"


def normalize_module(text):
    """Return the module letter A, B or C named by the first character of ``text``."""
    module = text[:1].upper()
    if module not in ("A", "B", "C"):
        raise ValueError("module must be one of A B C")
    return module


def radio_text(message):
    """Return ``message`` as a 20-character field, blanks and padding as underscores."""
    text = message[:_TEXT_WIDTH].ljust(_TEXT_WIDTH, "_")
    return "".join("_" if ch in _SPACES else ch for ch in text)


def format_request(module, dat_file, message):
    """Return the request line the gateway reads from its voice file."""
    return f"{normalize_module(module)}_{dat_file}_{radio_text(message)}\n"


def write_request(module, dat_file, message, announce_dir, qnvoice_file):
    """Check that the announcement exists, write the request and return its line.

    Raises ValueError for a bad module, FileNotFoundError if the voice file
    is missing and OSError if the request file cannot be written.
    """
    line = format_request(module, dat_file, message)
    pathname = Path(f"{announce_dir}/{dat_file}")
    if not pathname.is_file():
        raise FileNotFoundError(f"Failed to find file {pathname} for reading")
    with open(qnvoice_file, "w", encoding="latin-1") as out:
        out.write(line)
    return line