"""Whitespace trimming with the C locale's set of space characters."""

_SPACES = " \t\n\v\f\r"


def ltrim(text):
    return text.lstrip(_SPACES)


def rtrim(text):
    return text.rstrip(_SPACES)


def trim(text):
    return text.strip(_SPACES)