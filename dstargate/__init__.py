"""D-STAR gateway building blocks: sockets, voice requests and an ircDDB message layer."""

__version__ = "0.1.0"