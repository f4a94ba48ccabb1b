"""Error types raised by the conversion pipeline."""

from __future__ import annotations


class AsciiVideoError(Exception):
    """Base class for fatal conversion errors."""


class ArgError(AsciiVideoError):
    """Missing or invalid command line arguments."""


class OpenError(AsciiVideoError):
    """The input container cannot be opened or read."""


class EncodeError(AsciiVideoError):
    """No candidate codec could open the output container."""

    def __init__(self, path: str, codecs: tuple[str, ...]):
        self.path = path
        self.codecs = codecs
        tried = ", ".join(codecs) if codecs else "none"
        super().__init__(f"Unable to create output video '{path}' (tried codecs: {tried}).")
