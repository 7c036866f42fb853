"""Minimal multipart body writer with CRLF framing."""

from __future__ import annotations

import secrets
from collections.abc import Sequence
from typing import BinaryIO

from paperforge.errors import PaperforgeError


class MultipartError(PaperforgeError):
    """Raised on misuse of a closed multipart writer."""


def random_boundary() -> str:
    """Return a boundary token of 60 lowercase hex characters."""
    return secrets.token_hex(30)


class MultipartWriter:
    """Writes parts separated by ``--boundary`` delimiters onto *out*.

    Each call to ``create_part`` writes the delimiter and the part's header
    block and returns the underlying stream for the part body. ``close``
    writes the final ``--boundary--`` delimiter.
    """

    def __init__(self, out: BinaryIO, boundary: str | None = None) -> None:
        self._out = out
        self.boundary = boundary or random_boundary()
        self._parts = 0
        self._closed = False

    def create_part(self, headers: Sequence[tuple[str, str]]) -> BinaryIO:
        if self._closed:
            raise MultipartError("multipart writer already closed")
        lead = "\r\n" if self._parts else ""
        block = [f"{lead}--{self.boundary}\r\n"]
        block.extend(f"{name}: {value}\r\n" for name, value in headers)
        block.append("\r\n")
        self._out.write("".join(block).encode("utf-8"))
        self._parts += 1
        return self._out

    def close(self) -> None:
        if self._closed:
            return
        lead = "\r\n" if self._parts else ""
        self._out.write(f"{lead}--{self.boundary}--\r\n".encode("utf-8"))
        self._closed = True
