"""gzip envelope for the finished archive."""

from __future__ import annotations

import gzip


def compress(archive: bytes) -> bytes:
    """Compress *archive* in a single pass.

    The gzip header mtime is pinned to 0 so identical archives compress to
    identical bytes.
    """
    return gzip.compress(archive, mtime=0)
