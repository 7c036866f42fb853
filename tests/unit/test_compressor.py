"""Unit tests for the gzip envelope and artifact fingerprints."""

from __future__ import annotations

import gzip
import hashlib

from paperforge.core.compressor import compress
from paperforge.core.hasher import fingerprint, sha256_hex


class TestCompress:
    def test_decompresses_to_input(self):
        data = b"tar bytes " * 1000
        assert gzip.decompress(compress(data)) == data

    def test_deterministic(self):
        data = bytes(range(256)) * 50
        assert compress(data) == compress(data)

    def test_header_mtime_is_zero(self):
        assert compress(b"x")[4:8] == b"\x00\x00\x00\x00"


class TestHasher:
    def test_sha256_hex(self):
        assert sha256_hex(b"abc") == hashlib.sha256(b"abc").hexdigest()

    def test_fingerprint_prefix(self):
        assert fingerprint(b"") == "sha256:" + hashlib.sha256(b"").hexdigest()
