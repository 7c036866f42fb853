"""Hashing helpers for artifact fingerprints."""

from __future__ import annotations

import hashlib


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def fingerprint(data: bytes) -> str:
    """Return a ``sha256:<hex>`` fingerprint, as logged for every artifact."""
    return f"sha256:{sha256_hex(data)}"
