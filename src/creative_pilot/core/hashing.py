from __future__ import annotations
import hashlib


def sha256_of_bytes(data: bytes) -> str:
    """Return SHA256 hash of bytes."""
    return hashlib.sha256(data).hexdigest()
