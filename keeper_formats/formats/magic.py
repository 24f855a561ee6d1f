"""Magic byte signatures for the package formats handled here.

All checks operate on in-memory payloads; handlers never touch the
filesystem.
"""

from typing import Dict

MAGIC_SIGNATURES: Dict[str, bytes] = {
    "rpm": b"\xed\xab\xee\xdb",  # RPM lead
    "gzip": b"\x1f\x8b",  # gzip compressed (unitypackage, sdist)
}

# Compression method byte following the gzip magic
GZIP_DEFLATE = 0x08


def has_magic(data: bytes, kind: str) -> bool:
    """Check whether data starts with the signature registered for kind.

    Args:
        data: Artifact payload
        kind: Key into MAGIC_SIGNATURES

    Returns:
        True if the payload starts with the signature

    Raises:
        KeyError: If kind is not a known signature
    """
    return data.startswith(MAGIC_SIGNATURES[kind])


def is_gzip(data: bytes) -> bool:
    """Check if payload is gzip compressed."""
    return has_magic(data, "gzip")


def is_rpm(data: bytes) -> bool:
    """Check if payload starts with the RPM lead magic."""
    return has_magic(data, "rpm")


def hex_prefix(data: bytes, count: int) -> str:
    """Render the first count bytes as ``[ed, ab, ...]`` for diagnostics."""
    return "[" + ", ".join(f"{b:02x}" for b in data[:count]) + "]"
