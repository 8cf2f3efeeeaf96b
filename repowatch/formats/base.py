"""Shared helpers for repository index formats."""

import gzip
import zlib

# Magic byte signatures of compressed index payloads
MAGIC_SIGNATURES = {
    "gzip": b"\x1f\x8b",
}


class IndexParseError(ValueError):
    """Raised when a repository index document cannot be parsed."""


def local_name(tag: str) -> str:
    """Strip the "{namespace}" prefix ElementTree puts on tag names."""
    return tag.rsplit("}", 1)[-1]


def is_gzip_compressed(data: bytes) -> bool:
    """Check if a payload starts with the gzip magic bytes."""
    return data[:2] == MAGIC_SIGNATURES["gzip"]


def maybe_gunzip(data: bytes) -> bytes:
    """Decompress gzip payloads, pass anything else through.

    Servers sometimes declare a Content-Encoding for .gz files, in which
    case httpx has already decoded the body.

    Raises:
        IndexParseError: If the gzip stream is corrupt or truncated
    """
    if not is_gzip_compressed(data):
        return data
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise IndexParseError(f"Corrupt gzip payload: {e}") from e
