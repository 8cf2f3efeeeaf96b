"""Checksum computation and extraction helpers."""

import hashlib
from pathlib import Path
from typing import BinaryIO, Optional, Union

import httpx

from ..common.logger import get_logger
from .base import ChecksumPair

logger = get_logger("checksum")

CHECKSUM_HEADER = "X-Checksum-Sha2"

CHUNK_SIZE = 8192


def checksum_from_stream(stream: BinaryIO) -> ChecksumPair:
    """Compute SHA-1 and SHA-256 of a byte stream in a single pass.

    Args:
        stream: Binary stream, read until EOF

    Returns:
        ChecksumPair with both digests set
    """
    sha1 = hashlib.sha1()
    sha256 = hashlib.sha256()

    # Read in chunks to handle large files
    for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
        sha1.update(chunk)
        sha256.update(chunk)

    return ChecksumPair(sha1=sha1.digest(), sha256=sha256.digest())


def checksum_from_file(path: Union[str, Path]) -> ChecksumPair:
    """Compute SHA-1 and SHA-256 of a local file.

    Args:
        path: Path to the file

    Returns:
        ChecksumPair with both digests set

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    with open(path, "rb") as f:
        checksum = checksum_from_stream(f)

    logger.debug(f"Checksums of {path}: sha1={checksum.sha1_hex} sha256={checksum.sha256_hex}")
    return checksum


def parse_hex_digest(value: Optional[str]) -> Optional[bytes]:
    """Decode a hex digest, returning None when it is missing or malformed."""
    if not value:
        return None
    try:
        return bytes.fromhex(value.strip())
    except ValueError:
        logger.debug(f"Ignoring malformed hex digest: {value!r}")
        return None


def checksum_from_response(response: httpx.Response) -> Optional[bytes]:
    """Extract the SHA-256 digest advertised by a download response.

    Args:
        response: Response to a GET or HEAD on a download URL

    Returns:
        Raw digest bytes, or None if the header is absent or invalid
    """
    return parse_hex_digest(response.headers.get(CHECKSUM_HEADER))
