"""Repository and content descriptions.

This module describes the repositories hosted by the service and the
identity and checksums of uploaded content.
"""

from .base import (
    RepositoryKind,
    RepositoryInfo,
    ContentIdentity,
    ChecksumPair,
    DebianTarget,
    clean_path,
)
from .checksum import (
    CHECKSUM_HEADER,
    checksum_from_file,
    checksum_from_stream,
    checksum_from_response,
)

__all__ = [
    "RepositoryKind",
    "RepositoryInfo",
    "ContentIdentity",
    "ChecksumPair",
    "DebianTarget",
    "clean_path",
    "CHECKSUM_HEADER",
    "checksum_from_file",
    "checksum_from_stream",
    "checksum_from_response",
]
