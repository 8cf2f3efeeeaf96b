"""Debian repository index (Packages file) helpers.

A Debian repository publishes one Packages file per distribution,
component and architecture:

    dists/<distribution>/<component>/binary-<architecture>/Packages

Each stanza describes one .deb and carries its "SHA256:" field, which
is how an uploaded file is recognized once the index is regenerated.
"""

from typing import Iterable


def packages_index_path(distribution: str, component: str, architecture: str) -> str:
    """Relative path of a Packages file inside the repository.

    Args:
        distribution: Distribution name (e.g. "stretch")
        component: Component name (e.g. "main")
        architecture: Architecture name (e.g. "amd64")

    Returns:
        Path relative to the repository root
    """
    return f"dists/{distribution}/{component}/binary-{architecture}/Packages"


def checksum_line(sha256: bytes) -> str:
    """The exact Packages line naming a file with this SHA-256 digest."""
    return f"SHA256: {sha256.hex()}"


def index_lists_checksum(lines: Iterable[str], sha256: bytes) -> bool:
    """Check if a Packages file lists a file with this SHA-256 digest.

    Lines are compared exactly against "SHA256: <lowercase hex>".

    Args:
        lines: Lines of the Packages file, without line terminators
        sha256: Raw SHA-256 digest

    Returns:
        True if one line matches
    """
    expected = checksum_line(sha256)
    return any(line == expected for line in lines)


def packages_index_lists(body: str, sha256: bytes) -> bool:
    """Same as index_lists_checksum() for a whole Packages document."""
    return index_lists_checksum(body.splitlines(), sha256)
