"""Parsers for the repository index formats watched by repowatch.

This module covers the Debian Packages file and the RPM repomd.xml /
primary.xml metadata, both published by the service after an upload.
"""

from .base import IndexParseError, is_gzip_compressed, maybe_gunzip
from .deb import checksum_line, packages_index_lists, packages_index_path
from .rpm import (
    PrimaryPackage,
    RepomdEntry,
    find_package,
    find_primary_href,
    package_filename,
    parse_primary,
    parse_repomd,
)

__all__ = [
    "IndexParseError",
    "is_gzip_compressed",
    "maybe_gunzip",
    "checksum_line",
    "packages_index_lists",
    "packages_index_path",
    "PrimaryPackage",
    "RepomdEntry",
    "find_package",
    "find_primary_href",
    "package_filename",
    "parse_primary",
    "parse_repomd",
]
