"""Data structures describing repositories and the content they hold.

Defines the repository kinds known to the service, the repository
metadata needed by the convergence waits, and the identity/checksums of
one uploaded file.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Dict, Optional


class RepositoryKind(Enum):
    """Repository types supported by the service."""

    DEBIAN = "debian"
    RPM = "rpm"
    MAVEN = "maven"
    NPM = "npm"
    NUGET = "nuget"
    OPKG = "opkg"
    DOCKER = "docker"
    VAGRANT = "vagrant"
    GENERIC = "generic"

    @property
    def is_indexed(self) -> bool:
        """Check if the service maintains a package index for this kind."""
        return self in (RepositoryKind.DEBIAN, RepositoryKind.RPM)

    @classmethod
    def parse(cls, value: str) -> "RepositoryKind":
        """Parse a repository type as reported by the service.

        The service reports Debian repositories as either "debian" or
        "deb".

        Args:
            value: Type string

        Returns:
            RepositoryKind

        Raises:
            ValueError: If the type is unknown
        """
        normalized = value.strip().lower()
        if normalized == "deb":
            return cls.DEBIAN
        return cls(normalized)


@dataclass
class RepositoryInfo:
    """Repository attributes relevant to convergence checks."""

    owner: str
    name: str
    kind: RepositoryKind = RepositoryKind.GENERIC
    yum_metadata_depth: Optional[int] = None
    default_debian_distribution: Optional[str] = None
    default_debian_component: Optional[str] = None
    default_debian_architecture: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryInfo":
        """Build from the JSON document returned by the repository API.

        Args:
            data: Decoded JSON object

        Returns:
            RepositoryInfo instance

        Raises:
            ValueError: If the repository type is unknown or the depth
                is not an integer
            AttributeError: If the type is not a string
        """
        depth = data.get("yum_metadata_depth")
        return cls(
            owner=data.get("owner", ""),
            name=data.get("name", ""),
            kind=RepositoryKind.parse(data.get("type", "generic")),
            yum_metadata_depth=int(depth) if depth is not None else None,
            default_debian_distribution=data.get("default_debian_distribution"),
            default_debian_component=data.get("default_debian_component"),
            default_debian_architecture=data.get("default_debian_architecture"),
        )


def clean_path(path: str) -> str:
    """Reduce a content path to a pure relative path.

    Leading root, drive, "." and ".." components are dropped, as are
    interior "." components.

    Args:
        path: Path as given by the caller

    Returns:
        Relative POSIX path string (may be empty)
    """
    parts = PurePosixPath(str(path).replace("\\", "/")).parts
    index = 0
    while index < len(parts) and (
        parts[index].strip("/") in ("", ".", "..") or parts[index].endswith(":")
    ):
        index += 1
    return "/".join(part for part in parts[index:] if part != ".")


@dataclass(frozen=True)
class ContentIdentity:
    """Address of one file in a package version."""

    subject: str
    repository: str
    package: str
    version: str
    path: str

    def __post_init__(self):
        object.__setattr__(self, "path", clean_path(self.path))

    @property
    def filename(self) -> str:
        """Base name of the file."""
        return PurePosixPath(self.path).name

    @property
    def directory_parts(self) -> tuple:
        """Components of the directory holding the file."""
        return PurePosixPath(self.path).parent.parts

    def __str__(self) -> str:
        return (
            f"Content({self.subject}:{self.repository}:{self.package}:"
            f"{self.version}:{self.path})"
        )


@dataclass
class ChecksumPair:
    """SHA-1 and SHA-256 digests of one file, as raw bytes."""

    sha1: Optional[bytes] = None
    sha256: Optional[bytes] = None

    @property
    def sha1_hex(self) -> Optional[str]:
        """Lowercase hex SHA-1, if known."""
        return self.sha1.hex() if self.sha1 is not None else None

    @property
    def sha256_hex(self) -> Optional[str]:
        """Lowercase hex SHA-256, if known."""
        return self.sha256.hex() if self.sha256 is not None else None


@dataclass(frozen=True)
class DebianTarget:
    """One (distribution, component, architecture) index to watch."""

    distribution: str
    component: str
    architecture: str

    def __str__(self) -> str:
        return f"{self.distribution}/{self.component}/{self.architecture}"
