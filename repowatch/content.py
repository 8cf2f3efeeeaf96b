"""Content facade tying an uploaded file to its repository.

A Content knows where a file was uploaded, the kind of repository it
went to, the checksums of the upload and, for Debian repositories, the
indexes it should appear in.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union

from .client import Client
from .common.config import (
    DEFAULT_AVAILABILITY_INTERVAL,
    DEFAULT_AVAILABILITY_TIMEOUT,
    DEFAULT_INDEXATION_INTERVAL,
    DEFAULT_INDEXATION_TIMEOUT,
)
from .common.logger import get_logger
from .repos.base import ChecksumPair, ContentIdentity, DebianTarget, RepositoryKind
from .repos.checksum import checksum_from_file
from .wait.availability import content_exists
from .wait.availability import wait_for_availability as _wait_for_availability
from .wait.indexation import wait_for_indexation as _wait_for_indexation

logger = get_logger("content")


class Content:
    """One uploaded file and what is known about it."""

    def __init__(
        self,
        client: Client,
        identity: ContentIdentity,
        kind: RepositoryKind = RepositoryKind.GENERIC,
        checksum: Optional[ChecksumPair] = None,
        debian_targets: Iterable[DebianTarget] = (),
        availability_interval: float = DEFAULT_AVAILABILITY_INTERVAL,
        indexation_interval: float = DEFAULT_INDEXATION_INTERVAL,
    ):
        self.client = client
        self.identity = identity
        self.kind = kind
        self.checksum = checksum or ChecksumPair()
        self.debian_targets: List[DebianTarget] = list(debian_targets)
        self.availability_interval = availability_interval
        self.indexation_interval = indexation_interval

    @classmethod
    def resolve(
        cls, client: Client, identity: ContentIdentity, **kwargs
    ) -> "Content":
        """Create a Content, looking the repository kind up on the service.

        Debian targets default to the repository's default distribution,
        component and architecture when all three are set.

        Raises:
            RepositoryNotFound: If the repository doesn't exist
            UnexpectedStatus: On any other error status
            TransportFailure: If the request fails
        """
        repository = client.get_repository(identity.subject, identity.repository)
        content = cls(client, identity, kind=repository.kind, **kwargs)

        if (
            content.kind is RepositoryKind.DEBIAN
            and not content.debian_targets
            and repository.default_debian_distribution
            and repository.default_debian_component
            and repository.default_debian_architecture
        ):
            content.debian_targets = [
                DebianTarget(
                    repository.default_debian_distribution,
                    repository.default_debian_component,
                    repository.default_debian_architecture,
                )
            ]
            logger.debug(f"{content}: using repository default {content.debian_targets[0]}")

        return content

    def set_checksum_from_file(self, path: Union[str, Path]) -> ChecksumPair:
        """Compute the checksums of the local copy of the upload."""
        self.checksum = checksum_from_file(path)
        return self.checksum

    def set_debian_targets(
        self,
        distributions: Iterable[str],
        components: Iterable[str],
        architectures: Iterable[str],
    ) -> List[DebianTarget]:
        """Watch every combination of the given Debian coordinates."""
        components = list(components)
        architectures = list(architectures)
        self.debian_targets = [
            DebianTarget(distribution, component, architecture)
            for distribution in distributions
            for component in components
            for architecture in architectures
        ]
        return self.debian_targets

    def exists(self) -> bool:
        """Check once whether the download mirror serves this content.

        When the SHA-256 is not known yet, it is taken from the mirror's
        answer.
        """
        found = content_exists(self.client, self.identity, self.checksum)
        if found is None:
            return False
        if self.checksum.sha256 is None:
            self.checksum.sha256 = found.sha256
        return True

    def wait_for_availability(
        self, timeout: float = DEFAULT_AVAILABILITY_TIMEOUT
    ) -> ChecksumPair:
        """Wait until the download mirror serves this content.

        The SHA-256 reported by the mirror is recorded on success only.
        """
        result = _wait_for_availability(
            self.client,
            self.identity,
            self.checksum,
            timeout=timeout,
            interval=self.availability_interval,
        )
        self.checksum.sha256 = result.sha256
        return self.checksum

    def wait_for_indexation(
        self, timeout: float = DEFAULT_INDEXATION_TIMEOUT
    ) -> None:
        """Wait until the repository index lists this content."""
        _wait_for_indexation(
            self.client,
            self.identity,
            self.kind,
            self.checksum,
            timeout,
            debian_targets=self.debian_targets,
            interval=self.indexation_interval,
        )

    def __str__(self) -> str:
        return str(self.identity)
