"""Wait for uploaded content to appear in its repository's index.

Only Debian and RPM repositories are indexed. Debian content is checked
in every requested (distribution, component, architecture) index, one
after the other, within a single shared time budget.
"""

import time
from typing import Iterable, Optional

from ..client import Client
from ..common.config import DEFAULT_INDEXATION_INTERVAL
from ..common.logger import get_logger
from ..errors import ChecksumRequired, ConvergenceTimeout, NotIndexable
from ..repos.base import ChecksumPair, ContentIdentity, DebianTarget, RepositoryKind
from .debian import packages_index_url, wait_for_debian_indexation
from .poller import remaining_budget
from .rpm import wait_for_rpm_indexation

logger = get_logger("wait.indexation")


def wait_for_indexation(
    client: Client,
    identity: ContentIdentity,
    kind: RepositoryKind,
    checksum: Optional[ChecksumPair],
    timeout: float,
    debian_targets: Iterable[DebianTarget] = (),
    interval: float = DEFAULT_INDEXATION_INTERVAL,
) -> None:
    """Wait until the repository index lists the uploaded content.

    Args:
        client: Repository service client
        identity: Uploaded content
        kind: Kind of the repository holding the content
        checksum: Checksums of the upload (SHA-256 for Debian, SHA-1 for RPM)
        timeout: Overall time budget in seconds
        debian_targets: Debian indexes to check
        interval: Delay between probes in seconds

    Raises:
        NotIndexable: If kind has no index (before any request)
        ChecksumRequired: If the needed checksum is missing (before any request)
        ConvergenceTimeout: If the indexes do not converge in time
        UnsupportedChecksumAlgorithm: If the RPM catalog uses another digest
        UnexpectedStatus: If the service answered with an error status
        TransportFailure: If a request failed
    """
    if not kind.is_indexed:
        raise NotIndexable(kind.value)

    checksum = checksum or ChecksumPair()
    started = time.monotonic()

    if kind is RepositoryKind.DEBIAN:
        if checksum.sha256 is None:
            raise ChecksumRequired("SHA-256")

        targets = list(debian_targets)
        if not targets:
            logger.warning(f"{identity}: no Debian distribution/component/architecture to check")

        for target in targets:
            remaining = remaining_budget(timeout, started)
            if remaining <= 0:
                raise ConvergenceTimeout(
                    str(packages_index_url(client, identity, target)), timeout
                )
            wait_for_debian_indexation(
                client, identity, target, checksum.sha256, remaining, interval
            )

    elif kind is RepositoryKind.RPM:
        if checksum.sha1 is None:
            raise ChecksumRequired("SHA-1")

        repository = client.get_repository(identity.subject, identity.repository)
        depth = repository.yum_metadata_depth or 0
        wait_for_rpm_indexation(
            client,
            identity,
            depth,
            checksum.sha1,
            remaining_budget(timeout, started),
            interval,
        )

    else:
        raise AssertionError(f"Indexed repository kind without oracle: {kind}")

    logger.info(f"{identity} indexed after {time.monotonic() - started:.1f}s")
