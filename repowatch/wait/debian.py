"""Wait for a .deb to be listed in a Debian Packages index."""

from typing import Optional

import httpx

from ..client import Client
from ..common.config import DEFAULT_INDEXATION_INTERVAL
from ..common.logger import get_logger
from ..errors import ChecksumRequired
from ..formats.deb import checksum_line, packages_index_lists, packages_index_path
from ..repos.base import ContentIdentity, DebianTarget
from .poller import (
    RETRY,
    CheckOutcome,
    PollRequest,
    Settled,
    is_not_yet_available,
    poll,
    unexpected_status,
)

logger = get_logger("wait.debian")


def packages_index_url(
    client: Client, identity: ContentIdentity, target: DebianTarget
) -> httpx.URL:
    """Download URL of the Packages file for one target."""
    return client.dl_url(
        f"{identity.subject}/{identity.repository}/"
        + packages_index_path(target.distribution, target.component, target.architecture)
    )


def check_packages_index(
    url: httpx.URL, response: httpx.Response, sha256: bytes
) -> CheckOutcome:
    """Judge one GET response on a Packages file."""
    if response.is_success:
        if packages_index_lists(response.text, sha256):
            return Settled.ok()
        return RETRY

    if is_not_yet_available(response):
        return RETRY

    return unexpected_status(url, response)


def wait_for_debian_indexation(
    client: Client,
    identity: ContentIdentity,
    target: DebianTarget,
    sha256: Optional[bytes],
    timeout: float,
    interval: float = DEFAULT_INDEXATION_INTERVAL,
) -> None:
    """Wait until one Packages file lists the uploaded .deb.

    Args:
        client: Repository service client
        identity: Uploaded content
        target: Distribution, component and architecture to check
        sha256: SHA-256 digest of the uploaded .deb
        timeout: Time budget in seconds
        interval: Delay between probes in seconds

    Raises:
        ChecksumRequired: If sha256 is None (before any request)
        ConvergenceTimeout: If the index does not list the file in time
        UnexpectedStatus: If the mirror answered with an error status
        TransportFailure: If a request failed
    """
    if sha256 is None:
        raise ChecksumRequired("SHA-256")

    url = packages_index_url(client, identity, target)
    logger.debug(f"{identity} indexation: looking for {checksum_line(sha256)!r} in {url}")

    poll(
        client,
        PollRequest(
            method="GET",
            url=url,
            check=lambda response: check_packages_index(url, response, sha256),
            interval=interval,
            timeout=timeout,
            label=f"{identity} debian {target}",
        ),
    )
