"""Wait for uploaded content to be served by the download mirrors.

Mirrors answer HEAD requests with the SHA-256 of the file they hold in
the X-Checksum-Sha2 header. Content is available once that checksum is
the one of the upload, or once any version of the file is served when
the caller does not know the checksum.
"""

from typing import Optional

import httpx

from ..client import Client
from ..common.config import DEFAULT_AVAILABILITY_INTERVAL
from ..common.logger import get_logger
from ..errors import TransportFailure
from ..repos.base import ChecksumPair, ContentIdentity
from ..repos.checksum import checksum_from_response
from .poller import (
    RETRY,
    CheckOutcome,
    PollRequest,
    Settled,
    is_not_yet_available,
    poll,
    unexpected_status,
)

logger = get_logger("wait.availability")


def content_url(client: Client, identity: ContentIdentity) -> httpx.URL:
    """Download URL of a content file."""
    return client.dl_url(f"{identity.subject}/{identity.repository}/{identity.path}")


def check_availability(
    url: httpx.URL,
    response: httpx.Response,
    expected_sha256: Optional[bytes],
) -> CheckOutcome:
    """Judge one HEAD response on a download URL.

    Args:
        url: Probed URL
        response: Response to the HEAD request
        expected_sha256: Digest the mirror must report, if known

    Returns:
        Settled with the reported SHA-256 (possibly None), RETRY, or a
        Settled UnexpectedStatus
    """
    if response.is_success:
        reported = checksum_from_response(response)
        if expected_sha256 is None or reported == expected_sha256:
            return Settled.ok(reported)
        logger.debug(
            f"{url} serves sha256={reported.hex() if reported else None}, "
            f"expecting {expected_sha256.hex()}"
        )
        return RETRY

    if is_not_yet_available(response):
        return RETRY

    return unexpected_status(url, response)


def wait_for_availability(
    client: Client,
    identity: ContentIdentity,
    checksum: Optional[ChecksumPair] = None,
    timeout: float = 300.0,
    interval: float = DEFAULT_AVAILABILITY_INTERVAL,
) -> ChecksumPair:
    """Wait until the download URL serves the expected content.

    Args:
        client: Repository service client
        identity: Content to wait for
        checksum: Known checksums; only the SHA-256 is compared
        timeout: Overall time budget in seconds
        interval: Delay between probes in seconds

    Returns:
        A new ChecksumPair with the caller's SHA-1 and the SHA-256 served
        by the mirror (None if the mirror did not report one)

    Raises:
        ConvergenceTimeout: If the content is not served in time
        UnexpectedStatus: If the mirror answered with an error status
        TransportFailure: If a request failed
    """
    checksum = checksum or ChecksumPair()
    expected = checksum.sha256
    url = content_url(client, identity)

    reported = poll(
        client,
        PollRequest(
            method="HEAD",
            url=url,
            check=lambda response: check_availability(url, response, expected),
            interval=interval,
            timeout=timeout,
            label=f"{identity} availability",
        ),
    )

    return ChecksumPair(sha1=checksum.sha1, sha256=reported or expected)


def content_exists(
    client: Client,
    identity: ContentIdentity,
    checksum: Optional[ChecksumPair] = None,
) -> Optional[ChecksumPair]:
    """Probe the download URL once.

    Args:
        client: Repository service client
        identity: Content to look for
        checksum: Known checksums; only the SHA-256 is compared

    Returns:
        The ChecksumPair as in wait_for_availability() if the expected
        content is served, None otherwise

    Raises:
        UnexpectedStatus: If the mirror answered with an error status
        TransportFailure: If the request failed
    """
    checksum = checksum or ChecksumPair()
    url = content_url(client, identity)
    try:
        response = client.head(url)
    except httpx.HTTPError as e:
        raise TransportFailure("HEAD", str(url)) from e

    outcome = check_availability(url, response, checksum.sha256)
    if not isinstance(outcome, Settled):
        return None

    reported = outcome.unwrap()
    return ChecksumPair(sha1=checksum.sha1, sha256=reported or checksum.sha256)
