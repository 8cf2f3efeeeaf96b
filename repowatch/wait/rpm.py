"""Wait for an .rpm to be listed in YUM repository metadata.

Each probe fetches repodata/repomd.xml, follows it to the primary
catalog and looks the uploaded file up by its canonical file name.
While the service regenerates the metadata, the manifest and the
catalog it points to may be missing, stale or briefly inconsistent, so
every such condition is retried rather than reported.
"""

from typing import Optional

import httpx

from ..client import Client
from ..common.config import DEFAULT_INDEXATION_INTERVAL
from ..common.logger import get_logger
from ..errors import ChecksumRequired, UnsupportedChecksumAlgorithm
from ..formats.base import IndexParseError
from ..formats.rpm import (
    REPOMD_PATH,
    SHA1_CHECKSUM_TYPE,
    find_package,
    find_primary_href,
    parse_primary,
    parse_repomd,
)
from ..repos.base import ContentIdentity
from .poller import (
    RETRY,
    CheckOutcome,
    PollRequest,
    Settled,
    is_not_yet_available,
    poll,
    unexpected_status,
)

logger = get_logger("wait.rpm")


def metadata_root_url(
    client: Client, identity: ContentIdentity, yum_metadata_depth: int
) -> httpx.URL:
    """URL of the directory holding repodata/ for this content.

    With a positive depth, metadata is generated that many directories
    below the repository root, on the path leading to the content.

    Args:
        client: Repository service client
        identity: Uploaded content
        yum_metadata_depth: Repository's YUM metadata depth

    Returns:
        Directory URL, with a trailing slash
    """
    root = f"{identity.subject}/{identity.repository}/"
    if yum_metadata_depth > 0:
        parts = identity.directory_parts[:yum_metadata_depth]
        if parts:
            root += "/".join(parts) + "/"
    return client.dl_url(root)


class PrimaryCatalogCheck:
    """Check function following repomd.xml to the primary catalog."""

    def __init__(
        self,
        client: Client,
        identity: ContentIdentity,
        metadata_root: httpx.URL,
        sha1: bytes,
    ):
        self.client = client
        self.identity = identity
        self.metadata_root = metadata_root
        self.repomd_url = metadata_root.join(REPOMD_PATH)
        self.filename = identity.filename
        self.sha1_hex = sha1.hex()

    def __call__(self, response: httpx.Response) -> CheckOutcome:
        if is_not_yet_available(response):
            return RETRY
        if not response.is_success:
            return unexpected_status(self.repomd_url, response)

        try:
            entries = parse_repomd(response.content)
        except IndexParseError as e:
            logger.debug(f"{self.identity} indexation: {e}")
            return RETRY

        href = find_primary_href(entries)
        if href is None:
            logger.debug(f"{self.identity} indexation: no primary entry in repomd.xml")
            return RETRY

        return self.check_primary(self.metadata_root.join(href))

    def check_primary(self, primary_url: httpx.URL) -> CheckOutcome:
        """Look the uploaded file up in the primary catalog."""
        logger.debug(f"{self.identity} indexation: primary catalog {primary_url}")
        try:
            response = self.client.get(primary_url)
        except httpx.HTTPError as e:
            logger.debug(f"{self.identity} indexation: {primary_url}: {e}")
            return RETRY

        if not response.is_success:
            logger.debug(
                f"{self.identity} indexation: {primary_url}: {response.status_code}"
            )
            return RETRY

        try:
            packages = parse_primary(response.content)
        except IndexParseError as e:
            logger.debug(f"{self.identity} indexation: {e}")
            return RETRY

        package = find_package(packages, self.filename)
        if package is None:
            return RETRY

        logger.debug(
            f"{self.identity} indexation: {self.filename} listed with "
            f"{package.checksum_type}/{package.checksum}"
        )
        if package.checksum_type != SHA1_CHECKSUM_TYPE:
            return Settled.failed(UnsupportedChecksumAlgorithm(package.checksum_type))

        if package.checksum.lower() == self.sha1_hex:
            return Settled.ok()

        # Stale entry from a previous upload of the same file name
        return RETRY


def wait_for_rpm_indexation(
    client: Client,
    identity: ContentIdentity,
    yum_metadata_depth: int,
    sha1: Optional[bytes],
    timeout: float,
    interval: float = DEFAULT_INDEXATION_INTERVAL,
) -> None:
    """Wait until the primary catalog lists the uploaded .rpm.

    Args:
        client: Repository service client
        identity: Uploaded content
        yum_metadata_depth: Repository's YUM metadata depth (0 for root)
        sha1: SHA-1 digest of the uploaded .rpm
        timeout: Time budget in seconds
        interval: Delay between probes in seconds

    Raises:
        ChecksumRequired: If sha1 is None (before any request)
        ConvergenceTimeout: If the catalog does not list the file in time
        UnsupportedChecksumAlgorithm: If the catalog uses another digest
        UnexpectedStatus: If repomd.xml is answered with an error status
        TransportFailure: If fetching repomd.xml failed
    """
    if sha1 is None:
        raise ChecksumRequired("SHA-1")

    check = PrimaryCatalogCheck(
        client, identity, metadata_root_url(client, identity, yum_metadata_depth), sha1
    )

    poll(
        client,
        PollRequest(
            method="GET",
            url=check.repomd_url,
            check=check,
            interval=interval,
            timeout=timeout,
            label=f"{identity} rpm",
        ),
    )
