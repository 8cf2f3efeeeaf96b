"""Exceptions raised by repowatch.

Transient conditions seen while polling (content not propagated yet,
index not regenerated yet) never surface as exceptions: they are retried
until the time budget runs out, then reported as ConvergenceTimeout.
"""

import json
from typing import Optional


class RepoWatchError(Exception):
    """Base class for all repowatch errors."""


class ConvergenceTimeout(RepoWatchError):
    """Raised when the repository did not converge within the time budget."""

    def __init__(self, url: str, timeout: float):
        super().__init__(f"Timed out after {timeout:.1f}s waiting on {url}")
        self.url = url
        self.timeout = timeout


class TransportFailure(RepoWatchError):
    """Raised when a request fails at the connection or protocol level.

    The underlying httpx error is chained as __cause__.
    """

    def __init__(self, method: str, url: str):
        super().__init__(f"{method} {url} failed")
        self.method = method
        self.url = url


class UnexpectedStatus(RepoWatchError):
    """Raised when the service answers with a status we cannot interpret."""

    def __init__(self, url: str, status_code: int, body: str = ""):
        self.url = url
        self.status_code = status_code
        self.body = body
        self.message = service_message(body)
        detail = f": {self.message}" if self.message else ""
        super().__init__(f"Unexpected status {status_code} from {url}{detail}")


class RepositoryNotFound(UnexpectedStatus):
    """Raised when a repository lookup returns 404."""


class ChecksumRequired(RepoWatchError):
    """Raised when a wait needs a checksum the caller did not provide."""

    def __init__(self, algorithm: str):
        super().__init__(f"Content {algorithm} checksum must be set")
        self.algorithm = algorithm


class UnsupportedChecksumAlgorithm(RepoWatchError):
    """Raised when the RPM catalog lists a checksum type other than SHA-1."""

    def __init__(self, algorithm: str):
        super().__init__(
            f"Only SHA-1 is supported in RPM indexation check, got {algorithm!r}"
        )
        self.algorithm = algorithm


class NotIndexable(RepoWatchError):
    """Raised when waiting for indexation of a non Debian/RPM repository."""

    def __init__(self, kind: str):
        super().__init__(
            f"Only Debian and RPM repositories are indexed, not {kind}"
        )
        self.kind = kind


def service_message(body: str) -> Optional[str]:
    """Extract the "message" field of a JSON error body, if any."""
    try:
        document = json.loads(body)
    except (TypeError, ValueError):
        return None
    if isinstance(document, dict) and isinstance(document.get("message"), str):
        return document["message"]
    return None
