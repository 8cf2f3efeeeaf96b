"""repowatch: wait for uploads to converge on a package repository service.

After a file is uploaded, the service takes a while to propagate it to
its download mirrors and, for Debian and RPM repositories, to regenerate
the repository index. repowatch polls the service until either is
observable, or a time budget runs out.
"""

from .client import Client
from .content import Content
from .errors import (
    ChecksumRequired,
    ConvergenceTimeout,
    NotIndexable,
    RepositoryNotFound,
    RepoWatchError,
    TransportFailure,
    UnexpectedStatus,
    UnsupportedChecksumAlgorithm,
)
from .repos.base import (
    ChecksumPair,
    ContentIdentity,
    DebianTarget,
    RepositoryInfo,
    RepositoryKind,
)
from .wait import content_exists, wait_for_availability, wait_for_indexation

__version__ = "0.1.0"

__all__ = [
    "Client",
    "Content",
    "ChecksumRequired",
    "ConvergenceTimeout",
    "NotIndexable",
    "RepositoryNotFound",
    "RepoWatchError",
    "TransportFailure",
    "UnexpectedStatus",
    "UnsupportedChecksumAlgorithm",
    "ChecksumPair",
    "ContentIdentity",
    "DebianTarget",
    "RepositoryInfo",
    "RepositoryKind",
    "content_exists",
    "wait_for_availability",
    "wait_for_indexation",
]
