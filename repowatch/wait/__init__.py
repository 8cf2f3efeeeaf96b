"""Convergence waits.

This module polls the repository service until an upload is served by
the download mirrors or listed in the repository index.
"""

from .poller import (
    RETRY,
    CheckOutcome,
    PollRequest,
    Retry,
    Settled,
    poll,
)
from .availability import content_exists, wait_for_availability
from .debian import wait_for_debian_indexation
from .rpm import wait_for_rpm_indexation
from .indexation import wait_for_indexation

__all__ = [
    "RETRY",
    "CheckOutcome",
    "PollRequest",
    "Retry",
    "Settled",
    "poll",
    "content_exists",
    "wait_for_availability",
    "wait_for_debian_indexation",
    "wait_for_rpm_indexation",
    "wait_for_indexation",
]
