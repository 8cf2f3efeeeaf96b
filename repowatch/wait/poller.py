"""Cancellable condition polling.

A poll runs one background worker thread which probes a URL, hands the
response to a check function and either delivers a terminal outcome or
sleeps for the retry interval. The calling thread waits for that outcome
up to the poll timeout. On timeout the worker is told to stop and is
always joined before poll() returns, so no probe is in flight once the
call is over.
"""

import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Protocol, TypeVar, Union

import httpx

from ..common.logger import get_logger
from ..errors import ConvergenceTimeout, TransportFailure, UnexpectedStatus

logger = get_logger("poller")

T = TypeVar("T")


@dataclass(frozen=True)
class Retry:
    """Probe outcome: no terminal signal yet, probe again later."""


RETRY = Retry()


@dataclass(frozen=True)
class Settled(Generic[T]):
    """Probe outcome: the poll is over, with a value or a fatal error."""

    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Settled[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, error: BaseException) -> "Settled[T]":
        return cls(error=error)

    def unwrap(self) -> Optional[T]:
        """Return the value, or raise the fatal error."""
        if self.error is not None:
            raise self.error
        return self.value


CheckOutcome = Union[Retry, Settled]


class Transport(Protocol):
    """Anything able to send a request and return a read response."""

    def request(self, method: str, url: httpx.URL) -> httpx.Response: ...


@dataclass
class PollRequest(Generic[T]):
    """One poll: what to probe, how to judge it and how long to try."""

    method: str
    url: httpx.URL
    check: Callable[[httpx.Response], CheckOutcome]
    interval: float
    timeout: float
    label: str = ""


def _probe_once(transport: Transport, request: PollRequest) -> CheckOutcome:
    try:
        response = transport.request(request.method, request.url)
    except httpx.HTTPError as e:
        failure = TransportFailure(request.method, str(request.url))
        failure.__cause__ = e
        logger.warning(f"{request.label} {request.method} {request.url}: {e}")
        return Settled.failed(failure)

    return request.check(response)


def _run_worker(
    transport: Transport,
    request: PollRequest,
    stop: threading.Event,
    results: "queue.Queue[Settled]",
) -> None:
    attempt = 0
    while True:
        attempt += 1
        try:
            outcome = _probe_once(transport, request)
        except Exception as e:
            # A failing check must still settle the poll
            logger.exception(f"{request.label} probe {attempt} raised")
            outcome = Settled.failed(e)

        if isinstance(outcome, Settled):
            logger.debug(f"{request.label} settled after {attempt} probe(s)")
            results.put(outcome)
            return

        logger.debug(f"{request.label} probe {attempt}: not converged yet")
        if stop.wait(request.interval):
            logger.debug(f"{request.label} stopped after {attempt} probe(s)")
            return


def poll(transport: Transport, request: PollRequest[T]) -> Optional[T]:
    """Probe until the check settles or the timeout elapses.

    Args:
        transport: Object used to send the probe requests
        request: What to probe and how

    Returns:
        The value the check settled with

    Raises:
        ConvergenceTimeout: If nothing settled within request.timeout
        TransportFailure: If a probe failed at the transport level
        Exception: Whatever fatal error the check settled with
    """
    stop = threading.Event()
    results: "queue.Queue[Settled]" = queue.Queue(maxsize=1)
    worker = threading.Thread(
        target=_run_worker,
        args=(transport, request, stop, results),
        name=f"repowatch-poll-{request.label or request.method}",
    )

    logger.info(
        f"{request.label} waiting up to {request.timeout:.1f}s on "
        f"{request.method} {request.url}"
    )
    started = time.monotonic()
    outcome: Optional[Settled] = None

    worker.start()
    try:
        outcome = results.get(timeout=max(request.timeout, 0.0))
    except queue.Empty:
        logger.info(f"{request.label} timed out, stopping worker")
    finally:
        stop.set()
        worker.join()

    if outcome is None:
        raise ConvergenceTimeout(str(request.url), request.timeout)

    elapsed = time.monotonic() - started
    if outcome.error is None:
        logger.info(f"{request.label} converged after {elapsed:.1f}s")
    else:
        logger.info(f"{request.label} failed after {elapsed:.1f}s: {outcome.error}")
    return outcome.unwrap()


def is_not_yet_available(response: httpx.Response) -> bool:
    """404 and 401 both mean the content has not propagated yet.

    Mirrors answer anonymous requests for content they do not hold yet
    with either status, so a genuine permission problem on private
    content is only reported once the poll times out.
    """
    return response.status_code in (
        httpx.codes.NOT_FOUND,
        httpx.codes.UNAUTHORIZED,
    )


def remaining_budget(timeout: float, started: float) -> float:
    """Seconds left out of timeout since the monotonic instant started."""
    return timeout - (time.monotonic() - started)


def unexpected_status(url: httpx.URL, response: httpx.Response) -> Settled:
    """Settle a poll with an UnexpectedStatus built from response."""
    logger.error(f"{url}: {response.status_code} {response.reason_phrase}")
    return Settled.failed(
        UnexpectedStatus(str(url), response.status_code, response.text)
    )
