"""Tests for the condition poller."""

import threading
import time

import httpx
import pytest

from repowatch.errors import ConvergenceTimeout, TransportFailure, UnexpectedStatus
from repowatch.wait.poller import (
    RETRY,
    PollRequest,
    Retry,
    Settled,
    is_not_yet_available,
    poll,
    remaining_budget,
    unexpected_status,
)

URL = httpx.URL("https://dl.test/acme/files/foo.tar.gz")


class ScriptedTransport:
    """Transport answering from a script; the last answer repeats."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = 0
        self._lock = threading.Lock()

    def request(self, method, url):
        with self._lock:
            self.calls += 1
            answer = self.answers[min(self.calls, len(self.answers)) - 1]
        if isinstance(answer, Exception):
            raise answer
        return answer


def settle_on_success(response):
    if response.is_success:
        return Settled.ok(response.status_code)
    return RETRY


def make_request(check=settle_on_success, timeout=2.0, interval=0.001, label="test"):
    return PollRequest(
        method="HEAD",
        url=URL,
        check=check,
        interval=interval,
        timeout=timeout,
        label=label,
    )


def poll_threads(label):
    return [
        thread
        for thread in threading.enumerate()
        if thread.name == f"repowatch-poll-{label}"
    ]


class TestPollOutcomes:
    """Tests for poll() terminal outcomes."""

    def test_settles_on_first_probe(self):
        """Test immediate success."""
        transport = ScriptedTransport(httpx.Response(200))

        assert poll(transport, make_request()) == 200
        assert transport.calls == 1

    def test_retries_until_settled(self):
        """Test retry outcomes lead to further probes."""
        transport = ScriptedTransport(
            httpx.Response(404), httpx.Response(404), httpx.Response(200)
        )

        assert poll(transport, make_request()) == 200
        assert transport.calls == 3

    def test_settled_failure_is_raised(self):
        """Test a fatal outcome is raised by poll()."""
        transport = ScriptedTransport(httpx.Response(500))

        def check(response):
            return unexpected_status(URL, response)

        with pytest.raises(UnexpectedStatus) as exc_info:
            poll(transport, make_request(check=check))

        assert exc_info.value.status_code == 500
        assert transport.calls == 1

    def test_transport_error(self):
        """Test transport errors settle the poll."""
        cause = httpx.ConnectError("connection refused")
        transport = ScriptedTransport(cause)

        with pytest.raises(TransportFailure) as exc_info:
            poll(transport, make_request())

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.method == "HEAD"
        assert transport.calls == 1

    def test_check_raising(self):
        """Test an exception raised by the check settles the poll."""
        transport = ScriptedTransport(httpx.Response(200))

        def check(response):
            raise RuntimeError("broken check")

        with pytest.raises(RuntimeError, match="broken check"):
            poll(transport, make_request(check=check))

        assert transport.calls == 1


class TestPollTimeout:
    """Tests for poll() timeouts."""

    def test_timeout(self):
        """Test a never converging poll times out."""
        transport = ScriptedTransport(httpx.Response(404))

        with pytest.raises(ConvergenceTimeout) as exc_info:
            poll(transport, make_request(timeout=0.05, interval=0.01))

        assert exc_info.value.url == str(URL)
        assert exc_info.value.timeout == 0.05

    def test_non_positive_timeout(self):
        """Test zero and negative budgets time out."""
        transport = ScriptedTransport(httpx.Response(404))

        with pytest.raises(ConvergenceTimeout):
            poll(transport, make_request(timeout=0))
        with pytest.raises(ConvergenceTimeout):
            poll(transport, make_request(timeout=-1))

    def test_no_probe_after_timeout(self):
        """Test the worker is stopped before poll() returns."""
        transport = ScriptedTransport(httpx.Response(404))

        with pytest.raises(ConvergenceTimeout):
            poll(transport, make_request(timeout=0.05, interval=0.005))

        calls = transport.calls
        time.sleep(0.05)
        assert transport.calls == calls

    def test_long_interval_does_not_delay_timeout(self):
        """Test the worker's sleep is interrupted on timeout."""
        transport = ScriptedTransport(httpx.Response(404))
        started = time.monotonic()

        with pytest.raises(ConvergenceTimeout):
            poll(transport, make_request(timeout=0.05, interval=30))

        assert time.monotonic() - started < 5


class TestWorkerLifecycle:
    """Tests for worker thread joining."""

    def test_worker_joined_on_success(self):
        """Test no worker outlives a successful poll."""
        poll(ScriptedTransport(httpx.Response(200)), make_request(label="joined-ok"))

        assert poll_threads("joined-ok") == []

    def test_worker_joined_on_timeout(self):
        """Test no worker outlives a timed out poll."""
        with pytest.raises(ConvergenceTimeout):
            poll(
                ScriptedTransport(httpx.Response(404)),
                make_request(timeout=0.02, label="joined-timeout"),
            )

        assert poll_threads("joined-timeout") == []

    def test_concurrent_polls(self):
        """Test independent polls do not interfere."""
        results = {}

        def run(name, answers):
            try:
                results[name] = poll(ScriptedTransport(*answers), make_request(label=name))
            except ConvergenceTimeout:
                results[name] = "timeout"

        threads = [
            threading.Thread(target=run, args=("a", [httpx.Response(200)])),
            threading.Thread(target=run, args=("b", [httpx.Response(404), httpx.Response(204)])),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == {"a": 200, "b": 204}


class TestHelpers:
    """Tests for poller helpers."""

    @pytest.mark.parametrize("status", [401, 404])
    def test_not_yet_available(self, status):
        """Test statuses meaning not propagated yet."""
        assert is_not_yet_available(httpx.Response(status))

    @pytest.mark.parametrize("status", [200, 403, 500])
    def test_available_or_error(self, status):
        """Test other statuses."""
        assert not is_not_yet_available(httpx.Response(status))

    def test_remaining_budget(self):
        """Test the budget shrinks with time."""
        started = time.monotonic() - 1.0

        assert remaining_budget(10.0, started) <= 9.0

    def test_settled_unwrap(self):
        """Test Settled values and errors."""
        assert Settled.ok("value").unwrap() == "value"
        assert Settled.ok().unwrap() is None
        with pytest.raises(KeyError):
            Settled.failed(KeyError("x")).unwrap()

    def test_retry_singleton(self):
        """Test RETRY is a Retry outcome."""
        assert isinstance(RETRY, Retry)
        assert not isinstance(RETRY, Settled)
