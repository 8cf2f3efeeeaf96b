"""Pytest configuration and shared fixtures."""

import threading

import httpx
import pytest

from repowatch.client import Client
from repowatch.common.settings import get_settings
from repowatch.repos.base import ContentIdentity

API_BASE = "https://api.test/"
DL_BASE = "https://dl.test/"


class FakeService:
    """In-memory repository service answering by (method, URL).

    Each route holds a sequence of answers: a callable building the
    response, or an exception to raise. Answers are consumed in order
    and the last one repeats. Unknown URLs answer 404.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []
        self._lock = threading.Lock()

    def route(self, method, url, *answers):
        self.routes[(method, url)] = list(answers)

    def handler(self, request):
        with self._lock:
            self.requests.append(request)
            answers = self.routes.get((request.method, str(request.url)))
            if not answers:
                return httpx.Response(404)
            answer = answers.pop(0) if len(answers) > 1 else answers[0]

        if isinstance(answer, Exception):
            raise answer
        return answer(request)

    def urls(self, method=None):
        """URLs requested so far, optionally filtered by method."""
        with self._lock:
            return [
                str(request.url)
                for request in self.requests
                if method is None or request.method == method
            ]


def respond(status=200, content=b"", headers=None):
    """Answer building a fresh response on every call."""
    return lambda request: httpx.Response(status, content=content, headers=headers)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from REPOWATCH_* variables of the environment."""
    for name in (
        "REPOWATCH_API_BASE_URL",
        "REPOWATCH_DL_BASE_URL",
        "REPOWATCH_USERNAME",
        "REPOWATCH_API_KEY",
        "REPOWATCH_REQUEST_TIMEOUT",
        "REPOWATCH_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def service():
    """Fake repository service."""
    return FakeService()


@pytest.fixture
def respond_with():
    """Factory for route answers."""
    return respond


@pytest.fixture
def client(service):
    """Client wired to the fake service."""
    client = Client(
        api_base_url=API_BASE,
        dl_base_url=DL_BASE,
        transport=httpx.MockTransport(service.handler),
    )
    yield client
    client.close()


@pytest.fixture
def deb_identity():
    """A .deb uploaded to a Debian repository."""
    return ContentIdentity(
        "acme", "debs", "foo", "1.0", "pool/main/f/foo/foo_1.0_amd64.deb"
    )


@pytest.fixture
def rpm_identity():
    """An .rpm uploaded below el7/x86_64 in an RPM repository."""
    return ContentIdentity(
        "acme", "rpms", "foo", "1.0", "el7/x86_64/foo-1.0-1.x86_64.rpm"
    )


@pytest.fixture
def sample_config():
    """Sample configuration dictionary."""
    return {
        "client": {
            "api_base_url": API_BASE,
            "dl_base_url": DL_BASE,
            "username": "alice",
            "api_key": "secret",
            "request_timeout": 10,
        },
        "wait": {
            "availability_timeout": 5,
            "indexation_timeout": 5,
            "availability_interval": 0.01,
            "indexation_interval": 0.01,
        },
        "logging": {
            "level": "DEBUG",
        },
        "debian": {
            "distributions": ["stretch"],
            "components": ["main"],
            "architectures": ["amd64", "i386"],
        },
    }
