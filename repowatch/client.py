"""HTTP client for the repository service.

Wraps an httpx.Client with the service's two base URLs (API and
download mirrors) and optional basic authentication. It is the transport
used by every convergence wait.
"""

from typing import Optional

import httpx

from .common.config import ClientConfig
from .common.logger import get_logger
from .common.settings import get_settings
from .errors import RepositoryNotFound, TransportFailure, UnexpectedStatus
from .repos.base import RepositoryInfo

logger = get_logger("client")


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


class Client:
    """Client for the repository service API and download mirrors.

    The underlying httpx.Client is thread-safe, so one Client can be
    shared by concurrent polls.
    """

    def __init__(
        self,
        api_base_url: Optional[str] = None,
        dl_base_url: Optional[str] = None,
        username: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_base_url: Base URL of the REST API
            dl_base_url: Base URL of the download mirrors
            username: Username for basic authentication (anonymous if None)
            api_key: API key used as the basic authentication password
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        settings = get_settings()
        self.api_base_url = httpx.URL(
            _with_trailing_slash(api_base_url or settings.api_base_url)
        )
        self.dl_base_url = httpx.URL(
            _with_trailing_slash(dl_base_url or settings.dl_base_url)
        )
        self.username = username

        auth = None
        if username:
            auth = httpx.BasicAuth(username, api_key or "")

        self._http = httpx.Client(
            auth=auth,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "Client":
        """Create a client from a ClientConfig."""
        return cls(
            api_base_url=config.api_base_url,
            dl_base_url=config.dl_base_url,
            username=config.username,
            api_key=config.api_key,
            timeout=config.request_timeout,
            transport=transport,
        )

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close pooled connections."""
        self._http.close()

    def api_url(self, path: str) -> httpx.URL:
        """Build a URL below the API base URL."""
        return self.api_base_url.join(path.lstrip("/"))

    def dl_url(self, path: str) -> httpx.URL:
        """Build a URL below the download base URL."""
        return self.dl_base_url.join(path.lstrip("/"))

    def request(self, method: str, url: httpx.URL) -> httpx.Response:
        """Send a request and read the whole response.

        Raises:
            httpx.HTTPError: On connection or protocol failure
        """
        logger.debug(f"{method} {url}")
        return self._http.request(method, url)

    def head(self, url: httpx.URL) -> httpx.Response:
        return self.request("HEAD", url)

    def get(self, url: httpx.URL) -> httpx.Response:
        return self.request("GET", url)

    def get_repository(self, subject: str, name: str) -> RepositoryInfo:
        """Query the attributes of a repository.

        Args:
            subject: User or organization owning the repository
            name: Repository name

        Returns:
            RepositoryInfo with the reported attributes

        Raises:
            RepositoryNotFound: If the repository doesn't exist
            UnexpectedStatus: On any other error status, or a 200 answer
                that is not a repository document of a known type
            TransportFailure: If the request fails
        """
        url = self.api_url(f"repos/{subject}/{name}")
        try:
            response = self.get(url)
        except httpx.HTTPError as e:
            raise TransportFailure("GET", str(url)) from e

        if response.status_code == httpx.codes.OK:
            try:
                info = RepositoryInfo.from_dict(response.json())
            except (ValueError, TypeError, AttributeError) as e:
                logger.error(f"GetRepository({subject}/{name}): unreadable answer: {e}")
                raise UnexpectedStatus(
                    str(url), response.status_code, response.text
                ) from e
            logger.debug(f"Repository {subject}/{name}: {info.kind.value}")
            return info

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.info(f"Repository {subject}/{name} not found")
            raise RepositoryNotFound(str(url), response.status_code, response.text)

        logger.error(
            f"GetRepository({subject}/{name}): {response.status_code} "
            f"{response.reason_phrase}"
        )
        raise UnexpectedStatus(str(url), response.status_code, response.text)
