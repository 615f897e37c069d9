"""
Runtime API Endpoint

Builds the well-known Runtime API URLs from the host:port string the
execution environment provides.
"""

from dataclasses import dataclass

from urllib3.exceptions import LocationParseError
from urllib3.util import parse_url

from lambda_runtime_client.utils.exceptions import ConfigurationError

API_VERSION = "2018-06-01"


@dataclass(frozen=True)
class Endpoint:
    """Immutable set of Runtime API URLs for one control-plane host."""

    base_url: str
    api_version: str = API_VERSION

    @classmethod
    def from_runtime_api(cls, host: str, api_version: str = API_VERSION) -> "Endpoint":
        """
        Resolve the endpoint for a runtime API host.

        Args:
            host: host:port of the Runtime API, e.g. ``127.0.0.1:9001``
            api_version: Runtime API version path segment

        Returns:
            Endpoint rooted at ``http://{host}``

        Raises:
            ConfigurationError: If ``http://{host}`` is not a valid URL
        """
        base_url = f"http://{host or ''}"
        try:
            parsed = parse_url(base_url)
        except LocationParseError as e:
            raise ConfigurationError(
                f"Invalid runtime API address: {host!r}", details={"host": host}
            ) from e

        if (
            not parsed.host
            or any(ch.isspace() for ch in base_url)
            or parsed.auth
            or parsed.path not in (None, "", "/")
            or parsed.query is not None
            or parsed.fragment is not None
        ):
            raise ConfigurationError(
                f"Invalid runtime API address: {host!r}", details={"host": host}
            )

        return cls(base_url=base_url.rstrip("/"), api_version=api_version)

    @property
    def runtime_url(self) -> str:
        return f"{self.base_url}/{self.api_version}/runtime"

    @property
    def init_error_url(self) -> str:
        return f"{self.runtime_url}/init/error"

    @property
    def next_invocation_url(self) -> str:
        return f"{self.runtime_url}/invocation/next"

    def response_url(self, request_id: str) -> str:
        return f"{self.runtime_url}/invocation/{request_id}/response/"

    def error_url(self, request_id: str) -> str:
        return f"{self.runtime_url}/invocation/{request_id}/error/"
