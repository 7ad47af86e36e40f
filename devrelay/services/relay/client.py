"""
Developer Relay Client

Connection flow:
1. POST 1/user/-/developer-relay/hosts/{hostID}
2. Require a text/uri-list response, take the first non-comment line
3. Open a WebSocket to that URL and hand it to the caller

Host discovery (GET 1/user/-/developer-relay/hosts.json) is independent of
connecting; a caller that already knows the host id can skip it.
"""
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional
from urllib.parse import quote

from devrelay.core.config import Settings
from devrelay.core.exceptions import EmptyCandidateListError
from devrelay.core.logging import get_logger
from devrelay.services.api import (
    ApiClient,
    TokenProvider,
    assert_api_response_ok,
    assert_content_type,
    decode_json,
)
from .models import (
    APP_HOST_ROLE,
    COMPANION_HOST_ROLE,
    Hosts,
    HostsResponse,
    hosts_with_role,
)
from .stream import RelayStream, open_relay_stream
from .uri_list import URI_LIST_MEDIA_TYPE, first_candidate

logger = get_logger(__name__)

HOSTS_PATH = "1/user/-/developer-relay/hosts.json"
HOST_SESSION_PATH = "1/user/-/developer-relay/hosts/{host_id}"

StreamOpener = Callable[[str], Awaitable[RelayStream]]


@dataclass(frozen=True)
class RelayConfig:
    """Control plane target of a DeveloperRelay instance."""
    api_url: str
    should_authenticate: bool = True

    @classmethod
    def from_settings(cls, settings: Settings, should_authenticate: bool = True) -> "RelayConfig":
        return cls(api_url=settings.api_url, should_authenticate=should_authenticate)


class DeveloperRelay:
    """Discovers relay hosts and opens streams to them."""

    def __init__(
        self,
        config: RelayConfig,
        api: Optional[ApiClient] = None,
        stream_opener: StreamOpener = open_relay_stream,
        token_provider: Optional[TokenProvider] = None,
    ):
        """
        Initialize relay client.

        Args:
            config: API URL and authentication flag used for every call
            api: Control plane client. If omitted, the relay builds and owns one
                from config.api_url and built-in defaults; the environment is
                not consulted.
            stream_opener: Coroutine function turning a URL into an open stream
            token_provider: Bearer token source for an owned api client
        """
        self.config = config
        self._owns_api = api is None
        if api is None:
            api = ApiClient(
                Settings.model_construct(api_url=config.api_url),
                token_provider=token_provider,
            )
        self.api = api
        self._open_stream = stream_opener

    async def __aenter__(self) -> "DeveloperRelay":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the api client if this relay created it."""
        if self._owns_api:
            await self.api.aclose()

    # =========================================================================
    # Host Discovery
    # =========================================================================

    async def hosts(self) -> Hosts:
        """List the current user's hosts, bucketed by role."""
        response = await self.api.fetch(
            HOSTS_PATH,
            base_url=self.config.api_url,
            should_auth=self.config.should_authenticate,
        )
        payload = decode_json(response, HostsResponse)

        logger.debug("[Relay] Hosts listed", count=len(payload.hosts))
        return Hosts(
            app_host=hosts_with_role(payload.hosts, APP_HOST_ROLE),
            companion_host=hosts_with_role(payload.hosts, COMPANION_HOST_ROLE),
        )

    list_hosts = hosts

    # =========================================================================
    # Connection
    # =========================================================================

    async def connect(self, host_id: str) -> RelayStream:
        """Negotiate a relay URL for `host_id` and open a stream to it.

        Raises:
            HTTPError: Negotiation request was rejected
            ContentTypeError: Negotiation response is not a URI list
            EmptyCandidateListError: URI list has no candidate
            StreamOpenError: WebSocket upgrade failed
        """
        url = await self.get_connection_url(host_id)
        logger.info("[Relay] Connecting to host", host_id=host_id)
        return await self._open_stream(url)

    async def get_connection_url(self, host_id: str) -> str:
        """Ask the relay for a connection URL to `host_id`."""
        response = await self.api.fetch(
            HOST_SESSION_PATH.format(host_id=quote(host_id, safe="")),
            method="POST",
            base_url=self.config.api_url,
            should_auth=self.config.should_authenticate,
            headers={"Accept": URI_LIST_MEDIA_TYPE},
        )
        assert_api_response_ok(response)
        assert_content_type(response, URI_LIST_MEDIA_TYPE)

        url = first_candidate(response.text)
        if url is None:
            raise EmptyCandidateListError(host_id)
        return url
