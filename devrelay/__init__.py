"""
Developer Relay client.

Discovers hosts registered with the developer relay and negotiates a
WebSocket stream to one of them without knowing the host's address.

    from devrelay import create_developer_relay

    relay, api = create_developer_relay()
    async with api:
        hosts = await relay.hosts()
        stream = await relay.connect(hosts.app_host[0].id)
"""

from devrelay.version import __version__
from devrelay.core.exceptions import (
    DeveloperRelayError,
    HTTPError,
    AuthenticationError,
    ContentTypeError,
    SchemaValidationError,
    EmptyCandidateListError,
    StreamOpenError,
    RelayStreamClosed,
    RelayStreamError,
)
from devrelay.services.relay import (
    DeveloperRelay,
    RelayConfig,
    RelayStream,
    Host,
    Hosts,
    HostState,
    create_developer_relay,
    open_relay_stream,
)

__all__ = [
    "__version__",
    "DeveloperRelay",
    "RelayConfig",
    "RelayStream",
    "Host",
    "Hosts",
    "HostState",
    "create_developer_relay",
    "open_relay_stream",
    "DeveloperRelayError",
    "HTTPError",
    "AuthenticationError",
    "ContentTypeError",
    "SchemaValidationError",
    "EmptyCandidateListError",
    "StreamOpenError",
    "RelayStreamClosed",
    "RelayStreamError",
]
