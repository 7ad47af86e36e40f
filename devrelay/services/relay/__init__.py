"""
Developer Relay Module

Host discovery and stream negotiation through the developer relay.

Components:
- client.py: DeveloperRelay (host listing, URL negotiation, connect)
- models.py: Host / Hosts pydantic models and role filters
- uri_list.py: text/uri-list parsing
- stream.py: RelayStream and the aiohttp WebSocket opener
- manager.py: Composition from ambient settings
"""

from .client import DeveloperRelay, RelayConfig
from .models import Host, Hosts, HostState, APP_HOST_ROLE, COMPANION_HOST_ROLE
from devrelay.core.exceptions import RelayStreamClosed, RelayStreamError

from .stream import RelayStream, open_relay_stream
from .manager import create_developer_relay

__all__ = [
    "DeveloperRelay",
    "RelayConfig",
    "Host",
    "Hosts",
    "HostState",
    "APP_HOST_ROLE",
    "COMPANION_HOST_ROLE",
    "RelayStream",
    "RelayStreamClosed",
    "RelayStreamError",
    "open_relay_stream",
    "create_developer_relay",
]
