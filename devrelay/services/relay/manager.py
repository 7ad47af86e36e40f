"""
Developer Relay Composition

Builds a DeveloperRelay from ambient settings. The environment is read here,
once; DeveloperRelay itself only ever sees an explicit RelayConfig.
"""
from typing import Optional, Tuple

from devrelay.core.config import Settings, get_settings
from devrelay.core.logging import get_logger
from devrelay.services.api import ApiClient, TokenProvider

from .client import DeveloperRelay, RelayConfig

logger = get_logger(__name__)


def create_developer_relay(
    settings: Optional[Settings] = None,
    should_authenticate: bool = True,
    token_provider: Optional[TokenProvider] = None,
) -> Tuple[DeveloperRelay, ApiClient]:
    """
    Create a relay client wired to the configured control plane.

    Args:
        settings: Explicit settings; resolved from the environment if omitted
        should_authenticate: Send bearer tokens on relay requests
        token_provider: Source of bearer tokens, see ApiClient

    Returns:
        Tuple of (relay, api client). The caller closes the api client.
    """
    settings = settings or get_settings()
    config = RelayConfig.from_settings(settings, should_authenticate=should_authenticate)
    api = ApiClient(settings, token_provider=token_provider)

    logger.debug("[Manager] Developer relay created", api_url=config.api_url,
                 should_authenticate=should_authenticate)
    return DeveloperRelay(config, api=api), api
