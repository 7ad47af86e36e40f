"""Shared test fixtures for devrelay tests."""

import pytest

from devrelay.core.config import Settings, get_settings
from devrelay.services.api import ApiClient
from devrelay.services.relay import DeveloperRelay, RelayConfig


# ─────────────────────────────────────────────────────────────────────
# MOCK DATA
# ─────────────────────────────────────────────────────────────────────

MOCK_API_URL = "https://api.relay.test"
MOCK_ACCESS_TOKEN = "test-access-token"

MOCK_HOSTS_RESPONSE = {
    "hosts": [
        {"id": "h1", "displayName": "A", "roles": ["APP_HOST"], "state": "available"},
        {"id": "h2", "displayName": "B", "roles": ["COMPANION_HOST"], "state": "busy"},
    ]
}


class FakeStream:
    """Stands in for RelayStream; records the URL it was opened with."""

    def __init__(self, url: str):
        self.url = url


# ─────────────────────────────────────────────────────────────────────
# FIXTURES
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """get_settings() is process-cached; isolate tests that touch the env."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def api_url() -> str:
    return MOCK_API_URL


@pytest.fixture
def hosts_url(api_url) -> str:
    return f"{api_url}/1/user/-/developer-relay/hosts.json"


@pytest.fixture
def session_url(api_url):
    """URL of the negotiation endpoint for a host id."""
    def build(host_id: str) -> str:
        return f"{api_url}/1/user/-/developer-relay/hosts/{host_id}"
    return build


@pytest.fixture
def hosts_payload() -> dict:
    return {"hosts": [dict(host) for host in MOCK_HOSTS_RESPONSE["hosts"]]}


@pytest.fixture
def settings(api_url) -> Settings:
    return Settings(api_url=api_url, access_token=MOCK_ACCESS_TOKEN)


@pytest.fixture
def api(settings) -> ApiClient:
    return ApiClient(settings)


@pytest.fixture
def opened_urls() -> list:
    return []


@pytest.fixture
def fake_opener(opened_urls):
    """Stream opener that never touches the network."""
    async def opener(url: str) -> FakeStream:
        opened_urls.append(url)
        return FakeStream(url)
    return opener


@pytest.fixture
def relay(settings, api, fake_opener) -> DeveloperRelay:
    return DeveloperRelay(RelayConfig.from_settings(settings), api=api, stream_opener=fake_opener)
