"""Tests for host discovery and role classification."""

import httpx
import pytest
import respx

from devrelay.core.exceptions import HTTPError, SchemaValidationError
from devrelay.services.relay import DeveloperRelay, Host, HostState, RelayConfig
from devrelay.services.relay.models import hosts_with_role


def make_host(host_id: str, roles: list, state: str = "available") -> dict:
    return {"id": host_id, "displayName": host_id.upper(), "roles": roles, "state": state}


# ─────────────────────────────────────────────────────────────────────
# hosts_with_role() TESTS
# ─────────────────────────────────────────────────────────────────────

class TestHostsWithRole:

    def test_preserves_server_order(self):
        hosts = [
            Host.model_validate(make_host("c", ["APP_HOST"])),
            Host.model_validate(make_host("a", ["COMPANION_HOST"])),
            Host.model_validate(make_host("b", ["APP_HOST"])),
        ]

        assert [h.id for h in hosts_with_role(hosts, "APP_HOST")] == ["c", "b"]

    def test_unknown_role_matches_nothing(self):
        hosts = [Host.model_validate(make_host("a", ["APP_HOST"]))]
        assert hosts_with_role(hosts, "DEBUGGER") == []


# ─────────────────────────────────────────────────────────────────────
# hosts() TESTS
# ─────────────────────────────────────────────────────────────────────

class TestHosts:

    @pytest.mark.asyncio
    @respx.mock
    async def test_buckets_hosts_by_role(self, relay, hosts_url, hosts_payload):
        respx.get(hosts_url).mock(return_value=httpx.Response(200, json=hosts_payload))

        hosts = await relay.hosts()

        assert [h.id for h in hosts.app_host] == ["h1"]
        assert [h.id for h in hosts.companion_host] == ["h2"]
        assert hosts.app_host[0].display_name == "A"
        assert hosts.app_host[0].state is HostState.AVAILABLE
        assert hosts.companion_host[0].state is HostState.BUSY

    @pytest.mark.asyncio
    @respx.mock
    async def test_host_with_both_roles_in_both_buckets(self, relay, hosts_url):
        payload = {"hosts": [
            make_host("both", ["APP_HOST", "COMPANION_HOST"]),
            make_host("app", ["APP_HOST"]),
        ]}
        respx.get(hosts_url).mock(return_value=httpx.Response(200, json=payload))

        hosts = await relay.hosts()

        assert [h.id for h in hosts.app_host] == ["both", "app"]
        assert [h.id for h in hosts.companion_host] == ["both"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_hosts_without_known_roles_are_left_out(self, relay, hosts_url):
        payload = {"hosts": [make_host("other", ["SOMETHING_ELSE"]), make_host("none", [])]}
        respx.get(hosts_url).mock(return_value=httpx.Response(200, json=payload))

        hosts = await relay.hosts()

        assert hosts.app_host == []
        assert hosts.companion_host == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_authenticated_get(self, relay, hosts_url, hosts_payload):
        route = respx.get(hosts_url).mock(return_value=httpx.Response(200, json=hosts_payload))

        await relay.list_hosts()

        assert route.calls.last.request.headers["Authorization"] == "Bearer test-access-token"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unauthenticated_instance_sends_no_token(self, api, api_url, hosts_url, hosts_payload):
        route = respx.get(hosts_url).mock(return_value=httpx.Response(200, json=hosts_payload))
        relay = DeveloperRelay(RelayConfig(api_url=api_url, should_authenticate=False), api=api)

        await relay.hosts()

        assert "Authorization" not in route.calls.last.request.headers

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_state_is_schema_error(self, relay, hosts_url, hosts_payload):
        del hosts_payload["hosts"][1]["state"]
        respx.get(hosts_url).mock(return_value=httpx.Response(200, json=hosts_payload))

        with pytest.raises(SchemaValidationError) as exc_info:
            await relay.hosts()

        assert exc_info.value.model == "HostsResponse"
        assert any("state" in err["loc"] for err in exc_info.value.errors)

    @pytest.mark.asyncio
    @respx.mock
    async def test_unknown_host_field_is_schema_error(self, relay, hosts_url, hosts_payload):
        hosts_payload["hosts"][0]["address"] = "10.0.0.7"
        respx.get(hosts_url).mock(return_value=httpx.Response(200, json=hosts_payload))

        with pytest.raises(SchemaValidationError):
            await relay.hosts()

    @pytest.mark.asyncio
    @respx.mock
    async def test_unknown_state_is_schema_error(self, relay, hosts_url, hosts_payload):
        hosts_payload["hosts"][0]["state"] = "offline"
        respx.get(hosts_url).mock(return_value=httpx.Response(200, json=hosts_payload))

        with pytest.raises(SchemaValidationError):
            await relay.hosts()

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_hosts_field_is_schema_error(self, relay, hosts_url):
        respx.get(hosts_url).mock(return_value=httpx.Response(200, json={"devices": []}))

        with pytest.raises(SchemaValidationError):
            await relay.hosts()

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_status_raises_http_error(self, relay, hosts_url):
        respx.get(hosts_url).mock(return_value=httpx.Response(
            403, json={"errors": [{"errorType": "insufficient_scope", "message": "Missing scope"}]}
        ))

        with pytest.raises(HTTPError) as exc_info:
            await relay.hosts()

        assert exc_info.value.status_code == 403
