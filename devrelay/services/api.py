"""
Control Plane API Access

Thin layer over a shared httpx.AsyncClient. Request logging happens in HTTPX
event hooks, response checks are plain functions composed by the caller.

Usage:
    async with ApiClient(settings) as api:
        response = await api.fetch("1/user/-/developer-relay/hosts.json")
        payload = decode_json(response, HostsResponse)
"""
import inspect
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar, Union
import httpx
from pydantic import BaseModel, ValidationError

from devrelay.core.config import Settings
from devrelay.core.exceptions import (
    AuthenticationError,
    ContentTypeError,
    HTTPError,
    SchemaValidationError,
)
from devrelay.core.logging import get_logger, log_api_call
from devrelay.version import __version__

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

TokenProvider = Callable[[], Union[str, None, Awaitable[Optional[str]]]]


# ============================================================================
# HTTPX Event Hooks
# ============================================================================

async def _on_request(request: httpx.Request):
    logger.debug("[API] Request", method=request.method, url=str(request.url))


async def _on_response(response: httpx.Response):
    log_api_call(
        logger,
        method=response.request.method,
        url=str(response.request.url),
        status_code=response.status_code,
    )


def create_http_client(settings: Settings, **kwargs) -> httpx.AsyncClient:
    """
    Create an httpx.AsyncClient with logging hooks and default headers.

    Args:
        settings: Supplies the request timeout
        **kwargs: Additional arguments passed to httpx.AsyncClient
    """
    headers = {"User-Agent": f"devrelay/{__version__}"}
    headers.update(kwargs.pop("headers", {}))
    return httpx.AsyncClient(
        timeout=settings.http_timeout,
        headers=headers,
        event_hooks={"request": [_on_request], "response": [_on_response]},
        **kwargs
    )


def join_url(base_url: str, path: str) -> str:
    """Join an API base URL and a relative endpoint path."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


# ============================================================================
# API Client
# ============================================================================

class ApiClient:
    """Authenticated access to the relay control plane."""

    def __init__(
        self,
        settings: Settings,
        token_provider: Optional[TokenProvider] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            settings: Default API URL, static access token and timeout
            token_provider: Callable returning a bearer token (sync or async).
                Takes precedence over settings.access_token.
            client: Pre-built httpx client. Not closed by aclose().
        """
        self.settings = settings
        self.token_provider = token_provider
        self._owns_client = client is None
        self._client = client or create_http_client(settings)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def _access_token(self) -> str:
        token = None
        if self.token_provider is not None:
            token = self.token_provider()
            if inspect.isawaitable(token):
                token = await token
        if not token:
            token = self.settings.access_token
        if not token:
            raise AuthenticationError(
                "No access token available; set DEVRELAY_ACCESS_TOKEN or pass a token_provider"
            )
        return token

    async def fetch(
        self,
        path: str,
        *,
        method: str = "GET",
        base_url: Optional[str] = None,
        should_auth: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send a request to the control plane.

        The response is returned whatever its status; callers decide whether to
        assert_api_response_ok. Transport errors propagate as httpx exceptions.

        Args:
            path: Endpoint path relative to the API base URL
            method: HTTP method
            base_url: Overrides settings.api_url
            should_auth: Attach a bearer token
            **kwargs: Passed through to httpx.AsyncClient.request
        """
        url = join_url(base_url or self.settings.api_url, path)
        headers = dict(kwargs.pop("headers", None) or {})
        headers.setdefault("Accept", "application/json")
        if should_auth:
            headers["Authorization"] = f"Bearer {await self._access_token()}"

        return await self._client.request(method, url, headers=headers, **kwargs)


# ============================================================================
# Response Checks
# ============================================================================

def _error_message(response: httpx.Response) -> str:
    """Pull a readable message out of a Fitbit-style error body."""
    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase or "Request failed"

    if isinstance(payload, dict):
        errors = payload.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            message = errors[0].get("message")
            if message:
                return str(message)
        if payload.get("message"):
            return str(payload["message"])
    return response.reason_phrase or "Request failed"


def assert_api_response_ok(response: httpx.Response) -> httpx.Response:
    """Raise HTTPError unless the response status is 2xx."""
    if response.is_success:
        return response
    raise HTTPError(response.status_code, _error_message(response), body=response.text)


def media_type(content_type: Optional[str]) -> Optional[str]:
    """Media type of a Content-Type header value, without parameters."""
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower() or None


def assert_content_type(response: httpx.Response, expected: str) -> httpx.Response:
    """Raise ContentTypeError unless the declared media type is `expected`.

    Only the header is inspected, the body is left unread.
    """
    declared = response.headers.get("content-type")
    if media_type(declared) != expected.lower():
        raise ContentTypeError(expected, declared)
    return response


def decode_json(response: httpx.Response, model: Type[ModelT]) -> ModelT:
    """Assert the response is OK and validate its JSON body against `model`."""
    assert_api_response_ok(response)
    try:
        return model.model_validate_json(response.content)
    except ValidationError as e:
        raise SchemaValidationError(model.__name__, e.errors(include_url=False)) from e
