"""Developer relay exception hierarchy."""

from typing import Any, Dict, List, Optional


class DeveloperRelayError(Exception):
    """Base exception for all developer relay errors."""


class HTTPError(DeveloperRelayError):
    """Control plane answered with a non-success status."""

    def __init__(self, status_code: int, message: str, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {message}")


class AuthenticationError(DeveloperRelayError):
    """An authenticated request was made but no access token is available."""


class ContentTypeError(DeveloperRelayError):
    """Response declared a media type other than the one required."""

    def __init__(self, expected: str, actual: Optional[str]):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected content type {expected!r}, got {actual or 'none'!r}"
        )


class SchemaValidationError(DeveloperRelayError):
    """Response payload does not match the expected shape."""

    def __init__(self, model: str, errors: List[Dict[str, Any]]):
        self.model = model
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or '<root>'}: {err.get('msg')}"
            for err in errors
        )
        super().__init__(f"Invalid {model} payload: {details}")


class EmptyCandidateListError(DeveloperRelayError):
    """URI list contained no connection candidate after dropping comments."""

    def __init__(self, host_id: str):
        self.host_id = host_id
        super().__init__(f"Relay returned no connection URL for host {host_id!r}")


class StreamOpenError(DeveloperRelayError):
    """WebSocket upgrade to the negotiated URL failed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Failed to open relay stream to {url}: {reason}")


class RelayStreamClosed(DeveloperRelayError):
    """Raised by RelayStream.receive() once the peer or the caller has closed the stream."""


class RelayStreamError(RelayStreamClosed):
    """The stream ended because of a transport error rather than a close handshake."""
