"""
Relay Stream

Upgrades a negotiated relay URL to a WebSocket and hands the open connection
to the caller. Messages travel whole: dicts and lists as JSON text frames,
str as text frames, bytes as binary frames.

The stream is not supervised after it is returned: no keepalive beyond
aiohttp's autoping, no reconnect.
"""
import asyncio
import json
from typing import Any, Optional, Union
import aiohttp

from devrelay.core.exceptions import RelayStreamClosed, RelayStreamError, StreamOpenError
from devrelay.core.logging import get_logger

logger = get_logger(__name__)

Message = Union[str, bytes]


class RelayStream:
    """Open WebSocket to a relay host, owned by the caller."""

    def __init__(self, url: str, session: aiohttp.ClientSession,
                 ws: aiohttp.ClientWebSocketResponse):
        self.url = url
        self._session = session
        self._ws = ws

    @property
    def closed(self) -> bool:
        return self._ws.closed

    @property
    def close_code(self) -> Optional[int]:
        return self._ws.close_code

    async def send(self, message: Any) -> None:
        """Send one message; bytes go binary, str as text, anything else as JSON."""
        if isinstance(message, (bytes, bytearray, memoryview)):
            await self._ws.send_bytes(bytes(message))
        elif isinstance(message, str):
            await self._ws.send_str(message)
        else:
            await self._ws.send_json(message)

    async def receive(self) -> Message:
        """Wait for the next data message.

        Raises:
            RelayStreamClosed: The connection closed
            RelayStreamError: The connection failed (a RelayStreamClosed subclass)
        """
        msg = await self._ws.receive()

        if msg.type == aiohttp.WSMsgType.TEXT:
            return msg.data
        if msg.type == aiohttp.WSMsgType.BINARY:
            return msg.data
        if msg.type == aiohttp.WSMsgType.ERROR:
            raise RelayStreamError(f"WebSocket error: {self._ws.exception()}")
        raise RelayStreamClosed(f"WebSocket closed (code {self._ws.close_code})")

    async def receive_json(self) -> Any:
        """Wait for the next message and decode it as JSON."""
        return json.loads(await self.receive())

    def __aiter__(self):
        return self

    async def __anext__(self) -> Message:
        """Iteration stops on a clean close; transport errors propagate."""
        try:
            return await self.receive()
        except RelayStreamError:
            raise
        except RelayStreamClosed:
            raise StopAsyncIteration

    async def close(self) -> None:
        """Close the socket, then the session that owns it."""
        if not self._ws.closed:
            await self._ws.close()
        if not self._session.closed:
            await self._session.close()
        logger.debug("[Relay] Stream closed", url=self.url)

    async def __aenter__(self) -> "RelayStream":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


async def open_relay_stream(url: str) -> RelayStream:
    """
    Open a WebSocket to a negotiated relay URL.

    Returns once the upgrade handshake succeeds. Any connection-level failure
    raises StreamOpenError with the transport error as its cause; nothing is
    retried. Timeouts are aiohttp's defaults.

    Args:
        url: ws:// or wss:// URL obtained from URL negotiation
    """
    logger.debug("[Relay] Opening stream", url=url)
    session = aiohttp.ClientSession()
    try:
        ws = await session.ws_connect(url)
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        await session.close()
        raise StreamOpenError(url, str(e) or type(e).__name__) from e
    except BaseException:
        await session.close()
        raise

    logger.info("[Relay] Stream open", url=url)
    return RelayStream(url, session, ws)
