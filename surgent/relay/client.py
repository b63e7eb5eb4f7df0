"""Relay client: one correlated request/response round trip per connection."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import websockets
from websockets.exceptions import WebSocketException

from ..config import DEFAULT_RELAY_TIMEOUT, RelayConfig
from ..errors import RelayTransportError
from ..models import CallResult, CallStatus, RelayRequest, RelayResponse
from .correlator import Correlator

log = logging.getLogger(__name__)

DEFAULT_ROLE = "controller"

TIMEOUT_MESSAGE = "Telegram request timeout"
TRANSPORT_MESSAGE = "WebSocket error"

_WS_SCHEMES = {"http": "ws", "https": "wss"}


def build_relay_url(base_url: str, *, role: str = DEFAULT_ROLE, token: str | None = None) -> str:
    """Append role/authToken query parameters and map http(s) to ws(s).

    http://localhost:5050/ws/telegram-remote
        -> ws://localhost:5050/ws/telegram-remote?role=controller&authToken=...

    ``authToken`` is left out entirely when no token is configured.
    """
    parts = urlsplit(base_url)
    scheme = _WS_SCHEMES.get(parts.scheme, parts.scheme)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.append(("role", role))
    if token:
        query.append(("authToken", token))
    return urlunsplit((scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


class RelayClient:
    """Sends one request per call to the messaging relay and waits for its answer.

    Every call opens its own connection, sends a single frame once the
    opening handshake completes, and closes the connection when the call
    reaches a terminal state: matched response, deadline, or transport
    failure.  Errors never escape ``call``; they come back as a CallResult.
    """

    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        role: str = DEFAULT_ROLE,
        timeout: float = DEFAULT_RELAY_TIMEOUT,
        connect: Callable[..., Any] | None = None,
    ) -> None:
        self.url = build_relay_url(url, role=role, token=token)
        self.timeout = timeout
        self._connect = connect or websockets.connect

    @classmethod
    def from_config(cls, config: RelayConfig) -> RelayClient:
        return cls(config.url, token=config.token, timeout=config.timeout)

    async def call(self, method: str, params: dict[str, Any] | None = None) -> CallResult:
        request = RelayRequest.create(method, params)
        correlator = Correlator()
        pending = correlator.register(request.id)
        opened: list[Any] = []

        exchange = asyncio.ensure_future(self._exchange(request, correlator, pending, opened))
        try:
            done, _ = await asyncio.wait({exchange}, timeout=self.timeout)
        finally:
            if not exchange.done():
                correlator.discard(request.id)
                await self._abandon(exchange, opened)

        if not done:
            log.warning("Relay call %s (%s) timed out after %ss", method, request.id, self.timeout)
            return CallResult(request.id, CallStatus.TIMEOUT, error=TIMEOUT_MESSAGE)

        try:
            response = exchange.result()
        except (RelayTransportError, OSError, WebSocketException) as exc:
            # Includes OS-level connect timeouts: the peer was unreachable, not silent.
            correlator.discard(request.id)
            log.warning("Relay call %s (%s) failed: %s", method, request.id, exc)
            return CallResult(request.id, CallStatus.TRANSPORT_ERROR, error=TRANSPORT_MESSAGE)

        log.debug("Relay call %s (%s) resolved: success=%s", method, request.id, response.success)
        return CallResult.from_response(response)

    async def _exchange(
        self,
        request: RelayRequest,
        correlator: Correlator,
        pending: asyncio.Future[RelayResponse],
        opened: list[Any],
    ) -> RelayResponse:
        # The deadline in call() bounds the whole exchange, including connect.
        async with self._connect(self.url, open_timeout=None) as ws:
            opened.append(ws)
            log.debug("Sending relay request %s (%s)", request.method, request.id)
            await ws.send(json.dumps(request.to_frame()))
            async for raw in ws:
                if correlator.dispatch(raw):
                    return pending.result()
        raise RelayTransportError("connection closed before a response arrived")

    @staticmethod
    async def _abandon(exchange: asyncio.Future[RelayResponse], opened: list[Any]) -> None:
        """Force the connection down so the pending read and close return immediately."""
        for ws in opened:
            transport = getattr(ws, "transport", None)
            if transport is not None:
                transport.abort()
        exchange.cancel()
        try:
            await exchange
        except asyncio.CancelledError:
            pass
        except (RelayTransportError, OSError, WebSocketException) as exc:
            log.debug("Relay connection closed after abandon: %s", exc)
