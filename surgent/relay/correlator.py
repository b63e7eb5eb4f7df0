"""Correlator: matches inbound relay frames to pending calls by id."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from ..models import HANDSHAKE_TYPE, RelayResponse

log = logging.getLogger(__name__)


def parse_frame(raw: str | bytes) -> dict[str, Any] | None:
    """Decode one inbound frame. Returns None for anything that is not a JSON object."""
    try:
        frame = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return frame if isinstance(frame, dict) else None


class Correlator:
    """Registry of id -> pending future for calls awaiting a response.

    Each id reaches exactly one terminal state: the first of a matching
    response (``dispatch``) or an abandon (``discard``) wins, and the entry
    is removed so any later frame for the same id is ignored.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future[RelayResponse]] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._pending

    def register(self, request_id: str) -> asyncio.Future[RelayResponse]:
        if request_id in self._pending:
            raise ValueError(f"Request id already pending: {request_id}")
        future: asyncio.Future[RelayResponse] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        return future

    def dispatch(self, raw: str | bytes) -> bool:
        """Feed one inbound frame. Returns True if it resolved a pending call."""
        frame = parse_frame(raw)
        if frame is None:
            log.debug("Ignoring malformed relay frame: %r", raw[:200])
            return False

        if frame.get("type") == HANDSHAKE_TYPE:
            log.debug("Relay handshake received")
            return False

        request_id = frame.get("id")
        future = self._pending.pop(request_id, None) if isinstance(request_id, str) else None
        if future is None:
            log.debug("Ignoring relay frame with unknown id: %r", request_id)
            return False
        if future.done():
            return False

        future.set_result(RelayResponse.from_frame(frame))
        return True

    def discard(self, request_id: str) -> bool:
        """Abandon a pending call. Returns False if it already reached a terminal state."""
        future = self._pending.pop(request_id, None)
        if future is None or future.done():
            return False
        future.cancel()
        return True
