from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Relay wire frames
# ---------------------------------------------------------------------------

HANDSHAKE_TYPE = "handshake"


@dataclass(frozen=True)
class RelayRequest:
    id: str
    method: str
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, method: str, params: dict[str, Any] | None = None) -> RelayRequest:
        return cls(id=str(uuid.uuid4()), method=method, params=dict(params or {}))

    def to_frame(self) -> dict[str, Any]:
        return {"id": self.id, "method": self.method, "params": self.params}


@dataclass(frozen=True)
class RelayResponse:
    id: str
    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def from_frame(cls, frame: dict[str, Any]) -> RelayResponse:
        error = frame.get("error")
        return cls(
            id=frame["id"],
            success=bool(frame.get("success")),
            data=frame.get("data"),
            error=error if error is None else str(error),
        )


# ---------------------------------------------------------------------------
# CallResult: outcome of one correlated call
# ---------------------------------------------------------------------------

class CallStatus(str, enum.Enum):
    OK = "ok"                            # peer answered with success: true
    REMOTE_ERROR = "remote_error"        # peer answered with success: false
    TIMEOUT = "timeout"                  # no matching answer before the deadline
    TRANSPORT_ERROR = "transport_error"  # connect failed or socket dropped


@dataclass(frozen=True)
class CallResult:
    request_id: str
    status: CallStatus
    data: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == CallStatus.OK

    @classmethod
    def from_response(cls, response: RelayResponse) -> CallResult:
        status = CallStatus.OK if response.success else CallStatus.REMOTE_ERROR
        return cls(
            request_id=response.id,
            status=status,
            data=response.data,
            error=response.error,
        )


# ---------------------------------------------------------------------------
# Dev process models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectConfig:
    """Contents of ``surgent.json`` needed to start the dev processes."""
    name: str
    commands: list[str]

    def process_names(self) -> list[str]:
        if len(self.commands) == 1:
            return [self.name]
        return [f"{self.name}:{i}" for i in range(1, len(self.commands) + 1)]


@dataclass(frozen=True)
class ProcessInfo:
    name: str
    status: str
    pid: int | None = None

    @property
    def online(self) -> bool:
        return self.status == "online"
