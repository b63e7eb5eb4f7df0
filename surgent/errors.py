from __future__ import annotations


class SurgentError(Exception):
    """Base class for all surgent errors."""


class ConfigError(SurgentError):
    """A required setting is missing or malformed."""


class RelayError(SurgentError):
    """A relay call could not produce a response."""


class RelayTransportError(RelayError):
    """The connection to the relay failed or closed early."""


class SupervisorError(SurgentError):
    """The process supervisor command exited unsuccessfully."""
