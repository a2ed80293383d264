from __future__ import annotations
from typing import Optional


class RelayError(Exception):
    """Base class for every error raised by the relay."""


class ConfigurationError(RelayError, ValueError):
    """Bad host, port, transport kind, sensor identity or interval."""


class ResolutionError(RelayError):
    """Address lookup failed for a host/port pair."""


class ConnectError(RelayError):
    """No resolved candidate could be connected (or bound, for datagrams)."""

    def __init__(self, message: str, errno: Optional[int] = None) -> None:
        super().__init__(message)
        self.errno = errno


class SendError(RelayError):
    """A write failed: not connected, peer closed, short datagram, OS error."""

    def __init__(self, message: str, errno: Optional[int] = None) -> None:
        super().__init__(message)
        self.errno = errno


class AcquisitionError(RelayError):
    """The data source could not produce a reading set."""
