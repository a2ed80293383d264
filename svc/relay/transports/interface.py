# relay/transports/interface.py
from __future__ import annotations
from typing import Protocol


class Transport(Protocol):
    """
    How a serialized payload leaves the process.

    Implementations wrap exactly one socket and add no state of their own.
    """

    def connect(self) -> None:
        """Establish the link to the collector. Blocks; raises on failure."""
        ...

    def send_string(self, payload: str) -> int:
        """Send the whole payload and return the byte count, or raise."""
        ...

    def close(self) -> None:
        """Tear down the link. Safe to call any number of times."""
        ...

    def is_connected(self) -> bool:
        ...
