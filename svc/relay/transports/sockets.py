# relay/transports/sockets.py
"""
Blocking socket primitives used by the transports.

Each socket owns at most one OS handle. The handle is None exactly when the
socket is not connected. Sockets are never copied; ``move()`` hands the handle
to a fresh object and leaves the source unconnected.

    sock = StreamSocket("127.0.0.1", 9000)
    sock.connect()
    sock.send_string(payload)
    sock.close()
"""
from __future__ import annotations
import errno
import logging
import os
import socket
from abc import ABC, abstractmethod
from typing import Optional

from relay.errors import ConfigurationError, ConnectError, ResolutionError, SendError
from relay.models import Endpoint

logger = logging.getLogger(__name__)


class _BaseSocket(ABC):
    _socktype: int = socket.SOCK_STREAM
    _label: str = "socket"

    def __init__(self, host: str, port: int) -> None:
        self._endpoint = Endpoint(host=host, port=port)
        self._sock: Optional[socket.socket] = None

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    # --- connection management ---------------------------------------------

    def connect(self) -> None:
        """
        Resolve host:port and keep the first candidate that connects.

        Candidates are tried in resolver order (IPv4 and IPv6 may both appear).
        If every candidate fails, ConnectError carries the errno of the last
        failure, or ECONNREFUSED if none reported one.
        """
        if self.is_connected():
            return

        host, port = self._endpoint.host, self._endpoint.port
        if not host:
            raise ConfigurationError(f"{self._label}: host cannot be empty")

        try:
            candidates = socket.getaddrinfo(host, port, socket.AF_UNSPEC, self._socktype)
        except socket.gaierror as e:
            raise ResolutionError(f"getaddrinfo({host!r}, {port}): {e.strerror}") from e

        last_errno = 0
        for family, socktype, proto, _canonname, sockaddr in candidates:
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError as e:
                last_errno = e.errno or 0
                continue

            try:
                sock.connect(sockaddr)
            except OSError as e:
                last_errno = e.errno or 0
                sock.close()
                logger.debug(f"{self._label} candidate {sockaddr} failed: {e}")
                continue

            self._sock = sock
            logger.debug(f"{self._label} connected to {self._endpoint} via {sockaddr}")
            return

        code = last_errno or errno.ECONNREFUSED
        raise ConnectError(
            f"{self._label} connect {self._endpoint}: {os.strerror(code)}", errno=code
        )

    def is_connected(self) -> bool:
        return self._sock is not None

    def close(self) -> None:
        """Shut down both directions if possible, then release the handle. Never raises."""
        sock, self._sock = self._sock, None
        if sock is None:
            return

        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # peer already gone, or a datagram socket without a peer
            pass
        try:
            sock.close()
        except OSError as e:
            logger.debug(f"{self._label} close error ignored: {e}")
        logger.debug(f"{self._label} to {self._endpoint} closed")

    # --- sending -----------------------------------------------------------

    @abstractmethod
    def send(self, data: bytes) -> int:
        """Send ``data``; return the byte count or raise SendError."""

    def send_string(self, payload: str) -> int:
        return self.send(payload.encode("utf-8"))

    # --- ownership ---------------------------------------------------------

    def move(self):
        """Transfer the handle to a new socket; this one becomes unconnected."""
        other = type(self).__new__(type(self))
        other._endpoint = self._endpoint
        other._sock, self._sock = self._sock, None
        return other

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} owns an OS handle and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} owns an OS handle and cannot be copied")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_sock", None) is not None:
            self.close()

    def __repr__(self) -> str:
        state = "connected" if self.is_connected() else "closed"
        return f"{type(self).__name__}({self._endpoint}, {state})"


class StreamSocket(_BaseSocket):
    """Blocking TCP client with send-all semantics."""

    _socktype = socket.SOCK_STREAM
    _label = "tcp"

    def send(self, data: bytes) -> int:
        """
        Write every byte or raise.

        Partial writes are resubmitted until the buffer is drained. A write that
        moves zero bytes means the peer went away. EINTR is retried.
        """
        if self._sock is None:
            raise SendError("tcp send: not connected")

        view = memoryview(data)
        total = len(view)
        sent = 0
        while sent < total:
            try:
                n = self._sock.send(view[sent:])
            except InterruptedError:
                continue
            except OSError as e:
                raise SendError(f"tcp send: {e.strerror or e}", errno=e.errno) from e

            if n == 0:
                raise SendError("tcp send: connection closed by peer")
            sent += n

        return total


class DatagramSocket(_BaseSocket):
    """
    UDP client with a default peer.

    ``connect()`` only records the destination on the handle; nothing is sent.
    That makes send errors (e.g., an ICMP-reported refusal) surface on the
    socket instead of disappearing.
    """

    _socktype = socket.SOCK_DGRAM
    _label = "udp"

    def send(self, data: bytes) -> int:
        """Send one datagram with a single call. A short write is an error, not a retry."""
        if self._sock is None:
            raise SendError("udp send: not connected")

        try:
            n = self._sock.send(data)
        except OSError as e:
            raise SendError(f"udp send: {e.strerror or e}", errno=e.errno) from e

        if n != len(data):
            raise SendError(f"udp send: short datagram send ({n} of {len(data)} bytes)")
        return n
