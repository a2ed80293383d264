# relay/transports/tcp_transport.py
from __future__ import annotations

from .interface import Transport
from .sockets import StreamSocket


class TcpTransport(Transport):
    """Stream transport: blocking connect handshake, send-all writes."""

    def __init__(self, host: str, port: int) -> None:
        self._socket = StreamSocket(host, port)

    def connect(self) -> None:
        self._socket.connect()

    def send_string(self, payload: str) -> int:
        return self._socket.send_string(payload)

    def close(self) -> None:
        self._socket.close()

    def is_connected(self) -> bool:
        return self._socket.is_connected()

    def __repr__(self) -> str:
        return f"TcpTransport({self._socket.endpoint})"
