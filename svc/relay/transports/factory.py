# relay/transports/factory.py
from __future__ import annotations
import logging

from relay.errors import ConfigurationError
from relay.models import TransportConfig
from .interface import Transport
from .tcp_transport import TcpTransport
from .udp_transport import UdpTransport

logger = logging.getLogger(__name__)

MIN_PORT = 0
MAX_PORT = 65535

_TRANSPORTS = {
    "tcp": TcpTransport,
    "udp": UdpTransport,
}


def is_valid_port(port: int) -> bool:
    return MIN_PORT < port <= MAX_PORT


def make_transport(config: TransportConfig) -> Transport:
    """
    Build the transport named by ``config.kind`` (case-insensitive).

    The transport is returned unconnected; the caller decides when to connect.
    Port range is checked here as well so the factory is safe to use without
    the config loader in front of it.
    """
    if not config.kind:
        raise ConfigurationError("TransportFactory: empty 'kind'")
    if not config.host:
        raise ConfigurationError("TransportFactory: empty host")
    if not is_valid_port(config.port):
        raise ConfigurationError(
            f"TransportFactory: invalid port {config.port} (1..65535)"
        )

    transport_cls = _TRANSPORTS.get(config.kind.lower())
    if transport_cls is None:
        raise ConfigurationError(f"TransportFactory: unsupported kind '{config.kind}'")

    transport = transport_cls(config.host, config.port)
    logger.info(f"Transport built: {transport}")
    return transport
