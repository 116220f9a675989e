"""Connection status snapshot for a nats-py client."""

from enum import Enum
from typing import Any


class ConnectionStatus(str, Enum):
    """Connection states as reported by the NATS client."""

    DISCONNECTED = "DISCONNECTED"
    CONNECTED = "CONNECTED"
    CLOSED = "CLOSED"
    RECONNECTING = "RECONNECTING"
    CONNECTING = "CONNECTING"
    DRAINING_SUBS = "DRAINING_SUBS"
    DRAINING_PUBS = "DRAINING_PUBS"


def connection_status(client: Any) -> ConnectionStatus:
    """Read the client's current status from its ``is_*`` properties.

    nats-py reports ``is_connected`` while draining, so draining states are
    checked first.
    """
    if client is None:
        return ConnectionStatus.DISCONNECTED
    if client.is_closed:
        return ConnectionStatus.CLOSED
    if client.is_draining_pubs:
        return ConnectionStatus.DRAINING_PUBS
    if client.is_draining:
        return ConnectionStatus.DRAINING_SUBS
    if client.is_reconnecting:
        return ConnectionStatus.RECONNECTING
    if client.is_connecting:
        return ConnectionStatus.CONNECTING
    if client.is_connected:
        return ConnectionStatus.CONNECTED
    return ConnectionStatus.DISCONNECTED
