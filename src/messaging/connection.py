"""NATS connection setup.

Turns a NatsConfig into a connected nats-py client:

1. Resolve servers: discovered SRV endpoints when ``discovery_name`` is set,
   otherwise the configured list.
2. Build the TLS context when ``tls_conf`` is present.
3. Bind the error handler as the client's ``error_cb``.
4. Connect.

Failures from discovery, TLS setup or the connect call are raised to the
caller unchanged. Reconnection and backoff are left to the client.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from nats.aio.client import Client as NATS

from config.config import DiscoveredServers, NatsConfig
from core.discovery import discover_endpoints
from core.logging import LogSinkRegistration, attach_log_sink, get_logger
from core.security.tls import TLSConfig, build_ssl_context
from messaging.error_handler import ErrorHandler, build_error_handler
from messaging.status import ConnectionStatus, connection_status

logger = get_logger(__name__)

NATS_SCHEME = "nats"


async def discover_nats_urls(service_name: str) -> List[str]:
    """Resolve ``service_name`` to one ``nats://host:port`` URL per endpoint."""
    endpoints = await discover_endpoints(service_name)
    return [f"{NATS_SCHEME}://{endpoint.target}:{endpoint.port}" for endpoint in endpoints]


def server_string(servers: List[str]) -> str:
    """Comma-join server addresses, keeping order and duplicates."""
    return ",".join(servers)


async def resolve_servers(config: NatsConfig) -> List[str]:
    """Server addresses for this connect attempt. Does not modify ``config``."""
    source = config.server_source
    if isinstance(source, DiscoveredServers):
        return await discover_nats_urls(source.name)
    return list(source.servers)


def build_connect_options(
    tls_config: Optional[TLSConfig],
    error_cb: Optional[Callable[[Exception], Awaitable[None]]],
) -> Dict[str, Any]:
    """
    Assemble keyword options for ``Client.connect``.

    ``tls`` (when TLS yields a context) is inserted before ``error_cb``.

    Raises:
        TLSConfigError: If the TLS material cannot be loaded
    """
    options: Dict[str, Any] = {}

    if tls_config is not None:
        ssl_context = build_ssl_context(tls_config)
        if ssl_context is not None:
            options["tls"] = ssl_context

    if error_cb is not None:
        options["error_cb"] = error_cb

    return options


def bind_error_handler(
    client: Any, error_handler: ErrorHandler
) -> Callable[[Exception], Awaitable[None]]:
    """
    Adapt ``error_handler`` to nats-py's ``error_cb``.

    nats-py passes only the error; the client is bound here and the
    subscription is taken from the error when it carries one.
    """

    async def error_cb(err: Exception) -> None:
        error_handler(client, getattr(err, "sub", None), err)

    return error_cb


async def connect_to_nats(
    config: NatsConfig,
    error_handler: Optional[ErrorHandler] = None,
) -> NATS:
    """
    Connect to the NATS servers described by ``config``.

    Args:
        config: Connection configuration (not modified)
        error_handler: Called for every asynchronous error the client reports

    Returns:
        Connected client

    Raises:
        DiscoveryError: If ``discovery_name`` cannot be resolved
        TLSConfigError: If TLS material cannot be loaded
        nats.errors.Error / OSError: If the client cannot connect
    """
    servers = await resolve_servers(config)

    client = NATS()
    error_cb = bind_error_handler(client, error_handler) if error_handler is not None else None
    options = build_connect_options(config.tls, error_cb)

    logger.debug("Connecting to nats", extra={"servers": server_string(servers)})
    await client.connect(servers=servers, **options)
    return client


@dataclass
class NatsConnection:
    """A connected client plus the log sink attached to it, if any."""

    client: Any
    log_sink: Optional[LogSinkRegistration] = None

    @property
    def status(self) -> ConnectionStatus:
        return connection_status(self.client)

    async def close(self, drain_timeout: float = 5.0) -> None:
        """Detach the log sink, then drain and close the client."""
        if self.log_sink is not None:
            with contextlib.suppress(asyncio.TimeoutError):
                await self.log_sink.handler.drain(timeout=drain_timeout)
            self.log_sink.detach()
            self.log_sink = None

        if not self.client.is_closed:
            await self.client.drain()


async def configure_nats_connection(
    config: Optional[NatsConfig],
    log: logging.Logger,
) -> Optional[NatsConnection]:
    """
    Connect using ``config`` and wire logging onto the connection.

    Transport errors are logged on ``log``. When ``config.log_subject`` is
    set, records logged on ``log`` and its children are also published on
    that subject; the registration is returned on the connection so the
    caller can detach it.

    Args:
        config: Connection configuration, or None to skip connecting
        log: Logger for transport errors and the log sink target

    Returns:
        NatsConnection, or None when ``config`` is None
    """
    if config is None:
        log.debug("Skipping nats connection because there is no config")
        return None

    client = await connect_to_nats(config, build_error_handler(log))

    log_sink = None
    if config.log_subject:
        log_sink = attach_log_sink(client, config.log_subject, target=log)
        log.debug(
            "Configured nats log sink",
            extra={"subject": config.log_subject},
        )

    return NatsConnection(client=client, log_sink=log_sink)


__all__ = [
    "NATS_SCHEME",
    "NatsConnection",
    "bind_error_handler",
    "build_connect_options",
    "configure_nats_connection",
    "connect_to_nats",
    "discover_nats_urls",
    "resolve_servers",
    "server_string",
]
