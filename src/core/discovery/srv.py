"""DNS SRV service discovery."""

from dataclasses import dataclass

import dns.asyncresolver
import dns.exception

from core.errors.exceptions import DiscoveryError
from core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """One SRV record: where a service instance listens."""

    target: str
    port: int
    priority: int = 0
    weight: int = 0


async def discover_endpoints(service_name: str) -> list[Endpoint]:
    """
    Resolve a service name to its SRV endpoints.

    Endpoints are ordered by priority (lowest first), then weight
    (highest first). Targets are returned without the trailing root dot.

    Args:
        service_name: Fully qualified SRV name, e.g. "_nats._tcp.example.com"

    Returns:
        Non-empty list of endpoints

    Raises:
        DiscoveryError: If the lookup fails or returns no records
    """
    try:
        answer = await dns.asyncresolver.resolve(service_name, "SRV")
    except dns.exception.DNSException as e:
        raise DiscoveryError(service_name, cause=e) from e

    endpoints = [
        Endpoint(
            target=record.target.to_text(omit_final_dot=True),
            port=record.port,
            priority=record.priority,
            weight=record.weight,
        )
        for record in answer
    ]

    if not endpoints:
        raise DiscoveryError(
            service_name, message=f"No endpoints found for '{service_name}'"
        )

    endpoints.sort(key=lambda endpoint: (endpoint.priority, -endpoint.weight))

    logger.debug(
        "Discovered service endpoints",
        extra={"service_name": service_name, "endpoint_count": len(endpoints)},
    )
    return endpoints


__all__ = ["Endpoint", "discover_endpoints"]
