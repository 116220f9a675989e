"""
Service discovery.

Resolves a service name to the endpoints serving it using DNS SRV records.
"""

from core.discovery.srv import Endpoint, discover_endpoints

__all__ = ["Endpoint", "discover_endpoints"]
