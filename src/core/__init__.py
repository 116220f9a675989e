"""
Core library: Reusable, transport-agnostic components.

Modules:
    logging     - Structured JSON logging and the NATS log sink
    errors      - Error classification and exception hierarchy
    security    - TLS settings for client connections
    discovery   - DNS SRV service discovery

Design Principles:
    - No dependencies on a specific connection lifecycle
    - All modules are independently testable
    - Async-first where applicable
"""

from .types import ErrorCategory

__version__ = "0.1.0"

__all__ = [
    "ErrorCategory",
]
