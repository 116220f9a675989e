"""
Security module.

Provides TLS settings for client connections:
    - TLSConfig: declarative TLS material (CA files, client cert/key)
    - build_ssl_context(): turn TLSConfig into an ssl.SSLContext
    - get_ca_bundle_path(): custom CA bundle from the environment
"""

from core.security.ssl_utils import get_ca_bundle_path
from core.security.tls import TLSConfig, build_ssl_context

__all__ = [
    "TLSConfig",
    "build_ssl_context",
    "get_ca_bundle_path",
]
