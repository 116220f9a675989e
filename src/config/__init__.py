"""Configuration loading for the messaging helpers.

Configuration is loaded from ``src/config/config.yaml`` (or an explicit
path) and exposed as a MessagingConfig.

Main Functions
--------------

    - load_config(): Load configuration from a YAML file
    - get_config(): Get or load singleton config instance
    - set_config() / reset_config(): Replace or drop the singleton

Usage Examples
--------------

    >>> from config import load_config
    >>> config = load_config()
    >>> if config.nats is not None:
    ...     print(config.nats.server_string())

Configuration Priority
---------------------

Settings are merged in the following priority (highest to lowest):

1. Environment variables (NATS_SERVERS, NATS_DISCOVERY_NAME, NATS_LOG_SUBJECT)
2. YAML configuration file (with ${VAR} expansion)
3. Dataclass defaults

Within the nats section, a non-empty discovery_name always takes precedence
over the servers list.
"""

from config.config import (
    DiscoveredServers,
    ExplicitServers,
    MessagingConfig,
    MetricsConfig,
    NatsConfig,
    ServerSource,
    get_config,
    load_config,
    reset_config,
    set_config,
)

__all__ = [
    # Core config functions
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
    # Config classes
    "MessagingConfig",
    "NatsConfig",
    "MetricsConfig",
    # Server sources
    "ServerSource",
    "ExplicitServers",
    "DiscoveredServers",
]
