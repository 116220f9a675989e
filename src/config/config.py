"""Messaging configuration from YAML file.

Loads from config/config.yaml:
- nats: servers, discovery name, log subject, TLS material
- metrics: subject and default dimensions
- logging: log level, format, and destination

Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.
NATS_SERVERS, NATS_DISCOVERY_NAME and NATS_LOG_SUBJECT override the
matching keys of the nats section.
"""

import json
import logging
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from core.errors.exceptions import ConfigurationError
from core.security.tls import TLSConfig

# Configure module logger
logger = logging.getLogger(__name__)


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        # Support both ${VAR} and ${VAR:-default} syntax
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into base dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_config_value(env_var: str, yaml_value: Any, default: Any = "") -> Any:
    """Resolve a setting: environment variable, then YAML value, then default."""
    env_value = os.getenv(env_var)
    if env_value:
        return env_value
    if yaml_value not in (None, ""):
        return yaml_value
    return default


# Default config file: config/config.yaml in src/ directory
DEFAULT_CONFIG_FILE = Path(__file__).parent / "config.yaml"


# =========================================================================
# SERVER SOURCES
# =========================================================================


@dataclass(frozen=True)
class ExplicitServers:
    """Server addresses listed in configuration, used verbatim."""

    servers: tuple[str, ...]


@dataclass(frozen=True)
class DiscoveredServers:
    """Server addresses resolved from a discovery name at connect time."""

    name: str


ServerSource = Union[ExplicitServers, DiscoveredServers]


@dataclass(frozen=True)
class NatsConfig:
    """NATS connection configuration.

    Configuration structure:
        nats:
          servers: [nats://a:4222, nats://b:4222]
          discovery_name: _nats._tcp.example.com   # wins over servers
          log_subject: logs.myservice
          tls_conf:
            ca_files: [/etc/nats/ca.pem]
            cert_file: /etc/nats/client.pem
            key_file: /etc/nats/client-key.pem
    """

    servers: tuple[str, ...] = field(default_factory=tuple)
    discovery_name: str = ""
    log_subject: str = ""
    tls: Optional[TLSConfig] = None

    @property
    def server_source(self) -> ServerSource:
        """Authoritative server source; discovery wins when configured."""
        if self.discovery_name:
            return DiscoveredServers(self.discovery_name)
        return ExplicitServers(self.servers)

    def server_string(self) -> str:
        """Comma-joined configured servers, as passed to a connect URL."""
        return ",".join(self.servers)

    def log_fields(self) -> Dict[str, Any]:
        """Fields describing this config, for startup logging."""
        fields = {
            "logs_subject": self.log_subject,
            "servers": self.server_string(),
        }

        if self.tls is not None:
            fields["ca_files"] = ",".join(self.tls.ca_files)
            fields["key_file"] = self.tls.key_file
            fields["cert_file"] = self.tls.cert_file

        return fields

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NatsConfig":
        servers = get_config_value("NATS_SERVERS", data.get("servers"), [])
        if isinstance(servers, str):
            servers = [part.strip() for part in servers.split(",") if part.strip()]

        tls_data = data.get("tls_conf")
        return cls(
            servers=tuple(servers),
            discovery_name=get_config_value(
                "NATS_DISCOVERY_NAME", data.get("discovery_name")
            ),
            log_subject=get_config_value("NATS_LOG_SUBJECT", data.get("log_subject")),
            tls=TLSConfig.from_dict(tls_data) if tls_data is not None else None,
        )

    def validate(self) -> None:
        """Validate structure; address syntax is left to the client."""
        for server in self.servers:
            if not isinstance(server, str) or not server.strip():
                raise ConfigurationError(
                    f"nats.servers entries must be non-empty strings, got {server!r}"
                )

        if any(ch.isspace() for ch in self.log_subject):
            raise ConfigurationError(
                f"nats.log_subject must not contain whitespace, got '{self.log_subject}'"
            )

        if self.tls is not None and bool(self.tls.cert_file) != bool(self.tls.key_file):
            raise ConfigurationError(
                "nats.tls_conf: cert_file and key_file must be configured together"
            )


@dataclass(frozen=True)
class MetricsConfig:
    """Subject and default dimensions for metrics published on the bus."""

    subject: str = ""
    default_dims: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetricsConfig":
        return cls(
            subject=data.get("subject") or "",
            default_dims=data.get("default_dims"),
        )

    def validate(self) -> None:
        if self.default_dims is not None and not isinstance(self.default_dims, dict):
            raise ConfigurationError(
                f"metrics.default_dims must be a mapping, got {type(self.default_dims).__name__}"
            )


@dataclass
class MessagingConfig:
    """Top-level messaging configuration.

    A missing ``nats`` section leaves ``nats`` as None, which disables the
    connection rather than failing.
    """

    nats: Optional[NatsConfig] = None
    metrics: Optional[MetricsConfig] = None
    logging_config: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        if self.nats is not None:
            self.nats.validate()
        if self.metrics is not None:
            self.metrics.validate()


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> MessagingConfig:
    """Load messaging configuration from config.yaml file.

    Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n" f"Expected file: config/config.yaml"
        )

    logger.info(f"Loading configuration from file: {config_path}")
    yaml_data = load_yaml(config_path)
    yaml_data = _expand_env_vars(yaml_data)

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        yaml_data = _deep_merge(yaml_data, overrides)

    nats_data = yaml_data.get("nats")
    metrics_data = yaml_data.get("metrics")

    config = MessagingConfig(
        nats=NatsConfig.from_dict(nats_data) if nats_data is not None else None,
        metrics=MetricsConfig.from_dict(metrics_data) if metrics_data is not None else None,
        logging_config=yaml_data.get("logging") or {},
    )

    if config.nats is None:
        logger.debug("No nats section in configuration")
    else:
        logger.debug("Configuration loaded", extra=config.nats.log_fields())

    logger.debug("Validating configuration...")
    config.validate()
    logger.debug("Configuration validation passed")

    return config


_messaging_config: Optional[MessagingConfig] = None


def get_config() -> MessagingConfig:
    """Get or load the singleton messaging config instance."""
    global _messaging_config
    if _messaging_config is None:
        _messaging_config = load_config()
    return _messaging_config


def set_config(config: MessagingConfig) -> None:
    """Set the singleton messaging config instance (useful for testing)."""
    global _messaging_config
    _messaging_config = config


def reset_config() -> None:
    """Reset the singleton config instance (forces reload on next get_config() call)."""
    global _messaging_config
    _messaging_config = None


def _build_cli_parser():
    import argparse

    parser = argparse.ArgumentParser(
        description="Messaging Configuration Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate configuration
  python -m config.config --validate

  # Show merged configuration
  python -m config.config --show-merged

  # Use custom config file, JSON output for automation
  python -m config.config --config /path/to/config.yaml --validate --json
        """,
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration structure and completeness",
    )
    parser.add_argument(
        "--show-merged",
        action="store_true",
        help="Display configuration after environment expansion as YAML",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.yaml file (default: src/config/config.yaml)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format instead of human-readable",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def _print_error(message: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"error": message}))
    else:
        print(f"✗ {message}", file=sys.stderr)


def _cli_main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point for config validation and debugging."""
    parser = _build_cli_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if not args.validate and not args.show_merged:
        parser.print_help()
        return 0

    config_path = args.config or DEFAULT_CONFIG_FILE
    try:
        config = load_config(config_path=config_path)
    except FileNotFoundError as e:
        _print_error(f"Error: {e}", args.json)
        return 1
    except ConfigurationError as e:
        _print_error(f"Validation error: {e}", args.json)
        return 1

    output: Dict[str, Any] = {}

    if args.validate:
        if args.json:
            output["validation"] = {"passed": True, "errors": []}
        else:
            print("✓ Configuration validation passed")
            print(f"  - NATS connection: {'configured' if config.nats else 'disabled'}")
            if config.nats is not None:
                source = config.nats.server_source
                if isinstance(source, DiscoveredServers):
                    print(f"  - Servers: discovered from {source.name}")
                else:
                    print(f"  - Servers: {config.nats.server_string()}")
                print(f"  - Log subject: {config.nats.log_subject or 'none'}")
                print(f"  - TLS: {'enabled' if config.nats.tls else 'disabled'}")

    if args.show_merged:
        config_dict = _expand_env_vars(load_yaml(config_path))
        if args.json:
            output["merged_config"] = config_dict
        else:
            print("\nConfiguration:")
            print("=" * 80)
            print(yaml.dump(config_dict, default_flow_style=False, sort_keys=False))
            print("=" * 80)

    if args.json:
        print(json.dumps(output, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(_cli_main())
