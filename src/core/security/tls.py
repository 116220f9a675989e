"""TLS settings for client connections."""

import ssl
from dataclasses import dataclass, field

from core.errors.exceptions import TLSConfigError
from core.logging import get_logger
from core.security.ssl_utils import get_ca_bundle_path

logger = get_logger(__name__)


@dataclass(frozen=True)
class TLSConfig:
    """TLS material for a client connection.

    Paths are read when the context is built, not when the config is loaded.
    """

    ca_files: tuple[str, ...] = field(default_factory=tuple)
    cert_file: str = ""
    key_file: str = ""
    insecure: bool = False

    @property
    def has_material(self) -> bool:
        return bool(self.ca_files or self.cert_file or self.key_file)

    @classmethod
    def from_dict(cls, data: dict) -> "TLSConfig":
        ca_files = data.get("ca_files") or ()
        if isinstance(ca_files, str):
            ca_files = [part.strip() for part in ca_files.split(",") if part.strip()]
        return cls(
            ca_files=tuple(ca_files),
            cert_file=data.get("cert_file") or "",
            key_file=data.get("key_file") or "",
            insecure=bool(data.get("insecure", False)),
        )


def build_ssl_context(tls_config: TLSConfig) -> ssl.SSLContext | None:
    """
    Build a client-side SSL context from TLS settings.

    Returns None when nothing is configured, so an empty ``tls_conf``
    section does not force a secure connection.

    Raises:
        TLSConfigError: If a certificate/key pair is incomplete or any
            file cannot be loaded
    """
    if not tls_config.has_material and not tls_config.insecure:
        logger.debug("TLS config has no material, skipping secure transport")
        return None

    if bool(tls_config.cert_file) != bool(tls_config.key_file):
        raise TLSConfigError(
            "cert_file and key_file must be configured together",
            context={"cert_file": tls_config.cert_file, "key_file": tls_config.key_file},
        )

    ssl_context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)

    if tls_config.insecure:
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE

    if tls_config.cert_file:
        try:
            ssl_context.load_cert_chain(
                certfile=tls_config.cert_file,
                keyfile=tls_config.key_file,
            )
        except (OSError, ssl.SSLError) as e:
            raise TLSConfigError(
                f"Failed to load client certificate from {tls_config.cert_file}",
                cause=e,
                context={"cert_file": tls_config.cert_file, "key_file": tls_config.key_file},
            ) from e

    ca_files = list(tls_config.ca_files)
    if not ca_files:
        ca_bundle = get_ca_bundle_path()
        if ca_bundle:
            ca_files.append(ca_bundle)

    for ca_file in ca_files:
        try:
            ssl_context.load_verify_locations(cafile=ca_file)
        except (OSError, ssl.SSLError) as e:
            raise TLSConfigError(
                f"Failed to load CA file {ca_file}",
                cause=e,
                context={"ca_file": ca_file},
            ) from e

    logger.debug(
        "Built TLS context",
        extra={
            "ca_files": ",".join(ca_files),
            "cert_file": tls_config.cert_file,
            "key_file": tls_config.key_file,
        },
    )
    return ssl_context


__all__ = ["TLSConfig", "build_ssl_context"]
