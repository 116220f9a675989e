"""Connect to NATS with the configured settings and report the result. Use --help for usage."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from config.config import DEFAULT_CONFIG_FILE, MessagingConfig, load_config
from core.logging.setup import setup_logging
from core.logging.utilities import log_exception
from core.utils import generate_worker_id
from messaging.connection import configure_nats_connection

# Project root directory (where .env file is located)
# __main__.py is at src/messaging/__main__.py, so root is 3 levels up
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Placeholder logger until setup_logging() is called in main()
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Check the NATS connection described by the messaging config",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Connect with src/config/config.yaml
    python -m messaging

    # Use a custom config file and log to stdout only
    python -m messaging --config /etc/messaging/config.yaml --log-to-stdout
        """,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_FILE,
        help="Path to config.yaml file (default: src/config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=os.getenv("LOG_LEVEL"),
        help="Console log level (default: logging.level from config, else INFO)",
    )
    parser.add_argument(
        "--log-to-stdout",
        action="store_true",
        help="Send all log output to stdout only, skipping the log file",
    )
    return parser.parse_args(argv)


def _setup_logging(args: argparse.Namespace, config: MessagingConfig) -> logging.Logger:
    logging_config = config.logging_config
    level_name = args.log_level or str(logging_config.get("level", "INFO")).upper()

    log_to_stdout = (
        args.log_to_stdout
        or bool(logging_config.get("log_to_stdout", False))
        or os.getenv("LOG_TO_STDOUT", "false").lower() in ("true", "1", "yes")
    )

    return setup_logging(
        name="messaging",
        service="messaging",
        log_dir=Path(os.getenv("LOG_DIR") or logging_config.get("log_dir") or "logs"),
        json_format=bool(logging_config.get("json", True)),
        console_level=getattr(logging, level_name, logging.INFO),
        worker_id=os.getenv("WORKER_ID") or generate_worker_id("nats-check"),
        log_to_stdout=log_to_stdout,
    )


async def check_connection(config: MessagingConfig, log: logging.Logger) -> bool:
    """Connect, report status, and close. Returns True if a connection was made."""
    if config.nats is not None:
        log.info("Connecting to nats", extra=config.nats.log_fields())

    connection = await configure_nats_connection(config.nats, log)
    if connection is None:
        log.info("No nats section configured, nothing to check")
        return False

    try:
        log.info(
            "Connected to nats",
            extra={
                "servers": connection.client.connected_url.geturl()
                if connection.client.connected_url
                else "",
                "conn_status": connection.status.value,
            },
        )
    finally:
        await connection.close()

    return True


def main(argv: list[str] | None = None) -> int:
    load_dotenv(PROJECT_ROOT / ".env")
    args = parse_args(argv)

    try:
        config = load_config(config_path=args.config)
    except Exception as e:
        print(f"✗ Failed to load configuration: {e}", file=sys.stderr)
        return 1

    log = _setup_logging(args, config)

    try:
        asyncio.run(check_connection(config, log))
    except KeyboardInterrupt:
        log.info("Interrupted")
        return 1
    except Exception as e:
        log_exception(log, e, "NATS connection check failed", include_traceback=False)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
