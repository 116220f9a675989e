"""
pytest configuration for messaging tests.

Adds src directory to Python path for imports and sets up test environment.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


class RecordCollector(logging.Handler):
    """Keeps every record emitted on the logger it is attached to."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def collecting_logger(request):
    """A fresh logger with a RecordCollector attached; yields (logger, collector)."""
    logger = logging.getLogger(f"tests.{request.node.name}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    collector = RecordCollector()
    logger.addHandler(collector)
    yield logger, collector
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
