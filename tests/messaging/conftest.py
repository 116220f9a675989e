"""Shared fixtures for messaging tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest


def _make_client(**flags):
    client = MagicMock()
    state = {
        "is_closed": False,
        "is_draining_pubs": False,
        "is_draining": False,
        "is_reconnecting": False,
        "is_connecting": False,
        "is_connected": False,
    }
    state.update(flags)
    for name, value in state.items():
        setattr(client, name, value)
    client.connect = AsyncMock()
    client.publish = AsyncMock()
    client.drain = AsyncMock()
    return client


def _make_subscription(subject="orders.created", queue="", pending_msgs=0):
    sub = MagicMock()
    sub.subject = subject
    sub.queue = queue
    sub.pending_msgs = pending_msgs
    return sub


@pytest.fixture
def make_client():
    """Factory for nats-py client stand-ins with explicit state flags."""
    return _make_client


@pytest.fixture
def make_subscription():
    return _make_subscription


@pytest.fixture
def connected_client():
    return _make_client(is_connected=True)
