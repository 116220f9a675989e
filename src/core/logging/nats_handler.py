"""
NATS logging handler for publishing log records on a subject.

Records are formatted as JSON and handed to a sender task running on the
connection's event loop, so ``emit`` never blocks the caller and can be
used from any thread.

Features:
- Non-blocking emit (loop-thread queue, thread-safe hand-off)
- Bounded queue, records dropped and counted when full
- Explicit registration handle instead of a process-wide hook
"""

import asyncio
import contextlib
import logging
import sys
from dataclasses import dataclass
from typing import Any

from core.logging.formatters import JSONFormatter

# Records from the transport library itself are never republished on the bus
IGNORED_LOGGER_PREFIX = "nats"


class NatsLogHandler(logging.Handler):
    """
    Publishes log records to a NATS subject.

    Must be created on the thread running the client's event loop. Records
    can be emitted from any thread.

    Example:
        handler = NatsLogHandler(client, "logs.billing")
        handler.setLevel(logging.INFO)
        logger.addHandler(handler)
    """

    def __init__(
        self,
        client: Any,
        subject: str,
        loop: asyncio.AbstractEventLoop | None = None,
        max_queue_size: int = 10000,
    ):
        """
        Initialize NATS log handler.

        Args:
            client: Connected nats-py client
            subject: Subject to publish log records on
            loop: Event loop the client runs on (default: the running loop)
            max_queue_size: Max records to queue (newer records dropped if full)
        """
        super().__init__()
        self.client = client
        self.subject = subject
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[bytes] = asyncio.Queue(maxsize=max_queue_size)
        self._sender_task: asyncio.Task | None = None
        self._closed = False
        self._total_sent = 0
        self._total_dropped = 0
        self._total_failed = 0

        self.setFormatter(JSONFormatter())
        self._start_sender()

    def emit(self, record: logging.LogRecord) -> None:
        if self._closed or record.name.split(".")[0] == IGNORED_LOGGER_PREFIX:
            return

        try:
            payload = self.format(record).encode("utf-8")
        except Exception:
            self.handleError(record)
            return

        try:
            self._loop.call_soon_threadsafe(self._enqueue, payload)
        except RuntimeError:
            # Loop closed: _enqueue can no longer run, emit() holds the handler lock
            self._total_dropped += 1

    def _enqueue(self, payload: bytes) -> None:
        try:
            self._queue.put_nowait(payload)
        except asyncio.QueueFull:
            self._total_dropped += 1

    def _start_sender(self) -> None:
        """Start the sender task on the client's event loop."""
        self._sender_task = self._loop.create_task(
            self._send_loop(), name="nats-log-sender"
        )

    async def _send_loop(self) -> None:
        """Publish queued records until cancelled."""
        while True:
            payload = await self._queue.get()
            try:
                await self.client.publish(self.subject, payload)
                self._total_sent += 1
            except Exception as e:
                # Logging here would feed back into this handler
                self._total_failed += 1
                print(
                    f"[NATS_LOGS] ERROR publishing to {self.subject}: "
                    f"{type(e).__name__}: {str(e)[:200]}",
                    file=sys.stderr,
                )
            finally:
                self._queue.task_done()

    async def drain(self, timeout: float = 5.0) -> None:
        """Wait until every record emitted so far has been handed to the client."""
        # Let hand-offs scheduled by emit() reach the queue first
        await asyncio.sleep(0)
        await asyncio.wait_for(self._queue.join(), timeout)

    def get_stats(self) -> dict:
        return {
            "total_sent": self._total_sent,
            "total_dropped": self._total_dropped,
            "total_failed": self._total_failed,
            "queue_size": self._queue.qsize(),
        }

    def close(self) -> None:
        """Stop accepting records and cancel the sender task."""
        self._closed = True
        if self._sender_task is not None and not self._sender_task.done():
            with contextlib.suppress(RuntimeError):
                self._loop.call_soon_threadsafe(self._sender_task.cancel)
        super().close()


@dataclass
class LogSinkRegistration:
    """Handle for a NatsLogHandler attached to a logger."""

    handler: NatsLogHandler
    target: logging.Logger

    @property
    def subject(self) -> str:
        return self.handler.subject

    def detach(self) -> None:
        """Remove the handler from its logger and stop it."""
        self.target.removeHandler(self.handler)
        self.handler.close()


def attach_log_sink(
    client: Any,
    subject: str,
    target: logging.Logger,
    level: int = logging.DEBUG,
    formatter: logging.Formatter | None = None,
    max_queue_size: int = 10000,
) -> LogSinkRegistration:
    """
    Publish records logged on ``target`` (and its children) to ``subject``.

    Args:
        client: Connected nats-py client
        subject: Subject to publish on
        target: Logger to attach the handler to
        level: Minimum level forwarded to the bus
        formatter: Override for the default JSONFormatter
        max_queue_size: Max records queued before dropping

    Returns:
        Registration handle; call ``detach()`` to stop publishing
    """
    handler = NatsLogHandler(client, subject, max_queue_size=max_queue_size)
    handler.setLevel(level)
    if formatter is not None:
        handler.setFormatter(formatter)
    target.addHandler(handler)
    return LogSinkRegistration(handler=handler, target=target)


__all__ = ["NatsLogHandler", "LogSinkRegistration", "attach_log_sink"]
