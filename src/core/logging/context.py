"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_service: ContextVar[str] = ContextVar("service", default="")
_worker_id: ContextVar[str] = ContextVar("worker_id", default="")
_trace_id: ContextVar[str] = ContextVar("trace_id", default="")


def set_log_context(
    service: Optional[str] = None,
    worker_id: Optional[str] = None,
    trace_id: Optional[str] = None,
) -> None:
    if service is not None:
        _service.set(service)
    if worker_id is not None:
        _worker_id.set(worker_id)
    if trace_id is not None:
        _trace_id.set(trace_id)


def get_log_context() -> Dict[str, str]:
    return {
        "service": _service.get(),
        "worker_id": _worker_id.get(),
        "trace_id": _trace_id.get(),
    }


def clear_log_context() -> None:
    _service.set("")
    _worker_id.set("")
    _trace_id.set("")
