"""Front-desk action context for log records.

Every booking form submission, status change, and dashboard load runs
inside an ``action_context``. Loggers from ``get_request_logger`` stamp
each record with the action's ``request_id`` and the ``property_id`` it
touches, so a format string such as
``"%(request_id)s %(property_id)s %(message)s"`` can follow one
submission through overlap checks, room sync, and reporting.

Usage:
    from pms_core.logging_context import action_context, get_request_logger

    logger = get_request_logger(__name__)
    with action_context(property_id="marina"):
        logger.info("Creating booking")  # record.property_id == "marina"
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

NO_REQUEST = "-"
ALL_PROPERTIES = "*"

_request_id: ContextVar[str] = ContextVar("request_id", default=NO_REQUEST)
_property_id: ContextVar[str] = ContextVar("property_id", default=ALL_PROPERTIES)


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_request_id() -> str:
    return _request_id.get()


def get_property_scope() -> str:
    return _property_id.get()


def new_request_id() -> str:
    """Start a new request in the current context and return its id."""
    request_id = f"REQ-{uuid.uuid4().hex[:8]}"
    set_request_id(request_id)
    return request_id


@contextmanager
def action_context(
    property_id: Optional[str] = None, request_id: Optional[str] = None
) -> Iterator[str]:
    """Scope log records to one front-desk action.

    Keeps the caller's request id when one is already set and
    ``request_id`` is not given; otherwise starts a fresh one. Both values
    are restored on exit.
    """
    if request_id is None and _request_id.get() == NO_REQUEST:
        request_id = f"REQ-{uuid.uuid4().hex[:8]}"
    request_token = _request_id.set(request_id) if request_id is not None else None
    property_token = _property_id.set(property_id or ALL_PROPERTIES)
    try:
        yield _request_id.get()
    finally:
        _property_id.reset(property_token)
        if request_token is not None:
            _request_id.reset(request_token)


class ActionContextFilter(logging.Filter):
    """Adds request_id and property_id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        record.property_id = _property_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not any(isinstance(f, ActionContextFilter) for f in logger.filters):
        logger.addFilter(ActionContextFilter())
    return logger
