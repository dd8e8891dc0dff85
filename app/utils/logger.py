import logging
import contextvars
from typing import Optional

# ID of the HTTP request or sweep run being handled in this context
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)


class RequestAwareLogger(logging.LoggerAdapter):
    """
    Logger adapter that stamps records with the active request ID.

    A streak transition, the log entry that caused it and the HTTP request
    carrying it then share one ID in the output. Pass ``request_id=...`` to
    override the context value for a single call.
    """

    def process(self, msg, kwargs):
        request_id = kwargs.pop("request_id", None) or request_id_context.get()
        if request_id:
            extra = dict(kwargs.get("extra") or {})
            extra["request_id"] = request_id
            kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str) -> RequestAwareLogger:
    """Request-aware logger for a module (pass ``__name__``)."""
    return RequestAwareLogger(logging.getLogger(name), {})


def set_request_context(request_id: str):
    request_id_context.set(request_id)


def clear_request_context():
    request_id_context.set(None)
