import logging
import contextvars

# Request ID for the request currently being served, visible across awaits
request_id_context = contextvars.ContextVar('request_id', default=None)


class RequestAwareLogger:
    """
    Logger wrapper that stamps every record with the current request ID.

    Callers may pass ``request_id=...`` explicitly; otherwise the value set by
    the request middleware is used. Records logged outside of a request get
    no ``request_id`` and the formatter fills in a placeholder.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _log_with_context(self, level: int, msg: str, *args, **kwargs):
        request_id = kwargs.pop('request_id', None) or request_id_context.get()
        if request_id:
            extra = kwargs.get('extra', {})
            extra['request_id'] = request_id
            kwargs['extra'] = extra
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs, exc_info=True)


def get_logger(name: str) -> RequestAwareLogger:
    """Get a request-aware logger for the specified name (usually __name__)."""
    return RequestAwareLogger(name)


def set_request_context(request_id: str):
    request_id_context.set(request_id)


def clear_request_context():
    request_id_context.set(None)
