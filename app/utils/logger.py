import logging
import contextvars

# Request id of the HTTP call currently being served, if any
request_id_context = contextvars.ContextVar('request_id', default=None)


class RequestAwareLogger:
    """
    Thin wrapper over ``logging.Logger`` that stamps every record with the
    request id of the call being served.

    Callers may pass ``request_id=...`` explicitly; otherwise the id stored by
    ``RequestIDMiddleware`` is used.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _log(self, level: int, msg: str, *args, **kwargs):
        request_id = kwargs.pop('request_id', None) or request_id_context.get()
        if request_id:
            extra = kwargs.get('extra', {})
            extra['request_id'] = request_id
            kwargs['extra'] = extra
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, exc_info=True, **kwargs)


def get_logger(name: str) -> RequestAwareLogger:
    """Return a request-aware logger for ``name`` (usually ``__name__``)."""
    return RequestAwareLogger(name)


def set_request_context(request_id: str):
    request_id_context.set(request_id)


def clear_request_context():
    request_id_context.set(None)
