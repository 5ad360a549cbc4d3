from datetime import datetime, timezone
import inspect
import json
import logging
import pathlib
import traceback
from typing import Dict, List, TextIO


class BridgeLogger:
    """Wraps a logging.Logger so that it's easy to use str.format syntax."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def debug(
        self, format_string: str, *args: object, **kwargs: object
    ) -> None:
        self._log(logging.DEBUG, format_string, args, kwargs)

    def info(
        self, format_string: str, *args: object, **kwargs: object
    ) -> None:
        self._log(logging.INFO, format_string, args, kwargs)

    def warning(
        self, format_string: str, *args: object, **kwargs: object
    ) -> None:
        self._log(logging.WARNING, format_string, args, kwargs)

    def _log(
        self,
        level: int,
        format_string: str,
        args: List[object],
        kwargs: Dict[str, object],
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        # The caller's frame is recorded so the JSON formatter can report
        # where the message came from instead of this wrapper. It is two
        # frames up, past debug, info or warning.
        frame = inspect.currentframe().f_back.f_back  # type: ignore
        caller = inspect.FrameInfo(
            frame, *inspect.getframeinfo(frame, context=0)
        )
        exc_info = kwargs.pop('exc_info', None)
        self._logger.log(
            level,
            _DelayedFormat(format_string, args, kwargs),
            exc_info=exc_info,
            extra={'caller': caller},
        )


def get_logger(name: str) -> BridgeLogger:
    python_logger = logging.getLogger(name)
    python_logger.addHandler(logging.NullHandler())
    return BridgeLogger(python_logger)


class _LogRecordEncoder(json.JSONEncoder):
    """A JSON Encoder that supports logging.LogRecord objects."""

    def default(self, obj: object):
        if isinstance(obj, logging.LogRecord):
            caller = getattr(obj, 'caller', None)
            if caller is None:
                path_name, line_number, function_name = (
                    obj.pathname,
                    obj.lineno,
                    obj.funcName,
                )
                module = obj.module
            else:
                path_name, line_number, function_name = (
                    caller.filename,
                    caller.lineno,
                    caller.function,
                )
                module = caller.frame.f_globals['__name__']
            return {
                'name': obj.name,
                'message': obj.getMessage(),
                'level_name': obj.levelname,
                'path_name': path_name,
                'file_name': pathlib.Path(path_name).name,
                'module': module,
                'exception': (
                    traceback.format_exception(*obj.exc_info)
                    if obj.exc_info
                    else None
                ),
                'line_number': line_number,
                'function_name': function_name,
                'created': datetime.fromtimestamp(
                    obj.created, timezone.utc
                ).isoformat(),
                'process': obj.process,
            }
        return super().default(obj)


class _JSONFormatter(logging.Formatter):
    """A logging formatter for producing structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(record, cls=_LogRecordEncoder)


def init_logging(stream: TextIO, level: int = logging.DEBUG) -> logging.Handler:
    """Send the package's logs to stream, one JSON object per line."""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(_JSONFormatter())
    logger = logging.getLogger('jlbridge')
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


class _DelayedFormat:
    def __init__(
        self, format_string: str, args: List[object], kwargs: Dict[str, object]
    ) -> None:
        self._format_string, self._args, self._kwargs = (
            format_string,
            args,
            kwargs,
        )

    def __str__(self) -> str:
        return self._format_string.format(*self._args, **self._kwargs)
