import atexit
import json
import logging
import logging.config
from logging.handlers import RotatingFileHandler
import os
import pathlib
import datetime as dt
import sys
from typing import Any

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

CONFIG_ENV_VAR = "QCANVAS_LOGGING_CONFIG"
USER_CONFIG_FILE = "logging_config.json"
PACKAGED_CONFIG_FILE = pathlib.Path(__file__).parent.resolve() / "config.json"

_active_listener = None


def resolve_config_path(
    config_path: str | os.PathLike | None = None,
) -> pathlib.Path:
    """
    Picks the logging config file, first match wins:
    the explicit `config_path`, the file named by ``QCANVAS_LOGGING_CONFIG``,
    ``logging_config.json`` in the working directory and finally the
    config shipped with qcanvas
    """
    if config_path is not None:
        return pathlib.Path(config_path)
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return pathlib.Path(from_env)
    user_config = pathlib.Path(USER_CONFIG_FILE)
    if user_config.is_file():
        return user_config
    return PACKAGED_CONFIG_FILE


def setup_logging(config_path: str | os.PathLike | None = None) -> pathlib.Path:
    """
    Configures the ``qcanvas`` loggers from a dictConfig JSON file and
    starts the queue listener when the config defines ``queue_handler``.

    Calling it again replaces the previous configuration; the listener of
    the previous call is stopped first. Returns the file that was loaded.
    """
    global _active_listener

    config_file = resolve_config_path(config_path)
    with open(config_file) as f_in:
        config = json.load(f_in)

    if _active_listener is not None:
        _active_listener.stop()
        atexit.unregister(_active_listener.stop)
        _active_listener = None

    logging.config.dictConfig(config)

    queue_handler = logging.getHandlerByName("queue_handler")
    if queue_handler is not None:
        _active_listener = queue_handler.listener
        _active_listener.start()
        atexit.register(_active_listener.stop)
    return config_file


class QCanvasJSONFormatter(logging.Formatter):
    """
    Emits one JSON object per record.

    `fmt_keys` maps output keys to LogRecord attributes (``message`` and
    ``timestamp`` are computed). Fields passed through ``extra=`` by the
    simulator, such as ``event``, ``gate_id``, ``qubit`` or
    ``request_id``, are collected under ``context``.
    """

    def __init__(
        self,
        *,
        fmt_keys: dict[str, str] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}

    @override
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(self.to_dict(record), default=str)

    def to_dict(self, record: logging.LogRecord) -> dict:
        computed = {
            "message": record.getMessage(),
            "timestamp": dt.datetime.fromtimestamp(
                record.created, tz=dt.timezone.utc
            ).isoformat(),
        }
        payload = {
            key: computed[attr] if attr in computed else getattr(record, attr, None)
            for key, attr in self.fmt_keys.items()
        }
        for key, value in computed.items():
            if key not in self.fmt_keys.values():
                payload.setdefault(key, value)

        if record.exc_info is not None:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info is not None:
            payload["stack_info"] = self.formatStack(record.stack_info)

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        }
        if context:
            payload["context"] = context
        return payload


_RECORD_ATTRS = frozenset(
    vars(logging.makeLogRecord({})).keys() | {"message", "asctime"}
)


class RotatingFileHandlerWithDir(RotatingFileHandler):
    """
    RotatingFileHandler that creates the parent directory of the log file
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        filename = kwargs.get("filename", args[0] if args else None)
        if filename:
            pathlib.Path(filename).parent.mkdir(parents=True, exist_ok=True)
        super().__init__(*args, **kwargs)
