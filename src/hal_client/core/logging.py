import logging
import re
import sys
from typing import IO, Any, Iterator, Optional, Sequence, Tuple, Union

LOG_EXTRA_FIELDS = (
    "method",
    "url",
    "rel",
    "pointer",
    "status",
    "duration_ms",
    "attempt",
    "error_type",
)

_NEEDS_QUOTES = re.compile(r'[\s="]')


def logfmt_value(val: Any) -> str:
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, (int, float)):
        return str(val)
    s = str(val)
    if not s or _NEEDS_QUOTES.search(s):
        return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return s


class LogfmtFormatter(logging.Formatter):
    """
    One `key=value` line per record.

    Always writes level, logger and event (the message); then whichever of
    `fields` the record carries as extras.
    """

    def __init__(
        self, fields: Sequence[str] = LOG_EXTRA_FIELDS, *, with_time: bool = False
    ):
        super().__init__()
        self.fields = tuple(fields)
        self.with_time = with_time

    def _pairs(self, record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
        if self.with_time:
            yield "ts", self.formatTime(record, "%Y-%m-%dT%H:%M:%S")
        yield "level", record.levelname.lower()
        yield "logger", record.name
        msg = record.getMessage()
        if msg:
            yield "event", msg
        for key in self.fields:
            val = getattr(record, key, None)
            if val is not None:
                yield key, val
        if record.exc_info and record.exc_info[0] is not None:
            yield "exc_type", record.exc_info[0].__name__
            yield "exc", str(record.exc_info[1])

    def format(self, record: logging.LogRecord) -> str:
        return " ".join(f"{k}={logfmt_value(v)}" for k, v in self._pairs(record))


def setup_logging(
    level: Union[str, int] = "INFO",
    *,
    stream: Optional[IO[str]] = None,
    with_time: bool = False,
) -> logging.Handler:
    """
    Route root logging through a logfmt handler.
    Replaces a handler installed by an earlier call; other handlers stay.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h.formatter, LogfmtFormatter):
            root.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(LogfmtFormatter(with_time=with_time))
    root.addHandler(handler)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level if isinstance(level, int) else logging.INFO)
    return handler


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_EXTRA_FIELDS", "logfmt_value"]
