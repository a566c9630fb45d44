# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/core/logger.py
"""
Project logger.

One named logger ("rescuekit") with a console handler on stderr and an
optional file handler. Console lines look like

    14:02:11 ✅ INFO     Recorded eth0 lines=23

where trailing key=value pairs come from `extra={"ctx": {...}}`. With
json_logs every record is one JSON object per line instead.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from termcolor import colored as _colored

TRACE = 5
if logging.getLevelName(TRACE) != "TRACE":
    logging.addLevelName(TRACE, "TRACE")


def _trace(self: logging.Logger, msg: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _trace  # type: ignore[attr-defined]

# levelname -> (emoji, color)
_LEVELS = {
    "TRACE": ("🧬", "cyan"),
    "DEBUG": ("🔍", "blue"),
    "INFO": ("✅", "green"),
    "WARNING": ("⚠️", "yellow"),
    "ERROR": ("💥", "red"),
    "CRITICAL": ("🧨", "red"),
}


def is_tty(stream=None) -> bool:
    """Whether `stream` (stdout by default) is an open terminal."""
    stream = sys.stdout if stream is None else stream
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


def _can_encode_emoji(stream) -> bool:
    try:
        "✅".encode(getattr(stream, "encoding", None) or "utf-8")
    except (UnicodeEncodeError, LookupError):
        return False
    return True


def c(text: str, color: Optional[str] = None, attrs: Optional[List[str]] = None, *, enable: bool = True) -> str:
    """termcolor wrapper; a no-op without a color or when disabled."""
    if not (enable and color):
        return text
    return _colored(text, color=color, attrs=attrs or [])


def _ctx_of(record: logging.LogRecord) -> Dict[str, str]:
    ctx: Optional[Mapping[str, Any]] = getattr(record, "ctx", None)
    if not ctx:
        return {}
    out: Dict[str, str] = {}
    for k in sorted(ctx, key=str):
        v = str(ctx[k]).replace("\n", "\\n")
        out[str(k)] = v if len(v) <= 240 else v[:239] + "…"
    return out


class EmojiFormatter(logging.Formatter):
    """
    Human console/file format. `detail` adds milliseconds, pid and the
    module:line of the call site (used for -vvv and for log files).
    """

    def __init__(self, *, color: bool = True, detail: bool = False, utc: bool = False, emoji: bool = True):
        super().__init__()
        self.color = color
        self.detail = detail
        self.utc = utc
        self.emoji = emoji

    def _clock(self, created: float) -> str:
        tz = _dt.timezone.utc if self.utc else None
        stamp = _dt.datetime.fromtimestamp(created, tz=tz)
        return stamp.strftime("%H:%M:%S.%f")[:-3] if self.detail else stamp.strftime("%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        icon, color = _LEVELS.get(record.levelname, ("•", None))
        use_color = self.color and is_tty(sys.stderr)

        level = c(f"{record.levelname:<8}", color, enable=use_color)
        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, color, ["bold"], enable=use_color)

        parts = [self._clock(record.created), icon if self.emoji else "·", level]
        if self.detail:
            parts.append(f"[pid={os.getpid()} {record.module}:{record.lineno}]")
        parts.append(msg)
        parts.extend(f"{k}={v}" for k, v in _ctx_of(record).items())
        line = " ".join(parts)

        if record.exc_info:
            tb = "\n".join("  " + ln for ln in self.formatException(record.exc_info).splitlines())
            line += "\n" + c(tb, "red", enable=use_color)
        return line


class JsonFormatter(logging.Formatter):
    """NDJSON: one object per record."""

    def __init__(self, *, utc: bool = True):
        super().__init__()
        self.utc = utc

    def format(self, record: logging.LogRecord) -> str:
        tz = _dt.timezone.utc if self.utc else None
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=tz).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "lineno": record.lineno,
        }
        ctx = _ctx_of(record)
        if ctx:
            obj["ctx"] = ctx
        if record.exc_info:
            obj["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else "Exception"
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False, default=str)


class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """
        -q: WARNING, -qq: ERROR (quiet wins), default INFO,
        -vv: DEBUG, -vvv: TRACE.
        """
        if quiet:
            return logging.ERROR if quiet >= 2 else logging.WARNING
        if verbose >= 3:
            return TRACE
        return logging.DEBUG if verbose >= 2 else logging.INFO

    @staticmethod
    def ok(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("✅ %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def warn(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.warning("⚠️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def trace(logger: logging.Logger, msg: str, *args: Any, **ctx: Any) -> None:
        fn = getattr(logger, "trace", None)
        if not callable(fn):
            logger.debug(msg, *args)
        elif ctx:
            fn(msg, *args, extra={"ctx": ctx})
        else:
            fn(msg, *args)

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: bool = True,
        utc: bool = False,
        logger_name: str = "rescuekit",
        json_logs: bool = False,
    ) -> logging.Logger:
        """
        (Re)configure the project logger. Calling it again replaces the
        handlers, so the CLI can set up logging before config is loaded.
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        level = Log._level_from_flags(verbose, quiet)
        logger.setLevel(level)

        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        handlers: List[logging.Handler] = []

        console = logging.StreamHandler(stream=sys.stderr)
        console.setFormatter(
            JsonFormatter(utc=utc)
            if json_logs
            else EmojiFormatter(color=color, detail=verbose >= 3, utc=utc, emoji=_can_encode_emoji(sys.stderr))
        )
        handlers.append(console)

        if log_file:
            path = Path(log_file).expanduser().resolve()
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, encoding="utf-8")
            fh.setFormatter(JsonFormatter(utc=utc) if json_logs else EmojiFormatter(color=False, detail=True, utc=utc))
            handlers.append(fh)

        for h in handlers:
            h.setLevel(level)
            logger.addHandler(h)

        logger.debug("Logger ready (level=%s, handlers=%d)", logging.getLevelName(level), len(handlers))
        return logger
