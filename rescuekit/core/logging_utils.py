# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/core/logging_utils.py
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator

# lowest level first; the last threshold not above the record level wins
_EMOJI_THRESHOLDS = (
    (logging.NOTSET, "🔍"),
    (logging.INFO, "✅"),
    (logging.WARNING, "⚠️"),
    (logging.ERROR, "❌"),
)


def emoji_for_level(level: int) -> str:
    icon = _EMOJI_THRESHOLDS[0][1]
    for threshold, candidate in _EMOJI_THRESHOLDS:
        if level >= threshold:
            icon = candidate
    return icon


def log_with_emoji(logger: logging.Logger, level: int, msg: str, *args: Any) -> None:
    logger.log(level, f"{emoji_for_level(level)} {msg}", *args)


@contextmanager
def log_step(logger: logging.Logger, description: str) -> Iterator[None]:
    """
    Announce a build step, then report it as done or failed with the
    elapsed time. Exceptions are logged and re-raised unchanged.

        with log_step(logger, "Recording network devices"):
            recorder.record()
    """
    started = time.monotonic()
    log_with_emoji(logger, logging.INFO, "%s ...", description)
    try:
        yield
    except Exception as e:
        log_with_emoji(logger, logging.ERROR, "%s failed (%.2fs): %s", description, time.monotonic() - started, e)
        raise
    log_with_emoji(logger, logging.INFO, "%s done (%.2fs)", description, time.monotonic() - started)
