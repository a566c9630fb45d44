# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/__main__.py
"""
Console entry point. Exit status: 0 on success, the error's own code for
Fatal/BugError (99 for bugs), 130 on Ctrl+C, 1 for anything unexpected.
"""
from __future__ import annotations

import logging
import sys
import traceback
from typing import Optional, Sequence

from .cli.args import parse_args_with_config
from .core.exceptions import RescueKitError, format_exception_for_cli
from .orchestrator.orchestrator import Orchestrator

EXIT_INTERRUPTED = 130


def _report(logger: Optional[logging.Logger], level: int, msg: str) -> None:
    if logger is None:
        print(msg, file=sys.stderr)
    else:
        logger.log(level, msg)


def _run(argv: Optional[Sequence[str]]) -> int:
    logger: Optional[logging.Logger] = None
    try:
        args, _conf, logger = parse_args_with_config(argv)
    except RescueKitError as e:
        if not e.logged:
            _report(logger, logging.ERROR, f"💥 ERROR    {e}")
        return e.code
    except KeyboardInterrupt:
        _report(logger, logging.WARNING, "Interrupted (Ctrl+C)")
        return EXIT_INTERRUPTED

    try:
        return Orchestrator(logger, args).run()
    except RescueKitError as e:
        _report(logger, logging.ERROR, format_exception_for_cli(e, verbose=args.verbose or 0))
        return e.code
    except KeyboardInterrupt:
        _report(logger, logging.WARNING, "Interrupted (Ctrl+C)")
        return EXIT_INTERRUPTED
    except Exception as e:
        _report(logger, logging.ERROR, f"💥 UNHANDLED {type(e).__name__}: {e}")
        _report(logger, logging.DEBUG, traceback.format_exc())
        return 1


def main(argv: Optional[Sequence[str]] = None) -> None:
    raise SystemExit(_run(argv))


if __name__ == "__main__":
    main()
