# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/cli/args/parser.py
"""
Two-pass command line parsing.

The first pass only picks up the flags needed before anything else can
happen (config files, logging, dump switches). Merged config values then
become parser defaults, so the second, full pass lets the command line
override any config key.
"""
from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, NoReturn, Optional, Sequence, Tuple

from ...config.config_loader import Config
from ...core.logger import Log, c
from ...core.utils import U
from .builder import HelpFormatter, _build_epilog
from .groups import (
    _add_global_config_logging,
    _add_host_roots,
    _add_kernel_and_capabilities,
    _add_layout_paths,
    _add_networking,
    _add_resolver,
    _add_steps,
)
from .validators import validate_args

# help output lists the groups in this order
_GROUPS = (
    _add_global_config_logging,
    _add_layout_paths,
    _add_networking,
    _add_resolver,
    _add_kernel_and_capabilities,
    _add_host_roots,
    _add_steps,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rescuekit",
        description=c("rescuekit: record the host's network, DNS and kernel setup for a rescue system", "green", ["bold"]),
        formatter_class=HelpFormatter,
        epilog=_build_epilog(),
    )
    for add_group in _GROUPS:
        add_group(p)
    return p


def _build_preparser() -> argparse.ArgumentParser:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    for flags in (("-v", "--verbose"), ("-q", "--quiet")):
        pre.add_argument(*flags, action="count", default=0)
    pre.add_argument("--log-file", default=None)
    for switch in ("--json-logs", "--dump-config", "--dump-args"):
        pre.add_argument(switch, action="store_true")
    return pre


def _load_merged_config(logger: Any, cfgs: Sequence[str]) -> Dict[str, Any]:
    """Later files override earlier ones; directories and globs are expanded."""
    if not cfgs:
        return {}
    return Config.load_many(logger, Config.expand_configs(logger, list(cfgs)))


def _dump_and_exit(obj: Any) -> NoReturn:
    print(U.json_dump(obj))
    raise SystemExit(0)


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Any = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], Any]:
    """Returns (args, merged config, logger). --dump-* exits with status 0."""
    argv = list(sys.argv[1:] if argv is None else argv)

    early, _ = _build_preparser().parse_known_args(argv)
    if logger is None:
        logger = Log.setup(early.verbose, early.log_file, quiet=early.quiet, json_logs=early.json_logs)

    conf = _load_merged_config(logger, early.config)
    if early.dump_config:
        _dump_and_exit(conf)

    parser = build_parser()
    Config.apply_as_defaults(logger, parser, conf)
    args = parser.parse_args(argv)
    if early.dump_args:
        _dump_and_exit(vars(args))

    validate_args(args, conf)
    return args, conf, logger
