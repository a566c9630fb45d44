# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# rescuekit/cli/args/validators.py
from __future__ import annotations

import argparse
from typing import Any, Dict

from ...orchestrator.orchestrator import STEPS

REQUIRED_DIRS = ("rootfs_dir", "var_dir", "config_dir")


def _require(v: Any) -> bool:
    return v is not None and str(v).strip() != ""


def _validate_required_dirs(args: argparse.Namespace) -> None:
    missing = [k for k in REQUIRED_DIRS if not _require(getattr(args, k, None))]
    if missing:
        flags = ", ".join("--" + k.replace("_", "-") for k in missing)
        raise SystemExit(f"Missing required setting(s): {flags} (or YAML keys: {', '.join(missing)})")


def _validate_steps(args: argparse.Namespace) -> None:
    raw = getattr(args, "steps", None)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return
    items = raw.replace(",", " ").split() if isinstance(raw, str) else [str(x) for x in raw]
    unknown = [x for x in items if x.lower() not in STEPS]
    if unknown:
        raise SystemExit(f"Unknown step(s): {', '.join(unknown)}. Valid: {', '.join(STEPS)}")
    if not items:
        raise SystemExit(f"--steps selects nothing. Valid: {', '.join(STEPS)}")


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    """
    Config drives the run, CLI can override. Only checks, no side effects.
    """
    _validate_required_dirs(args)
    _validate_steps(args)
