# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# rescuekit/cli/args/__init__.py
"""
Argument parser modules for the rescuekit CLI.
"""
from __future__ import annotations

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
from .parser import _build_preparser, _load_merged_config, build_parser, parse_args_with_config
from .validators import validate_args

__all__ = [
    # Builder
    "HelpFormatter",
    "_build_epilog",
    # Groups
    "_add_global_config_logging",
    "_add_host_roots",
    "_add_kernel_and_capabilities",
    "_add_layout_paths",
    "_add_networking",
    "_add_resolver",
    "_add_steps",
    # Parser
    "_build_preparser",
    "_load_merged_config",
    "build_parser",
    "parse_args_with_config",
    # Validators
    "validate_args",
]
