# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/rescue/kernel_cmdline.py
"""
Carry important kernel options of the running system into the rescue
system's KERNEL_CMDLINE.

Persistent interface naming (net.ifnames, biosdevname) must match between
the host and the rescue system for the recorded network setup to apply.
"""
from __future__ import annotations

import logging
from typing import List

from ..core.logger import Log
from ..host.inspector import HostInspector

IMPORTANT_OPTIONS = ("net.ifnames", "biosdevname")


def option_key(option: str) -> str:
    """Everything before the last '=' ('net.ifnames=0' -> 'net.ifnames')."""
    return option.rsplit("=", 1)[0]


def important_options(cmdline: str) -> List[str]:
    return [opt for opt in cmdline.split() if option_key(opt) in IMPORTANT_OPTIONS]


def merge_kernel_options(logger: logging.Logger, configured: str, proposed: List[str]) -> str:
    """
    Append proposed options to the configured command line. An option whose
    key is already configured is skipped: the configuration wins.
    """
    result = configured
    for option in proposed:
        key = option_key(option)
        existing = next((o for o in result.split() if option_key(o) == key), None)
        if existing is not None:
            logger.info(
                "Current kernel option [%s] superseded by [%s] in your configuration (KERNEL_CMDLINE)",
                option,
                existing,
            )
            continue
        Log.ok(logger, f"Adding {option} to KERNEL_CMDLINE")
        result = f"{result} {option}" if result else option
    return result


class KernelCmdlineAugmenter:
    def __init__(self, logger: logging.Logger, host: HostInspector):
        self.logger = logger
        self.host = host

    def augment(self, kernel_cmdline: str) -> str:
        proposed = important_options(self.host.kernel_cmdline())
        if not proposed:
            self.logger.debug("No important kernel options on the current command line")
            return kernel_cmdline
        return merge_kernel_options(self.logger, kernel_cmdline, proposed)
