# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# rescuekit/orchestrator/orchestrator.py

from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel

from ..config.config_loader import RescueConfig
from ..core.logger import Log, is_tty
from ..core.logging_utils import log_step
from ..core.utils import U
from ..host.inspector import HostInspector
from ..network.recorder import NetworkDeviceRecorder
from ..rescue.capabilities import CapabilitiesSaver
from ..rescue.kernel_cmdline import KernelCmdlineAugmenter
from ..rescue.resolv_conf import ResolvConfVerifier

# execution order; --steps only selects, it never reorders
STEPS = ("cmdline", "network", "capabilities", "resolv")


def parse_steps(value: Any) -> List[str]:
    """'network,resolv' / ['network', 'resolv'] / None -> ordered step list."""
    if value is None or value == "" or value == []:
        return list(STEPS)
    if isinstance(value, str):
        items = value.replace(",", " ").split()
    else:
        items = [str(x).strip() for x in value]
    wanted = {x.lower() for x in items if x}
    return [s for s in STEPS if s in wanted]


class Orchestrator:
    """
    Runs the rescue system build steps against one configuration.
    """

    def __init__(
        self,
        logger: logging.Logger,
        args: argparse.Namespace,
        *,
        host: Optional[HostInspector] = None,
    ):
        self.logger = logger
        self.args = args
        self.cfg = RescueConfig.from_args(args)
        self.host = host or HostInspector(logger, sys_root=self.cfg.sys_root, proc_root=self.cfg.proc_root)
        self.steps = parse_steps(getattr(args, "steps", None))
        self.summary: Dict[str, Any] = {}

        Log.trace(
            self.logger,
            "🧠 Orchestrator init: rootfs=%s var_dir=%s steps=%s",
            self.cfg.rootfs_dir,
            self.cfg.var_dir,
            ",".join(self.steps),
        )

    # ---------------------------
    # Steps
    # ---------------------------

    def _step_cmdline(self) -> None:
        self.cfg.kernel_cmdline = KernelCmdlineAugmenter(self.logger, self.host).augment(self.cfg.kernel_cmdline)
        self.summary["kernel_cmdline"] = self.cfg.kernel_cmdline

    def _step_network(self) -> None:
        ctx = NetworkDeviceRecorder(self.logger, self.cfg, self.host).record()
        if ctx is None:
            self.summary["network"] = "DHCP"
            return
        for mod in ctx.extra_modules:
            if mod not in self.cfg.modules:
                self.cfg.modules.append(mod)
        self.summary["network"] = ctx.summarize()
        self.summary["modules"] = list(self.cfg.modules)

    def _step_capabilities(self) -> None:
        out = CapabilitiesSaver(self.logger, self.cfg, self.host).save()
        self.summary["capabilities"] = str(out) if out else None

    def _step_resolv(self) -> None:
        self.summary["nameserver"] = ResolvConfVerifier(self.logger, self.cfg).verify()

    def _handlers(self) -> Dict[str, Callable[[], None]]:
        return {
            "cmdline": self._step_cmdline,
            "network": self._step_network,
            "capabilities": self._step_capabilities,
            "resolv": self._step_resolv,
        }

    _TITLES = {
        "cmdline": "Augmenting KERNEL_CMDLINE",
        "network": "Recording network devices",
        "capabilities": "Saving file capabilities",
        "resolv": "Verifying resolv.conf",
    }

    # ---------------------------
    # Main entry
    # ---------------------------

    def run(self) -> int:
        U.banner(self.logger, "rescuekit")
        handlers = self._handlers()
        for name in self.steps:
            with log_step(self.logger, self._TITLES[name]):
                handlers[name]()

        if "cmdline" in self.steps:
            self.logger.info("KERNEL_CMDLINE=%s", self.cfg.kernel_cmdline)
        self._report(self.steps)
        return 0

    def _report(self, steps: Sequence[str]) -> None:
        lines = [f"{k}: {v}" for k, v in self.summary.items()]
        if not lines:
            return
        if is_tty():
            Console(stderr=False).print(Panel("\n".join(lines), title=f"rescuekit: {', '.join(steps)}", expand=True))
            return
        for ln in lines:
            self.logger.info("%s", ln)
