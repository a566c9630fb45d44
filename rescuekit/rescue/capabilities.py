# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/rescue/capabilities.py
"""
Save file capabilities (getcap -r) of the configured directory trees to
<VAR_DIR>/recovery/capabilities so that a restore can set them again.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from ..config.config_loader import RescueConfig
from ..core.exceptions import Fatal
from ..core.file_ops import write_lines
from ..core.utils import U
from ..host.inspector import HostInspector


def _under(path: str, directory: Path) -> bool:
    d = str(directory).rstrip("/")
    return path == d or path.startswith(d + "/")


class CapabilitiesSaver:
    def __init__(self, logger: logging.Logger, cfg: RescueConfig, host: HostInspector):
        self.logger = logger
        self.cfg = cfg
        self.host = host

    @property
    def output_path(self) -> Path:
        return self.cfg.recovery_dir / "capabilities"

    def excluded_dirs(self) -> List[Path]:
        # the rescue build itself must not end up in the list
        return [d for d in (self.cfg.build_dir, self.cfg.iso_dir) if d]

    def _keep(self, line: str, excluded: List[Path]) -> bool:
        # getcap prints "<path> <caps>" (older versions "<path> = <caps>")
        path = line.split()[0]
        return not any(_under(path, d) for d in excluded)

    def save(self) -> Optional[Path]:
        directories = [d for d in self.cfg.netfs_restore_capabilities if d.strip()]
        if not directories:
            self.logger.debug("NETFS_RESTORE_CAPABILITIES is empty, no capabilities saved")
            return None

        # truncate first, a stale list must not survive a failed run
        write_lines(self.output_path, [])

        if not U.has_binary("getcap", "setcap"):
            raise Fatal(msg="getcap and setcap are needed when NETFS_RESTORE_CAPABILITIES is non-empty")

        excluded = self.excluded_dirs()
        lines: List[str] = []
        for directory in directories:
            found = [ln for ln in self.host.getcap_recursive(directory) if self._keep(ln, excluded)]
            self.logger.debug("%d capability entries under %s", len(found), directory)
            lines.extend(found)

        write_lines(self.output_path, lines)
        self.logger.info("Saved %d capability entries to %s", len(lines), self.output_path)
        return self.output_path
