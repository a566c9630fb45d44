# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/host/inspector.py
"""
Read-only inspection of the running host.

Everything the build steps learn about the source system goes through
HostInspector: sysfs/procfs pseudo-files (relative to configurable roots so a
captured tree can stand in for the live one) and a few inspection commands
(`ip`, `ethtool`, `getcap`).
"""
from __future__ import annotations

import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Set

from ..core.utils import U

# Runs a command and returns its stdout, or None when the command is
# missing or fails.
Runner = Callable[[Sequence[str]], Optional[str]]

_LINK_FLAGS_RE = re.compile(r"<([^>]*)>")
_ETHTOOL_DRIVER_RE = re.compile(r"^driver:\s*(\S+)", re.MULTILINE)


class HostInspector:
    def __init__(
        self,
        logger: logging.Logger,
        *,
        sys_root: Path = Path("/sys"),
        proc_root: Path = Path("/proc"),
        runner: Optional[Runner] = None,
    ):
        self.logger = logger
        self.sys_root = Path(sys_root)
        self.proc_root = Path(proc_root)
        self.runner: Runner = runner or self._run

    # ---------------------------
    # Command execution
    # ---------------------------

    def _run(self, cmd: Sequence[str]) -> Optional[str]:
        if not U.which(cmd[0]):
            self.logger.debug("%s not found on this host", cmd[0])
            return None
        try:
            cp = U.run_cmd(self.logger, list(cmd), check=False, capture=True)
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.debug("%s failed: %s", cmd[0], e)
            return None
        if cp.returncode != 0:
            self.logger.debug("%s exited with %d: %s", " ".join(cmd), cp.returncode, (cp.stderr or "").strip())
            return None
        return cp.stdout or ""

    # ---------------------------
    # Pseudo-file helpers
    # ---------------------------

    @staticmethod
    def _read(p: Path) -> Optional[str]:
        try:
            return p.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    @staticmethod
    def _list_dir(d: Path) -> List[str]:
        try:
            return sorted(x.name for x in d.iterdir())
        except OSError:
            return []

    @staticmethod
    def _link_basename(p: Path) -> Optional[str]:
        try:
            return os.path.basename(os.path.normpath(os.readlink(p))) or None
        except OSError:
            return None

    # ---------------------------
    # Network interfaces
    # ---------------------------

    @property
    def class_net(self) -> Path:
        return self.sys_root / "class" / "net"

    @property
    def virtual_net(self) -> Path:
        return self.sys_root / "devices" / "virtual" / "net"

    @property
    def bonding_dir(self) -> Path:
        return self.proc_root / "net" / "bonding"

    @property
    def vlan_dir(self) -> Path:
        return self.proc_root / "net" / "vlan"

    def interface_path(self, name: str) -> Path:
        return self.class_net / name

    def list_interfaces(self) -> List[str]:
        return self._list_dir(self.class_net)

    def list_virtual_interfaces(self) -> List[str]:
        return self._list_dir(self.virtual_net)

    def read_attr(self, name: str, attr: str) -> Optional[str]:
        text = self._read(self.interface_path(name) / attr)
        return text.strip() if text is not None else None

    def has_attr(self, name: str, attr: str) -> bool:
        p = self.interface_path(name) / attr
        return p.exists() or p.is_symlink()

    def mac_address(self, name: str) -> Optional[str]:
        return self.read_attr(name, "address")

    def mtu(self, name: str) -> Optional[str]:
        return self.read_attr(name, "mtu")

    def driver_link(self, name: str, rel: str) -> Optional[str]:
        """Basename of a driver symlink below the interface's sysfs dir."""
        return self._link_basename(self.interface_path(name) / rel)

    def ethtool_driver(self, name: str) -> Optional[str]:
        out = self.runner(["ethtool", "-i", name])
        if not out:
            return None
        m = _ETHTOOL_DRIVER_RE.search(out)
        return m.group(1) if m else None

    def is_up(self, name: str) -> bool:
        """Administratively up: 'UP' among the link flags of `ip link show`."""
        out = self.runner(["ip", "link", "show", "dev", name])
        if not out:
            return False
        m = _LINK_FLAGS_RE.search(out)
        if not m:
            return False
        return "UP" in m.group(1).split(",")

    def global_addresses(self, name: str) -> List[str]:
        """inet/inet6 addresses (CIDR) of global scope, in `ip` order."""
        out = self.runner(["ip", "addr", "show", "dev", name, "scope", "global"])
        addrs: List[str] = []
        for ln in (out or "").splitlines():
            parts = ln.split()
            if len(parts) >= 2 and parts[0] in ("inet", "inet6"):
                addrs.append(parts[1])
        return addrs

    def loaded_modules(self) -> Set[str]:
        text = self._read(self.proc_root / "modules") or ""
        return {ln.split()[0] for ln in text.splitlines() if ln.strip()}

    # ---------------------------
    # Bonding / VLAN
    # ---------------------------

    def has_bonding(self) -> bool:
        return self.bonding_dir.is_dir()

    def list_bonding_interfaces(self) -> List[str]:
        return self._list_dir(self.bonding_dir)

    def bonding_status(self, bond: str) -> Optional[str]:
        return self._read(self.bonding_dir / bond)

    def bonding_slaves(self, bond: str) -> List[str]:
        """Enslaved members as listed by sysfs (bonding/slaves)."""
        return (self.read_attr(bond, "bonding/slaves") or "").split()

    def bonding_status_slaves(self, bond: str) -> List[str]:
        """Enslaved members as listed by the 'Slave Interface:' lines of the status file."""
        out: List[str] = []
        for ln in (self.bonding_status(bond) or "").splitlines():
            if ln.startswith("Slave Interface:"):
                member = ln.split(":", 1)[1].strip()
                if member:
                    out.append(member)
        return out

    def has_vlan(self) -> bool:
        return self.vlan_dir.is_dir()

    @property
    def vlan_config_path(self) -> Path:
        return self.vlan_dir / "config"

    def vlan_config(self) -> Optional[str]:
        return self._read(self.vlan_config_path)

    def list_vlan_interfaces(self) -> List[str]:
        return [n for n in self._list_dir(self.vlan_dir) if n != "config"]

    # ---------------------------
    # Kernel / capabilities
    # ---------------------------

    def kernel_cmdline(self) -> str:
        return (self._read(self.proc_root / "cmdline") or "").strip()

    def getcap_recursive(self, directory: str) -> List[str]:
        out = self.runner(["getcap", "-r", directory])
        return [ln for ln in (out or "").splitlines() if ln.strip()]
