# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/rescue/resolv_conf.py
"""
Make sure /etc/resolv.conf in the rescue system is actually usable there.

Whatever DNS setup the original host runs (a local name server, a stub
resolver like systemd-resolved) is not replicated in the rescue system, so a
plain resolv.conf with a remote name server is what is needed. The operator
can take over completely via USE_RESOLV_CONF:

  - false: no resolv.conf at all
  - an existing non-empty file: copied verbatim
  - anything else: the lines written to resolv.conf as given
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from ..config.config_loader import RescueConfig
from ..core.exceptions import Fatal, wrap_fatal
from ..core.file_ops import copy_file, safe_unlink, write_lines
from ..core.logger import Log
from ..core.utils import U

RESOLV_CONF_REL = Path("etc/resolv.conf")
SYSTEMD_RESOLVED_REL = Path("run/systemd/resolve/resolv.conf")

_NAMESERVER_RE = re.compile(r"^nameserver\s")


def is_loopback_nameserver(value: str) -> bool:
    # TODO: decide whether the IPv6 loopback '::1' is useless as well
    return value.startswith("127.")


def _is_nonempty_file(p: Path) -> bool:
    # a resolv.conf line such as a long "search" list is no valid path
    try:
        return p.is_file() and p.stat().st_size > 0
    except OSError:
        return False


def nameserver_values(text: str) -> List[str]:
    """Values of `nameserver <value>` lines; the keyword must start the line."""
    out: List[str] = []
    for ln in text.splitlines():
        if not _NAMESERVER_RE.match(ln):
            continue
        parts = ln.split()
        if len(parts) >= 2:
            out.append(parts[1])
    return out


class ResolvConfVerifier:
    def __init__(self, logger: logging.Logger, cfg: RescueConfig):
        self.logger = logger
        self.cfg = cfg

    @property
    def target(self) -> Path:
        return self.cfg.rootfs_dir / RESOLV_CONF_REL

    @property
    def host_resolv_conf(self) -> Path:
        return self.cfg.host_root / RESOLV_CONF_REL

    @property
    def systemd_resolv_conf(self) -> Path:
        return self.cfg.host_root / SYSTEMD_RESOLVED_REL

    def verify(self) -> Optional[str]:
        """
        Returns the first usable nameserver, or None when the operator's
        override or DHCP makes the check moot. Raises Fatal otherwise.
        """
        if self.cfg.use_resolv_conf is not None:
            self._apply_override(self.cfg.use_resolv_conf)
            return None

        if self.target.is_symlink():
            self._materialize_symlink()

        valid = self.find_valid_nameserver()
        if valid:
            return valid

        # dhclient-script regenerates resolv.conf while the rescue system starts
        if self.cfg.dhcp_only:
            Log.ok(
                self.logger,
                f"No nameserver or only loopback addresses in {self.target} should not matter because USE_DHCLIENT is true",
            )
            return None

        raise Fatal(
            msg=f"No nameserver or only loopback addresses in {self.target}, specify a real nameserver via USE_RESOLV_CONF"
        )

    def _apply_override(self, option) -> None:
        safe_unlink(self.target)
        if option is False:
            self.logger.info("No %s in the rescue system because USE_RESOLV_CONF is false", RESOLV_CONF_REL)
            return

        lines = [option] if isinstance(option, str) else list(option)
        source = Path(lines[0])
        if _is_nonempty_file(source):
            copy_file(source, self.target)
            self.logger.info("Copied %s to %s (USE_RESOLV_CONF)", source, self.target)
            return

        write_lines(self.target, lines, mode=0o644)
        self.logger.info("Wrote %d line(s) from USE_RESOLV_CONF to %s", len(lines), self.target)

    def _materialize_symlink(self) -> None:
        # Ubuntu links /etc/resolv.conf to a stub resolver file; the rescue
        # system needs the real content.
        safe_unlink(self.target)
        if self.systemd_resolv_conf.is_file():
            source = self.systemd_resolv_conf
        else:
            source = self.host_resolv_conf
        try:
            copy_file(source, self.target)
        except OSError as e:
            raise wrap_fatal(f"Failed to copy {source} to {self.target}", e, source=str(source))
        self.logger.info("Replaced symlinked %s with the content of %s", self.target, source)

    def find_valid_nameserver(self) -> Optional[str]:
        text = U.safe_read_text(self.target) or ""
        for value in nameserver_values(text):
            if is_loopback_nameserver(value):
                self.logger.info("Useless loopback nameserver '%s' in %s", value, self.target)
                continue
            self.logger.info("Supposedly valid nameserver '%s' in %s", value, self.target)
            return value
        return None
