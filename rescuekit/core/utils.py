# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/core/utils.py
from __future__ import annotations

import json
import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Any, List, Optional, Sequence

from .exceptions import Fatal


class U:
    """Small helpers shared by the build steps."""

    @staticmethod
    def die(logger: logging.Logger, msg: str, code: int = 1) -> None:
        logger.error(msg)
        raise Fatal(code, msg, logged=True)

    @staticmethod
    def which(prog: str) -> Optional[str]:
        return shutil.which(prog)

    @staticmethod
    def has_binary(*progs: str) -> bool:
        """True when every program in `progs` is on PATH."""
        return all(U.which(p) for p in progs)

    @staticmethod
    def json_dump(obj: Any) -> str:
        return json.dumps(obj, indent=2, sort_keys=True, default=str)

    @staticmethod
    def banner(logger: logging.Logger, title: str) -> None:
        rule = "─" * max(10, len(title) + 2)
        for text in (rule, f" {title}", rule):
            logger.info(text)

    @staticmethod
    def safe_read_text(p: Path) -> Optional[str]:
        try:
            return Path(p).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    @staticmethod
    def read_and_strip(p: Path) -> List[str]:
        """Non-empty lines of `p` with '#' comments cut off; [] if unreadable."""
        stripped = (ln.partition("#")[0].strip() for ln in (U.safe_read_text(p) or "").splitlines())
        return [ln for ln in stripped if ln]

    @staticmethod
    def run_cmd(
        logger: logging.Logger,
        cmd: Sequence[str],
        *,
        check: bool = True,
        capture: bool = False,
        timeout: Optional[int] = None,
        fatal: bool = False,
    ) -> subprocess.CompletedProcess:
        """
        subprocess.run with logging. Failures are logged and re-raised, or
        turned into Fatal when `fatal` is set (exit 124 for timeouts).
        """
        argv = list(cmd)
        shown = shlex.join(argv)
        logger.debug("Running: %s", shown)
        try:
            return subprocess.run(argv, check=check, capture_output=capture, text=True, timeout=timeout)
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or "").strip()
            logger.error("Command failed: %s (rc=%s)%s", shown, e.returncode, f": {detail}" if detail else "")
            if fatal:
                raise Fatal(e.returncode or 1, f"Command failed: {shown}") from e
            raise
        except subprocess.TimeoutExpired as e:
            logger.error("Command timed out after %ss: %s", timeout, shown)
            if fatal:
                raise Fatal(124, f"Command timed out: {shown}") from e
            raise
        except OSError as e:
            logger.error("Cannot run %s: %s", shown, e)
            if fatal:
                raise Fatal(1, f"Cannot run {shown}: {e}") from e
            raise
