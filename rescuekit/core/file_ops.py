# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# rescuekit/core/file_ops.py
"""
File helpers for writing into the rescue system tree.

Files under the target root are produced once per build; writes go through
a temporary file and a rename so a failed step never leaves half a file.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterable, Optional


@contextmanager
def atomic_write(
    target_path: Path,
    *,
    suffix: str = ".part",
    mode: Optional[int] = None,
) -> Generator[Path, None, None]:
    """
    Context manager for atomic file writes using temporary file + rename.

    Yields the temporary path; on success it replaces target_path, on
    failure the temporary file is removed and the exception propagates.

    Example:
        with atomic_write(rootfs / "etc/resolv.conf") as tmp:
            tmp.write_text("nameserver 192.0.2.1\\n")
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        suffix=suffix,
        prefix=f".{target_path.name}.",
        dir=str(target_path.parent),
    )
    temp_path = Path(temp_name)

    try:
        os.close(fd)
        yield temp_path
        if mode is not None:
            os.chmod(temp_path, mode)
        os.replace(temp_path, target_path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def write_text_atomic(target_path: Path, content: str, *, mode: Optional[int] = None) -> None:
    with atomic_write(target_path, mode=mode) as tmp:
        tmp.write_text(content, encoding="utf-8")


def write_lines(target_path: Path, lines: Iterable[str], *, mode: Optional[int] = None) -> None:
    """Write lines (newline terminated) atomically, replacing the target."""
    write_text_atomic(target_path, "".join(f"{ln}\n" for ln in lines), mode=mode)


def append_lines(target_path: Path, lines: Iterable[str]) -> None:
    """Append lines to a file, creating it (and its parent) if needed."""
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)
    with open(target_path, "a", encoding="utf-8") as f:
        for ln in lines:
            f.write(f"{ln}\n")


def copy_file(src: Path, dst: Path) -> None:
    """Copy file content (not the link) to dst, replacing whatever dst was."""
    dst = Path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    if dst.is_symlink() or dst.exists():
        dst.unlink()
    shutil.copyfile(src, dst)


def safe_unlink(path: Path) -> None:
    """Remove a file or dangling symlink, ignoring a missing path."""
    Path(path).unlink(missing_ok=True)
