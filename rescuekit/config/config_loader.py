# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# rescuekit/config/config_loader.py
"""
YAML/JSON configuration loading.

Config files are merged in order (later overrides earlier) and then applied
as argparse defaults, so anything given on the command line wins.

Keys are case-insensitive: the traditional upper-case variable names
(USE_RESOLV_CONF, SIMPLIFY_BONDING, ...) and their lower-case spellings are
the same option.
"""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from ..core.utils import U

CONFIG_SUFFIXES = (".yaml", ".yml", ".json")

_TRUE_WORDS = {"y", "yes", "true", "t", "1", "on", "ja", "j", "si", "s", "oui", "o"}
_FALSE_WORDS = {"n", "no", "false", "f", "0", "off", "nein", "non"}


def is_true(value: Any) -> bool:
    """True only for explicit 'yes'-like values (1, y, yes, true, on, ...)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple)):
        return bool(value) and is_true(value[0])
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_WORDS


def is_false(value: Any) -> bool:
    """True only for explicit 'no'-like values (0, n, no, false, off, ...)."""
    if isinstance(value, bool):
        return not value
    if isinstance(value, (list, tuple)):
        return bool(value) and is_false(value[0])
    if value is None:
        return False
    return str(value).strip().lower() in _FALSE_WORDS


def _normalize_key(k: Any) -> str:
    return str(k).strip().lower().replace("-", "_")


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, paths: Sequence[Union[str, Path]]) -> List[Path]:
        """
        Expand config arguments: directories become their sorted
        *.yaml/*.yml/*.json files; missing files are fatal.
        """
        out: List[Path] = []
        for raw in paths:
            p = Path(raw).expanduser()
            if p.is_dir():
                found = sorted(x for x in p.iterdir() if x.is_file() and x.suffix in CONFIG_SUFFIXES)
                logger.debug("Config dir %s expanded to %d file(s)", p, len(found))
                out.extend(found)
            elif p.is_file():
                out.append(p)
            else:
                U.die(logger, f"Config file not found: {p}")
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        text = U.safe_read_text(path)
        if text is None:
            U.die(logger, f"Cannot read config file: {path}")
        try:
            if path.suffix == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            U.die(logger, f"Invalid config file {path}: {e}")
        if data is None:
            return {}
        if not isinstance(data, dict):
            U.die(logger, f"Config file {path} must contain a mapping at top level")
        logger.debug("Loaded config %s (%d key(s))", path, len(data))
        return {_normalize_key(k): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[Path]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for p in paths:
            merged.update(Config.load_one(logger, Path(p)))
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """
        Set parser defaults from merged config. Unknown keys are reported
        and ignored so that a shared config file can carry other tools' keys.
        """
        known = {a.dest for a in parser._actions}
        defaults: Dict[str, Any] = {}
        for k, v in conf.items():
            if k in known:
                defaults[k] = v
            else:
                logger.warning("Ignoring unknown config key: %s", k)
        if defaults:
            parser.set_defaults(**defaults)


@dataclass
class RescueConfig:
    """Typed view of the options the build steps consume."""

    rootfs_dir: Path
    var_dir: Path
    config_dir: Path
    build_dir: Optional[Path] = None
    iso_dir: Optional[Path] = None

    # False, a file path, or literal resolv.conf lines
    use_resolv_conf: Union[bool, str, List[str], None] = None
    use_dhclient: bool = False
    use_static_networking: bool = False
    simplify_bonding: bool = False
    kernel_cmdline: str = ""
    netfs_restore_capabilities: List[str] = field(default_factory=list)
    modules: List[str] = field(default_factory=list)

    # Host inspection roots
    sys_root: Path = Path("/sys")
    proc_root: Path = Path("/proc")
    host_root: Path = Path("/")

    @property
    def recovery_dir(self) -> Path:
        return self.var_dir / "recovery"

    @property
    def dhcp_only(self) -> bool:
        """DHCP configures networking in the rescue system and nothing forces static setup."""
        return self.use_dhclient and not self.use_static_networking

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RescueConfig":
        def _path(name: str) -> Optional[Path]:
            v = getattr(args, name, None)
            return Path(v) if v else None

        caps = getattr(args, "netfs_restore_capabilities", None) or []
        if isinstance(caps, str):
            caps = caps.split()

        modules = getattr(args, "modules", None) or []
        if isinstance(modules, str):
            modules = modules.split()

        return cls(
            rootfs_dir=Path(args.rootfs_dir),
            var_dir=Path(args.var_dir),
            config_dir=Path(args.config_dir),
            build_dir=_path("build_dir"),
            iso_dir=_path("iso_dir"),
            use_resolv_conf=normalize_resolv_conf_option(getattr(args, "use_resolv_conf", None)),
            use_dhclient=is_true(getattr(args, "use_dhclient", False)),
            use_static_networking=is_true(getattr(args, "use_static_networking", False)),
            simplify_bonding=is_true(getattr(args, "simplify_bonding", False)),
            kernel_cmdline=str(getattr(args, "kernel_cmdline", "") or ""),
            netfs_restore_capabilities=[str(x) for x in caps],
            modules=[str(x) for x in modules],
            sys_root=_path("sys_root") or Path("/sys"),
            proc_root=_path("proc_root") or Path("/proc"),
            host_root=_path("host_root") or Path("/"),
        )


def normalize_resolv_conf_option(value: Any) -> Union[bool, str, List[str], None]:
    """
    USE_RESOLV_CONF may come as a YAML bool, a single string (file path,
    line, or false-word) or a list of lines. Empty means unset.
    """
    if value is None or value is True:
        # a bare "true" carries no content to write
        return None
    if value is False:
        return False
    if isinstance(value, (list, tuple)):
        lines = [str(x) for x in value]
        if not any(lines):
            return None
        if is_false(lines[0]):
            return False
        return lines
    s = str(value)
    if not s.strip():
        return None
    if is_false(s):
        return False
    return s
