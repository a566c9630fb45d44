# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/cli/args/groups.py
"""
Option groups of the rescuekit parser. Every dest matches a config key, so
`Config.apply_as_defaults` can feed YAML values into any of them.
"""
from __future__ import annotations

import argparse

# (flag, help) of the networking switches; None means "not given" so a
# config value is not overridden by an absent flag
_NETWORK_SWITCHES = (
    ("--use-dhclient", "DHCP configures networking in the rescue system."),
    ("--use-static-networking", "Record the static network setup even when DHCP is used."),
    ("--simplify-bonding", "Put each bond's addresses on its first slave instead of rebuilding the bond."),
)


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    from ... import __version__

    g = p.add_argument_group("config and logging")
    g.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON file or directory of them; repeat to layer, the last one wins.",
    )
    g.add_argument("--dump-config", action="store_true", help="Show the merged configuration as JSON and exit.")
    g.add_argument("--dump-args", action="store_true", help="Show the effective options as JSON and exit.")
    g.add_argument("--version", action="version", version=f"rescuekit {__version__}")
    g.add_argument("-v", "--verbose", action="count", default=0, help="-vv debug, -vvv trace.")
    g.add_argument("-q", "--quiet", action="count", default=0, help="-q warnings only, -qq errors only.")
    g.add_argument("--log-file", default=None, help="Also log to this file.")
    g.add_argument("--json-logs", action="store_true", help="One JSON object per log record.")


def _add_layout_paths(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("rescue system layout")
    for flag, text in (
        ("--rootfs-dir", "Root of the rescue system being built."),
        ("--var-dir", "State directory; recovery data goes to <var-dir>/recovery."),
        ("--config-dir", "Directory holding mappings/ip_addresses."),
        ("--build-dir", "Build directory, left out of saved capabilities."),
        ("--iso-dir", "Output directory, left out of saved capabilities."),
    ):
        g.add_argument(flag, default=None, help=text)


def _add_host_roots(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("host roots", "Point these at a captured tree to inspect another system offline.")
    g.add_argument("--sys-root", default="/sys", help="sysfs mount point.")
    g.add_argument("--proc-root", default="/proc", help="procfs mount point.")
    g.add_argument("--host-root", default="/", help="Root whose /etc and /run are read.")


def _add_networking(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("networking")
    for flag, text in _NETWORK_SWITCHES:
        g.add_argument(flag, action="store_true", default=None, help=text)


def _add_resolver(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("name resolution")
    g.add_argument(
        "--use-resolv-conf",
        nargs="+",
        default=None,
        metavar="VALUE",
        help="'no' for no resolv.conf, a file to copy, or the literal lines to write.",
    )


def _add_kernel_and_capabilities(p: argparse.ArgumentParser) -> None:
    g = p.add_argument_group("kernel, capabilities and modules")
    g.add_argument("--kernel-cmdline", default="", help="Configured rescue kernel command line.")
    g.add_argument(
        "--netfs-restore-capabilities",
        nargs="*",
        default=[],
        metavar="DIR",
        help="Directories whose file capabilities are saved with getcap -r.",
    )
    g.add_argument("--modules", nargs="*", default=[], metavar="MODULE", help="Extra kernel modules for the rescue system.")


def _add_steps(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--steps",
        default=None,
        help="Comma separated subset of cmdline,network,capabilities,resolv (always run in that order).",
    )
