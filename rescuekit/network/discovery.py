# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/network/discovery.py
"""
Discovery of the host's network devices.

Physical interfaces are everything in /sys/class/net that is neither a
virtual device nor the bonding_masters control file. Drivers are resolved
through an ordered list of probes; the first one that yields a name wins.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from ..core.utils import U
from ..host.inspector import HostInspector
from .model import BondingMode, VlanInterface, parse_vlan_config

BONDING_MASTERS = "bonding_masters"

# Drivers that announce themselves under a different module name.
DRIVER_ALIASES = {
    "vif": "xennet",
}

DriverProbe = Callable[[str], Optional[str]]


def physical_interface_names(all_interfaces: List[str], virtual_interfaces: List[str]) -> List[str]:
    """all - virtual - {bonding_masters}, keeping the order of all_interfaces."""
    virtual = set(virtual_interfaces)
    return [n for n in all_interfaces if n not in virtual and n != BONDING_MASTERS]


class NetworkDiscovery:
    def __init__(self, logger: logging.Logger, host: HostInspector):
        self.logger = logger
        self.host = host

    # ---------------------------
    # Interfaces
    # ---------------------------

    def physical_interfaces(self) -> List[str]:
        names = physical_interface_names(self.host.list_interfaces(), self.host.list_virtual_interfaces())
        self.logger.debug("Physical network interfaces: %s", " ".join(names) or "(none)")
        return names

    # ---------------------------
    # Driver resolution
    # ---------------------------

    def _probe_device_driver(self, name: str) -> Optional[str]:
        # virtio_net, xennet and vmxnet on recent kernels
        if not self.host.has_attr(name, "device/driver"):
            return None
        driver = self.host.driver_link(name, "device/driver")
        return DRIVER_ALIASES.get(driver, driver) if driver else None

    def _probe_legacy_driver(self, name: str) -> Optional[str]:
        # older kernels (2.6.18) link the driver from the interface itself
        if not self.host.has_attr(name, "driver"):
            return None
        return self.host.driver_link(name, "driver")

    def _probe_ethtool(self, name: str) -> Optional[str]:
        return self.host.ethtool_driver(name)

    def driver_probes(self) -> List[Tuple[str, DriverProbe]]:
        return [
            ("device/driver", self._probe_device_driver),
            ("driver", self._probe_legacy_driver),
            ("ethtool", self._probe_ethtool),
        ]

    def resolve_driver(self, name: str) -> Optional[str]:
        for label, probe in self.driver_probes():
            driver = probe(name)
            if driver:
                self.logger.debug("Driver for %s via %s: %s", name, label, driver)
                return driver
        return None

    def driver_loaded(self, driver: str) -> bool:
        loaded = self.host.loaded_modules()
        return driver in loaded or driver.replace("-", "_") in loaded

    # ---------------------------
    # Bonding
    # ---------------------------

    def up_bonding_interfaces(self) -> List[str]:
        return [b for b in self.host.list_bonding_interfaces() if self.host.is_up(b)]

    def bonding_mode(self, bonds: List[str]) -> BondingMode:
        """802.3ad if the first bond reports it, active-backup otherwise."""
        if bonds:
            status = self.host.bonding_status(bonds[0]) or ""
            if "Bonding Mode: IEEE 802.3ad" in status:
                return BondingMode.IEEE_802_3AD
        return BondingMode.ACTIVE_BACKUP

    # ---------------------------
    # VLAN
    # ---------------------------

    def up_vlan_interfaces(self) -> List[str]:
        return [v for v in self.host.list_vlan_interfaces() if self.host.is_up(v)]

    def vlan_table(self) -> Dict[str, VlanInterface]:
        return parse_vlan_config(self.host.vlan_config() or "")


def load_ip_mappings(logger: logging.Logger, path: Path) -> Dict[str, List[str]]:
    """
    Read the operator's address mapping file: one `device address` pair per
    line, comments and blank lines ignored, extra columns ignored.
    """
    mappings: Dict[str, List[str]] = {}
    for ln in U.read_and_strip(path):
        parts = ln.split()
        if len(parts) < 2:
            logger.warning("Ignoring malformed line in %s: %r", path, ln)
            continue
        mappings.setdefault(parts[0], []).append(parts[1])
    if mappings:
        logger.debug("IP address mappings from %s: %s", path, mappings)
    return mappings
