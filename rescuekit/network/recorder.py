# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/network/recorder.py
"""
Record the host's network devices for the rescue system.

The recorder inspects the live interfaces and writes a shell script that the
rescue system runs at boot to rebuild the same topology:

1. Guards: `noip` on the rescue kernel command line, and a single static
   address given at boot (IPADDR/NETMASK/GATEWAY) short-circuit everything.
2. Physical interfaces: MAC table, driver module list, addresses, MTU.
3. Bonding and VLAN discovery plus the module loads they need.
4. VLAN and bonding setup in dependency order (see topology.py).

Side files: <rootfs>/etc/mac-addresses, <rootfs>/etc/modules and an archived
copy of the VLAN config table in the recovery directory.

Known limitation: bonding and other dependent devices mirror the MAC address
of a real NIC; their entries in the MAC table are recorded as the kernel
reports them, without any special marking.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..config.config_loader import RescueConfig
from ..core.exceptions import BugError
from ..core.file_ops import append_lines, safe_unlink, write_text_atomic
from ..core.logger import Log
from ..core.utils import U
from ..host.inspector import HostInspector
from .discovery import NetworkDiscovery, load_ip_mappings
from .model import ZERO_MAC, NetworkInterface, RecorderContext
from .topology import DeviceSetup

SCRIPT_REL = Path("etc/scripts/system-setup.d/60-network-devices.sh")
MAC_TABLE_REL = Path("etc/mac-addresses")
MODULES_REL = Path("etc/modules")
IP_MAPPINGS_REL = Path("mappings/ip_addresses")

NOIP_GUARD = [
    "# Skip network devices setup if the kernel command line parameter 'noip' is specified:",
    "grep -q '\\<noip\\>' /proc/cmdline && return",
]

STATIC_BOOT_BLOCK = [
    "# If IPADDR=1.2.3.4 has been defined at boot time via ip=1.2.3.4 setup network devices this way:",
    'if [[ "$IPADDR" ]] && [[ "$NETMASK" ]] ; then',
    "    device=${NETDEV:-eth0}",
    '    ip link set dev "$device" up',
    '    ip addr add "$IPADDR"/"$NETMASK" dev "$device"',
    '    if [[ "$GATEWAY" ]] ; then',
    '        ip route add default via "$GATEWAY"',
    "    fi",
    "    return",
    "fi",
]


class NetworkDeviceRecorder:
    def __init__(self, logger: logging.Logger, cfg: RescueConfig, host: HostInspector):
        self.logger = logger
        self.cfg = cfg
        self.host = host
        self.discovery = NetworkDiscovery(logger, host)

    @property
    def script_path(self) -> Path:
        return self.cfg.rootfs_dir / SCRIPT_REL

    @property
    def vlan_archive_path(self) -> Path:
        return self.cfg.recovery_dir / "vlan.config"

    # ---------------------------
    # Main entry
    # ---------------------------

    def record(self) -> Optional[RecorderContext]:
        """
        Record the network devices. Returns None when DHCP owns the rescue
        system's networking and no setup script is produced.
        """
        if self.cfg.dhcp_only:
            self.logger.info("No network devices setup script because networking happens via DHCP in the rescue system")
            safe_unlink(self.script_path)
            return None

        ctx = RecorderContext()
        ctx.script.add(*NOIP_GUARD)
        ctx.script.add(*STATIC_BOOT_BLOCK)

        self._record_physical(ctx)
        self._discover_bonding(ctx)
        self._discover_vlans(ctx)

        setup = DeviceSetup(self.logger, self.host, ctx, use_ifenslave=U.has_binary("ifenslave"))
        if self.cfg.simplify_bonding:
            setup.mark_bonds_handled()

        for vlan in ctx.vlan_interfaces:
            setup.vlan_setup(vlan)

        if self.cfg.simplify_bonding:
            setup.simplified_bonding()
        else:
            for bond in ctx.bonding_interfaces:
                setup.bond_setup(bond)

        self._write(ctx)
        return ctx

    # ---------------------------
    # Physical interfaces
    # ---------------------------

    def _ip_mappings(self) -> Dict[str, List[str]]:
        return load_ip_mappings(self.logger, self.cfg.config_dir / IP_MAPPINGS_REL)

    def _record_physical(self, ctx: RecorderContext) -> None:
        mappings = self._ip_mappings()
        script = ctx.script

        for name in self.discovery.physical_interfaces():
            mac = self.host.mac_address(name)
            if mac is None:
                raise BugError(msg=f"Could not read a MAC address from '{self.host.interface_path(name) / 'address'}'")
            # fake interfaces without MAC address (lo)
            if mac == ZERO_MAC:
                continue

            ctx.mac_table.append(f"{name} {mac}")
            iface = NetworkInterface(name=name, mac=mac)

            # only working devices are worth recording
            if not self.host.is_up(name):
                self.logger.debug("Skipping %s: link is not up", name)
                continue
            iface.up = True

            iface.driver = self.discovery.resolve_driver(name)
            if iface.driver:
                if not self.discovery.driver_loaded(iface.driver):
                    self._warn(ctx, f"Driver '{iface.driver}' for '{name}' not loaded - is that okay?")
                ctx.drivers.append(iface.driver)
            else:
                self._warn(ctx, f"Could not determine driver for '{name}'. To ensure it gets loaded add it to MODULES_LOAD.")

            mapped = mappings.get(name)
            if mapped:
                for addr in mapped:
                    self.logger.info("New IP-address will be %s %s", name, addr)
                    script.comment(f"New IP-address will be {name} {addr}:")
                    script.add(f"ip addr add {addr} dev {name}")
                iface.addresses = list(mapped)
            else:
                iface.addresses = self.host.global_addresses(name)
                for addr in iface.addresses:
                    script.add(f"ip addr add {addr} dev {name}")
            script.add(f"ip link set dev {name} up")

            if self.host.has_attr(name, "mtu"):
                iface.mtu = self.host.mtu(name)
                if iface.mtu is None:
                    self._warn(ctx, f"Could not read a MTU from '{self.host.interface_path(name) / 'mtu'}'!")
                elif iface.mtu:
                    script.add(f"ip link set dev {name} mtu {iface.mtu}")

            Log.trace(self.logger, "Recorded %s", iface)
            ctx.interfaces.append(iface)

    # ---------------------------
    # Bonding / VLAN discovery
    # ---------------------------

    def _discover_bonding(self, ctx: RecorderContext) -> None:
        if not self.host.has_bonding():
            return
        ctx.bonding_interfaces = self.discovery.up_bonding_interfaces()
        mode = ctx.bonding_mode = self.discovery.bonding_mode(ctx.bonding_interfaces)
        ctx.script.add(
            f"modprobe bonding max_bonds={len(ctx.bonding_interfaces)} miimon=100 mode={int(mode)} use_carrier=0"
        )
        ctx.extra_modules.append("bonding")
        self.logger.info("Bonding interfaces: %s (mode %d)", " ".join(ctx.bonding_interfaces) or "(none up)", int(mode))

    def _discover_vlans(self, ctx: RecorderContext) -> None:
        if not self.host.has_vlan():
            return
        config = self.host.vlan_config()
        if config is not None:
            # kept for a possible VLAN migration later on
            write_text_atomic(self.vlan_archive_path, config)
            ctx.vlan_table = self.discovery.vlan_table()
        ctx.script.add("modprobe 8021q", "sleep 5")
        ctx.vlan_interfaces = self.discovery.up_vlan_interfaces()
        self.logger.info("VLAN interfaces: %s", " ".join(ctx.vlan_interfaces) or "(none up)")

    # ---------------------------
    # Output
    # ---------------------------

    def _warn(self, ctx: RecorderContext, msg: str) -> None:
        Log.warn(self.logger, msg)
        ctx.warnings.append(msg)

    def _write(self, ctx: RecorderContext) -> None:
        rootfs = self.cfg.rootfs_dir
        write_text_atomic(self.script_path, ctx.script.render(), mode=0o644)
        if ctx.mac_table:
            append_lines(rootfs / MAC_TABLE_REL, ctx.mac_table)
        if ctx.drivers:
            append_lines(rootfs / MODULES_REL, ctx.drivers)
        Log.ok(self.logger, f"Network devices setup written to {self.script_path}", lines=len(ctx.script.lines))
