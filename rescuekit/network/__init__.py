# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/network/__init__.py
"""
Network device recording for the rescue system.

Split by concern:

- model.py: dataclasses, the setup script builder and the recorder context
- discovery.py: physical interfaces, driver probes, bonding/VLAN discovery
- topology.py: VLAN/bonding setup in dependency order
- recorder.py: NetworkDeviceRecorder, the step itself
"""
from .discovery import NetworkDiscovery, load_ip_mappings, physical_interface_names
from .model import (
    BondingGroup,
    BondingMode,
    InterfaceKind,
    NetworkInterface,
    RecorderContext,
    SetupScript,
    SetupState,
    VlanInterface,
    parse_vlan_config,
)
from .recorder import NetworkDeviceRecorder
from .topology import DeviceSetup

__all__ = [
    "BondingGroup",
    "BondingMode",
    "DeviceSetup",
    "InterfaceKind",
    "NetworkDeviceRecorder",
    "NetworkDiscovery",
    "NetworkInterface",
    "RecorderContext",
    "SetupScript",
    "SetupState",
    "VlanInterface",
    "load_ip_mappings",
    "parse_vlan_config",
    "physical_interface_names",
]
