# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/network/model.py
"""
Network model for recording the host topology into the rescue system.

This file contains:
- Enums/dataclasses (NetworkInterface, BondingGroup, VlanInterface, ...)
- SetupScript (append-only shell script builder)
- RecorderContext (state threaded through discovery and setup)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional


ZERO_MAC = "00:00:00:00:00:00"


class InterfaceKind(Enum):
    PHYSICAL = "physical"
    BOND = "bond"
    VLAN = "vlan"


class BondingMode(IntEnum):
    ACTIVE_BACKUP = 1
    IEEE_802_3AD = 4


class SetupState(Enum):
    """Per-interface progress of bond/VLAN setup."""

    UNVISITED = "unvisited"
    IN_PROGRESS = "in-progress"
    DONE = "done"


@dataclass
class NetworkInterface:
    name: str
    kind: InterfaceKind = InterfaceKind.PHYSICAL
    mac: str = ""
    driver: Optional[str] = None
    addresses: List[str] = field(default_factory=list)  # CIDR, global scope
    mtu: Optional[str] = None
    up: bool = False


@dataclass
class BondingGroup:
    name: str
    members: List[str] = field(default_factory=list)
    mode: BondingMode = BondingMode.ACTIVE_BACKUP


@dataclass
class VlanInterface:
    name: str
    vlan_id: int
    parent: str


class SetupScript:
    """
    Boot-time shell script, built append-only and rendered once.

    The rescue system sources the result, so `return` is how a block
    ends the script early.
    """

    def __init__(self, header: str = "# Network devices setup:") -> None:
        self.lines: List[str] = [header]

    def add(self, *lines: str) -> None:
        self.lines.extend(lines)

    def comment(self, text: str) -> None:
        self.lines.append(f"# {text}")

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"


def parse_vlan_config(text: str) -> Dict[str, VlanInterface]:
    """
    Parse /proc/net/vlan/config:

        VLAN Dev name    | VLAN ID
        Name-Type: VLAN_NAME_TYPE_RAW_PLUS_VID_NO_PAD
        vlan163        | 163  | bond1
    """
    table: Dict[str, VlanInterface] = {}
    for ln in text.splitlines():
        parts = [p.strip() for p in ln.split("|")]
        if len(parts) != 3 or not all(parts):
            continue
        name, vid, parent = parts
        if not vid.isdigit():
            continue
        table[name] = VlanInterface(name=name, vlan_id=int(vid), parent=parent)
    return table


@dataclass
class RecorderContext:
    """
    Everything the recorder accumulates during one run.

    `states` is shared by VLAN and bonding setup so that a device reached as
    a dependency of another is configured only once.
    """

    script: SetupScript = field(default_factory=SetupScript)
    states: Dict[str, SetupState] = field(default_factory=dict)
    interfaces: List[NetworkInterface] = field(default_factory=list)
    bonding_interfaces: List[str] = field(default_factory=list)
    vlan_interfaces: List[str] = field(default_factory=list)
    vlan_table: Dict[str, VlanInterface] = field(default_factory=dict)
    bonding_mode: BondingMode = BondingMode.ACTIVE_BACKUP
    bonding_groups: List[BondingGroup] = field(default_factory=list)
    mac_table: List[str] = field(default_factory=list)  # "name mac"
    drivers: List[str] = field(default_factory=list)  # for /etc/modules
    extra_modules: List[str] = field(default_factory=list)  # added to the image module list
    warnings: List[str] = field(default_factory=list)

    def state(self, name: str) -> SetupState:
        return self.states.get(name, SetupState.UNVISITED)

    def summarize(self) -> Dict[str, object]:
        return {
            "physical": [i.name for i in self.interfaces if i.kind is InterfaceKind.PHYSICAL],
            "bonds": {g.name: list(g.members) for g in self.bonding_groups},
            "bonding_mode": int(self.bonding_mode),
            "vlans": list(self.vlan_interfaces),
            "drivers": list(self.drivers),
            "script_lines": len(self.script.lines),
            "warnings": list(self.warnings),
        }
