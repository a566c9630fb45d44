# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/network/topology.py
"""
Bonding and VLAN setup emission.

A VLAN may sit on top of a bond and a bond may enslave a VLAN, so each setup
function first sets up the devices it depends on. Both share one state map
in the RecorderContext: a device is emitted at most once, and reaching a
device that is still in progress means the host reported a dependency cycle.
"""
from __future__ import annotations

import itertools
import logging
from typing import List

from ..core.exceptions import BugError
from ..core.logger import Log
from ..host.inspector import HostInspector
from .model import BondingGroup, InterfaceKind, NetworkInterface, RecorderContext, SetupState

SETTLE_SECONDS = 5


class DeviceSetup:
    def __init__(
        self,
        logger: logging.Logger,
        host: HostInspector,
        ctx: RecorderContext,
        *,
        use_ifenslave: bool,
    ):
        self.logger = logger
        self.host = host
        self.ctx = ctx
        self.use_ifenslave = use_ifenslave

    # ---------------------------
    # Visit guard
    # ---------------------------

    def _enter(self, name: str) -> bool:
        state = self.ctx.state(name)
        if state is SetupState.DONE:
            Log.trace(self.logger, "%s already set up", name)
            return False
        if state is SetupState.IN_PROGRESS:
            raise BugError(msg=f"Dependency cycle between bonding and VLAN setup at '{name}'").with_context(
                in_progress=sorted(n for n, s in self.ctx.states.items() if s is SetupState.IN_PROGRESS)
            )
        self.ctx.states[name] = SetupState.IN_PROGRESS
        return True

    def _done(self, name: str) -> None:
        self.ctx.states[name] = SetupState.DONE

    def _emit_addresses(self, name: str, *, dev: str = "") -> List[str]:
        addrs = self.host.global_addresses(name)
        for addr in addrs:
            self.ctx.script.add(f"ip addr add {addr} dev {dev or name}")
        return addrs

    # ---------------------------
    # VLAN
    # ---------------------------

    def vlan_setup(self, name: str) -> None:
        if not self._enter(name):
            return

        vlan = self.ctx.vlan_table.get(name)
        if vlan is None:
            msg = f"VLAN '{name}' has no entry in the VLAN config table, not set up"
            Log.warn(self.logger, msg)
            self.ctx.warnings.append(msg)
            self._done(name)
            return

        if vlan.parent in self.ctx.bonding_interfaces:
            self.bond_setup(vlan.parent)

        self.ctx.script.add(f"ip link add link {vlan.parent} name {name} type vlan id {vlan.vlan_id}")
        addrs = self._emit_addresses(name)
        self.ctx.script.add(f"ip link set dev {name} up")
        self.ctx.interfaces.append(NetworkInterface(name=name, kind=InterfaceKind.VLAN, addresses=addrs, up=True))
        self.logger.info("VLAN %s (id %d on %s) recorded", name, vlan.vlan_id, vlan.parent)
        self._done(name)

    # ---------------------------
    # Bonding
    # ---------------------------

    def bond_setup(self, name: str) -> None:
        if not self._enter(name):
            return

        members = self.host.bonding_slaves(name)
        for member in members:
            if member in self.ctx.vlan_interfaces:
                self.vlan_setup(member)
            else:
                Log.trace(self.logger, "No VLAN setup for bonding member %s of %s", member, name)

        # The bond must be up before enslaving; addresses come last.
        script = self.ctx.script
        script.add(f"ip link set dev {name} up")
        if self.use_ifenslave:
            script.add(f"ifenslave {name} {' '.join(members)}".rstrip())
        else:
            for member in members:
                script.add(f"ip link set {member} master {name}")
        script.add(f"sleep {SETTLE_SECONDS}")
        addrs = self._emit_addresses(name)
        self.ctx.interfaces.append(NetworkInterface(name=name, kind=InterfaceKind.BOND, addresses=addrs, up=True))
        self.ctx.bonding_groups.append(BondingGroup(name=name, members=list(members), mode=self.ctx.bonding_mode))
        self.logger.info("Bonding %s recorded with member(s): %s", name, " ".join(members) or "(none)")
        self._done(name)

    def simplified_bonding(self) -> None:
        """
        Instead of bonding in the rescue system, put each up bond's
        addresses on its first member and bring that member up.
        """
        for n in itertools.count():
            bond = f"bond{n}"
            if self.host.bonding_status(bond) is None:
                break
            if not self.host.is_up(bond):
                continue
            members = self.host.bonding_status_slaves(bond)
            if not members:
                msg = f"Bonding {bond} has no enslaved interface, nothing to simplify"
                Log.warn(self.logger, msg)
                self.ctx.warnings.append(msg)
                continue
            first = members[0]
            self._emit_addresses(bond, dev=first)
            self.ctx.script.add(f"ip link set dev {first} up")
            self.logger.info("Simplified bonding: %s configured on %s", bond, first)

    def mark_bonds_handled(self) -> None:
        """Keep VLAN dependencies from bringing bonds up the regular way."""
        for bond in self.ctx.bonding_interfaces:
            self._done(bond)
