# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the network model: VLAN table parsing, script builder, context summary."""
from __future__ import annotations

import pytest
from rescuekit.network.model import (
    BondingGroup,
    BondingMode,
    InterfaceKind,
    NetworkInterface,
    RecorderContext,
    SetupScript,
    SetupState,
    parse_vlan_config,
)

VLAN_CONFIG = """VLAN Dev name    | VLAN ID
Name-Type: VLAN_NAME_TYPE_RAW_PLUS_VID_NO_PAD
vlan163        | 163  | bond1
eth0.100       | 100  | eth0
broken         | abc  | eth0
"""


@pytest.mark.unit
class TestVlanConfig:
    def test_parses_rows_and_skips_headers(self):
        table = parse_vlan_config(VLAN_CONFIG)

        assert sorted(table) == ["eth0.100", "vlan163"]
        assert table["vlan163"].vlan_id == 163
        assert table["vlan163"].parent == "bond1"

    def test_exact_names_only(self):
        table = parse_vlan_config(VLAN_CONFIG)

        assert "eth0.10" not in table
        assert "vlan16" not in table

    def test_empty(self):
        assert parse_vlan_config("") == {}


@pytest.mark.unit
class TestSetupScript:
    def test_header_and_render(self):
        s = SetupScript()
        s.add("ip link set dev eth0 up", "sleep 5")
        s.comment("New IP-address will be eth0 192.0.2.1/24:")

        assert s.render() == (
            "# Network devices setup:\n"
            "ip link set dev eth0 up\n"
            "sleep 5\n"
            "# New IP-address will be eth0 192.0.2.1/24:\n"
        )


@pytest.mark.unit
class TestRecorderContext:
    def test_unknown_devices_are_unvisited(self):
        assert RecorderContext().state("bond0") is SetupState.UNVISITED

    def test_summarize(self):
        ctx = RecorderContext()
        ctx.interfaces.append(NetworkInterface(name="eth0", up=True))
        ctx.interfaces.append(NetworkInterface(name="bond0", kind=InterfaceKind.BOND))
        ctx.bonding_groups.append(BondingGroup(name="bond0", members=["eth1", "eth2"]))
        ctx.bonding_mode = BondingMode.IEEE_802_3AD
        ctx.drivers.append("e1000")

        summary = ctx.summarize()

        assert summary["physical"] == ["eth0"]
        assert summary["bonds"] == {"bond0": ["eth1", "eth2"]}
        assert summary["bonding_mode"] == 4
        assert summary["script_lines"] == 1
