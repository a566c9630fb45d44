# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# rescuekit/cli/help_texts.py
from __future__ import annotations

# NOTE:
# This module is pure help/documentation text used by argparse epilog rendering.
# Keep it "copy/paste runnable" and avoid importing heavy dependencies here.

YAML_EXAMPLE = r"""# rescuekit configuration example (YAML)
#
# Run:
# sudo rescuekit --config site.yaml
#
# Merge multiple configs (later overrides earlier):
# sudo rescuekit --config base.yaml --config overrides.yaml
#
# Keys are case-insensitive: USE_RESOLV_CONF and use_resolv_conf are the same.
#
# --------------------------------------------------------------------------------------
# Rescue system layout
# --------------------------------------------------------------------------------------
# rootfs_dir: /var/tmp/rescue/rootfs     # rescue system root being assembled
# var_dir: /var/lib/rescue               # recovery data lands in <var_dir>/recovery
# config_dir: /etc/rescue                # mappings/ip_addresses is read from here
# build_dir: /var/tmp/rescue             # excluded from saved capabilities
# iso_dir: /var/lib/rescue/output        # excluded from saved capabilities
#
# --------------------------------------------------------------------------------------
# Networking
# --------------------------------------------------------------------------------------
# use_dhclient: no                       # yes: DHCP configures the rescue system
# use_static_networking: no              # yes: record static setup even with DHCP
# simplify_bonding: no                   # yes: first bond slave takes the bond's addresses
#
# --------------------------------------------------------------------------------------
# Name resolution
# --------------------------------------------------------------------------------------
# use_resolv_conf: no                    # no resolv.conf in the rescue system
# use_resolv_conf: /etc/resolv.conf.rescue   # copy this file
# use_resolv_conf:                       # or write these lines
#   - "search example.com"
#   - "nameserver 192.0.2.53"
#
# --------------------------------------------------------------------------------------
# Kernel / capabilities
# --------------------------------------------------------------------------------------
# kernel_cmdline: "console=ttyS0 net.ifnames=0"
# netfs_restore_capabilities: ["/usr/bin", "/usr/sbin"]
# modules: ["e1000e"]
#
# steps: "cmdline,network,capabilities,resolv"
"""

FEATURE_SUMMARY = r"""  • cmdline       carry net.ifnames / biosdevname into KERNEL_CMDLINE
  • network       record interfaces, bonds and VLANs as a boot-time setup script
  • capabilities  save `getcap -r` output for NETFS_RESTORE_CAPABILITIES
  • resolv        make sure the rescue resolv.conf names a usable nameserver
"""
