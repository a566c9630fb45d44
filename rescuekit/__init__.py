# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# rescuekit/__init__.py
"""
rescuekit - rescue system build steps

Records what a disaster-recovery rescue system needs to know about the host
it was built on:

- the network topology (physical NICs, bonds, VLANs) as a boot-time script
- a usable /etc/resolv.conf
- naming-relevant kernel options for KERNEL_CMDLINE
- file capabilities to restore after a backup restore

Usage as a library:

    from rescuekit import Orchestrator

    rc = Orchestrator(logger, args).run()
"""

__version__ = "0.1.0"

from .orchestrator import Orchestrator

__all__ = [
    "__version__",
    "Orchestrator",
]
