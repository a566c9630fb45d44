# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/host/__init__.py
from .inspector import HostInspector, Runner

__all__ = ["HostInspector", "Runner"]
