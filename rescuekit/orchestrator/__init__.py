# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# rescuekit/orchestrator/__init__.py
from .orchestrator import STEPS, Orchestrator, parse_steps

__all__ = ["Orchestrator", "STEPS", "parse_steps"]
