# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/core/__init__.py
from .exceptions import BugError, Fatal, RescueKitError

__all__ = ["BugError", "Fatal", "RescueKitError"]
