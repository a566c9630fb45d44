# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/config/__init__.py
from .config_loader import Config, RescueConfig, is_false, is_true, normalize_resolv_conf_option

__all__ = ["Config", "RescueConfig", "is_false", "is_true", "normalize_resolv_conf_option"]
