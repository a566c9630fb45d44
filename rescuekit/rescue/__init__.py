# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/rescue/__init__.py
from .capabilities import CapabilitiesSaver
from .kernel_cmdline import KernelCmdlineAugmenter, important_options, merge_kernel_options, option_key
from .resolv_conf import ResolvConfVerifier, nameserver_values

__all__ = [
    "CapabilitiesSaver",
    "KernelCmdlineAugmenter",
    "ResolvConfVerifier",
    "important_options",
    "merge_kernel_options",
    "nameserver_values",
    "option_key",
]
