# SPDX-License-Identifier: LGPL-3.0-or-later
import unittest
from unittest.mock import Mock

from rescuekit.rescue.kernel_cmdline import (
    KernelCmdlineAugmenter,
    important_options,
    merge_kernel_options,
    option_key,
)

from fakes.fake_logger import FakeLogger


class TestOptionParsing(unittest.TestCase):
    def test_option_key(self):
        self.assertEqual(option_key("net.ifnames=0"), "net.ifnames")
        self.assertEqual(option_key("biosdevname"), "biosdevname")
        self.assertEqual(option_key("a=b=c"), "a=b")

    def test_important_options(self):
        cmdline = "BOOT_IMAGE=/vmlinuz root=UUID=abcd ro net.ifnames=0 quiet biosdevname=1"

        self.assertEqual(important_options(cmdline), ["net.ifnames=0", "biosdevname=1"])


class TestMerge(unittest.TestCase):
    def test_configured_option_wins(self):
        logger = FakeLogger()

        out = merge_kernel_options(logger, "console=ttyS0 net.ifnames=1", ["net.ifnames=0"])

        self.assertEqual(out, "console=ttyS0 net.ifnames=1")
        self.assertIn(
            "Current kernel option [net.ifnames=0] superseded by [net.ifnames=1] in your configuration (KERNEL_CMDLINE)",
            logger.messages("info"),
        )

    def test_missing_option_appended(self):
        logger = FakeLogger()

        out = merge_kernel_options(logger, "console=ttyS0", ["net.ifnames=0", "biosdevname=0"])

        self.assertEqual(out, "console=ttyS0 net.ifnames=0 biosdevname=0")
        self.assertIn("✅ Adding net.ifnames=0 to KERNEL_CMDLINE", logger.messages("info"))

    def test_empty_configuration(self):
        self.assertEqual(merge_kernel_options(FakeLogger(), "", ["net.ifnames=0"]), "net.ifnames=0")

    def test_duplicate_proposal_added_once(self):
        out = merge_kernel_options(FakeLogger(), "", ["net.ifnames=0", "net.ifnames=1"])

        self.assertEqual(out, "net.ifnames=0")


class TestAugmenter(unittest.TestCase):
    def test_uses_host_cmdline(self):
        host = Mock()
        host.kernel_cmdline.return_value = "root=/dev/sda1 net.ifnames=0"

        out = KernelCmdlineAugmenter(FakeLogger(), host).augment("quiet")

        self.assertEqual(out, "quiet net.ifnames=0")

    def test_nothing_important(self):
        host = Mock()
        host.kernel_cmdline.return_value = "root=/dev/sda1 ro"

        self.assertEqual(KernelCmdlineAugmenter(FakeLogger(), host).augment("quiet"), "quiet")


if __name__ == "__main__":
    unittest.main()
