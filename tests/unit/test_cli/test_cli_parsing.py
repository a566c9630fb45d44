# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Unit Tests for CLI Configuration Loading

Tests YAML/JSON configuration file loading, merging, and two-phase parsing.
"""

import json
import tempfile
import unittest
from pathlib import Path

import yaml

from rescuekit.cli.args import build_parser, parse_args_with_config
from rescuekit.config.config_loader import RescueConfig

from fakes.fake_logger import FakeLogger

DIRS = ["--rootfs-dir", "/tmp/r", "--var-dir", "/tmp/v", "--config-dir", "/tmp/c"]


class TestCLIConfigTwoPhaseParse(unittest.TestCase):
    """Test two-phase config parsing (config files + CLI args)"""

    def test_config_satisfies_required_dirs(self):
        with tempfile.TemporaryDirectory() as td:
            cfg = Path(td) / "cfg.yaml"
            cfg.write_text(
                yaml.safe_dump({"ROOTFS_DIR": "/tmp/r", "VAR_DIR": "/tmp/v", "CONFIG_DIR": "/tmp/c"}),
                encoding="utf-8",
            )

            args, conf, _logger = parse_args_with_config(argv=["--config", str(cfg)], logger=FakeLogger())

            self.assertEqual(args.rootfs_dir, "/tmp/r")
            self.assertIn("rootfs_dir", conf)

    def test_cli_args_override_config(self):
        with tempfile.TemporaryDirectory() as td:
            cfg = Path(td) / "cfg.yaml"
            cfg.write_text(
                "rootfs_dir: /tmp/r\nvar_dir: /tmp/v\nconfig_dir: /tmp/c\nkernel_cmdline: quiet\n",
                encoding="utf-8",
            )

            args, _conf, _logger = parse_args_with_config(
                argv=["--config", str(cfg), "--kernel-cmdline", "console=ttyS0"],
                logger=FakeLogger(),
            )

            self.assertEqual(args.kernel_cmdline, "console=ttyS0")

    def test_later_config_overrides_earlier(self):
        with tempfile.TemporaryDirectory() as td:
            base = Path(td) / "base.yaml"
            site = Path(td) / "site.json"
            base.write_text("rootfs_dir: /tmp/r\nvar_dir: /tmp/v\nconfig_dir: /tmp/c\nuse_dhclient: no\n", encoding="utf-8")
            site.write_text(json.dumps({"use_dhclient": "yes"}), encoding="utf-8")

            args, _conf, _logger = parse_args_with_config(
                argv=["--config", str(base), "--config", str(site)], logger=FakeLogger()
            )

            self.assertTrue(RescueConfig.from_args(args).use_dhclient)

    def test_resolv_conf_lines_from_yaml(self):
        with tempfile.TemporaryDirectory() as td:
            cfg = Path(td) / "cfg.yaml"
            cfg.write_text(
                yaml.safe_dump({"use_resolv_conf": ["search example.com", "nameserver 192.0.2.53"]}),
                encoding="utf-8",
            )

            args, _conf, _logger = parse_args_with_config(argv=DIRS + ["--config", str(cfg)], logger=FakeLogger())

            self.assertEqual(
                RescueConfig.from_args(args).use_resolv_conf, ["search example.com", "nameserver 192.0.2.53"]
            )


class TestCLIValidation(unittest.TestCase):
    def test_missing_dirs_exit(self):
        with self.assertRaises(SystemExit) as cm:
            parse_args_with_config(argv=["--rootfs-dir", "/tmp/r"], logger=FakeLogger())

        self.assertIn("--var-dir", str(cm.exception.code))
        self.assertIn("--config-dir", str(cm.exception.code))

    def test_unknown_step_exit(self):
        with self.assertRaises(SystemExit) as cm:
            parse_args_with_config(argv=DIRS + ["--steps", "network,dns"], logger=FakeLogger())

        self.assertIn("dns", str(cm.exception.code))

    def test_valid_steps(self):
        args, _conf, _logger = parse_args_with_config(argv=DIRS + ["--steps", "resolv,network"], logger=FakeLogger())

        self.assertEqual(args.steps, "resolv,network")

    def test_flags(self):
        args, _conf, _logger = parse_args_with_config(
            argv=DIRS
            + ["--use-dhclient", "--simplify-bonding", "--use-resolv-conf", "no", "--netfs-restore-capabilities", "/usr/bin"],
            logger=FakeLogger(),
        )
        cfg = RescueConfig.from_args(args)

        self.assertTrue(cfg.use_dhclient)
        self.assertTrue(cfg.simplify_bonding)
        self.assertFalse(cfg.use_static_networking)
        self.assertIs(cfg.use_resolv_conf, False)
        self.assertEqual(cfg.netfs_restore_capabilities, ["/usr/bin"])

    def test_help_builds(self):
        text = build_parser().format_help()

        self.assertIn("--use-resolv-conf", text)
        self.assertIn("--steps", text)


if __name__ == "__main__":
    unittest.main()
