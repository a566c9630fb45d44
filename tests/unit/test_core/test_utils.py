# SPDX-License-Identifier: LGPL-3.0-or-later
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock, patch

from rescuekit.core.exceptions import Fatal
from rescuekit.core.utils import U


class TestUtilsFileOperations(unittest.TestCase):
    """Test utility file operations."""

    def test_safe_read_text(self):
        with tempfile.TemporaryDirectory() as td:
            file_path = Path(td) / "test.txt"
            file_path.write_text("Test content\nLine 2", encoding="utf-8")

            self.assertEqual(U.safe_read_text(file_path), "Test content\nLine 2")

    def test_safe_read_text_missing_file(self):
        self.assertIsNone(U.safe_read_text(Path("/nonexistent/file.txt")))

    def test_read_and_strip_drops_comments_and_blanks(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "ip_addresses"
            p.write_text("# header\n\n  eth0 192.0.2.10/24  \neth1 10.0.0.2/8 # trailing\n", encoding="utf-8")

            self.assertEqual(U.read_and_strip(p), ["eth0 192.0.2.10/24", "eth1 10.0.0.2/8"])

    def test_read_and_strip_missing_file(self):
        self.assertEqual(U.read_and_strip(Path("/nonexistent/mapping")), [])


class TestUtilsCommands(unittest.TestCase):
    """Test command helpers."""

    def test_has_binary_requires_all(self):
        with patch.object(U, "which", side_effect=lambda p: "/usr/sbin/getcap" if p == "getcap" else None):
            self.assertTrue(U.has_binary("getcap"))
            self.assertFalse(U.has_binary("getcap", "setcap"))

    def test_die_logs_and_raises(self):
        logger = Mock()

        with self.assertRaises(Fatal) as cm:
            U.die(logger, "broken config", code=2)

        self.assertEqual(cm.exception.code, 2)
        self.assertTrue(cm.exception.logged)
        logger.error.assert_called_once_with("broken config")

    @patch("subprocess.run")
    def test_run_cmd_captures_output(self, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="driver: e1000\n", stderr="")
        logger = Mock()

        cp = U.run_cmd(logger, ["ethtool", "-i", "eth0"], check=False, capture=True)

        self.assertEqual(cp.stdout, "driver: e1000\n")
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["ethtool", "-i", "eth0"])
        self.assertTrue(kwargs["capture_output"])

    @patch("subprocess.run")
    def test_run_cmd_fatal_wraps_failure(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(2, ["ip"], output="", stderr="boom")

        with self.assertRaises(Fatal):
            U.run_cmd(Mock(), ["ip", "link"], fatal=True)

    def test_json_dump_sorted(self):
        self.assertEqual(U.json_dump({"b": 1, "a": Path("/x")}), '{\n  "a": "/x",\n  "b": 1\n}')


if __name__ == "__main__":
    unittest.main()
