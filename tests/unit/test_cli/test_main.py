# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exit status mapping of the console entry point."""
from __future__ import annotations

from argparse import Namespace
from unittest.mock import Mock

import pytest
import rescuekit.__main__ as entry
from rescuekit.core.exceptions import BugError, Fatal
from rescuekit.core.utils import U

from fakes.fake_logger import FakeLogger


def _orchestrator_raising(exc):
    class _Orch:
        def __init__(self, logger, args):
            pass

        def run(self):
            raise exc

    return _Orch


@pytest.mark.unit
class TestMainExitCodes:
    @pytest.fixture
    def logger(self, monkeypatch):
        logger = FakeLogger()
        monkeypatch.setattr(entry, "parse_args_with_config", lambda argv: (Namespace(verbose=0), {}, logger))
        return logger

    def _exit_code(self):
        with pytest.raises(SystemExit) as ei:
            entry.main([])
        return ei.value.code

    def test_success(self, monkeypatch, logger):
        class _Ok:
            def __init__(self, logger, args):
                pass

            def run(self):
                return 0

        monkeypatch.setattr(entry, "Orchestrator", _Ok)

        assert self._exit_code() == 0

    def test_fatal_uses_its_code(self, monkeypatch, logger):
        monkeypatch.setattr(entry, "Orchestrator", _orchestrator_raising(Fatal(3, "no nameserver")))

        assert self._exit_code() == 3
        assert any("no nameserver" in m for m in logger.messages("error"))

    def test_bug_exits_99(self, monkeypatch, logger):
        monkeypatch.setattr(entry, "Orchestrator", _orchestrator_raising(BugError(msg="cycle")))

        assert self._exit_code() == 99

    def test_interrupt_exits_130(self, monkeypatch, logger):
        monkeypatch.setattr(entry, "Orchestrator", _orchestrator_raising(KeyboardInterrupt()))

        assert self._exit_code() == 130

    def test_unexpected_error_exits_1(self, monkeypatch, logger):
        monkeypatch.setattr(entry, "Orchestrator", _orchestrator_raising(RuntimeError("boom")))

        assert self._exit_code() == 1
        assert any("RuntimeError" in m for m in logger.messages("error"))

    def test_parse_failure_without_logger(self, monkeypatch, capsys):
        def _fail(argv):
            raise Fatal(2, "bad config")

        monkeypatch.setattr(entry, "parse_args_with_config", _fail)

        with pytest.raises(SystemExit) as ei:
            entry.main([])

        assert ei.value.code == 2
        assert "bad config" in capsys.readouterr().err

    def test_config_error_already_logged_is_not_repeated(self, monkeypatch, capsys):
        def _fail(argv):
            U.die(Mock(), "Config file not found: site.yaml")

        monkeypatch.setattr(entry, "parse_args_with_config", _fail)

        with pytest.raises(SystemExit) as ei:
            entry.main([])

        assert ei.value.code == 1
        assert "site.yaml" not in capsys.readouterr().err
