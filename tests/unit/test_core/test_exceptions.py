# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the exception hierarchy and CLI formatting."""
from __future__ import annotations

import pytest
from rescuekit.core.exceptions import BugError, Fatal, RescueKitError, format_exception_for_cli, wrap_fatal


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test exception class hierarchy and basic functionality."""

    def test_base_exception_creation(self):
        err = RescueKitError(code=1, msg="Test error")

        assert err.code == 1
        assert err.msg == "Test error"
        assert err.cause is None
        assert str(err) == "Test error"

    def test_fatal_exception(self):
        err = Fatal(code=2, msg="Fatal error")

        assert isinstance(err, RescueKitError)
        assert err.code == 2
        assert err.msg == "Fatal error"

    def test_fatal_positional_code_and_message(self):
        err = Fatal(3, "positional")

        assert err.code == 3
        assert str(err) == "positional"

    def test_bug_error_defaults_to_99(self):
        err = BugError(msg="cycle at 'bond0'")

        assert isinstance(err, RescueKitError)
        assert err.code == 99
        assert err.msg == "BUG: cycle at 'bond0'"

    def test_bug_prefix_not_doubled(self):
        assert BugError(msg="BUG: already").msg == "BUG: already"

    def test_exception_with_context(self):
        err = RescueKitError(code=1, msg="Error").with_context(device="bond0", step="network")

        assert err.context["device"] == "bond0"
        assert err.context["step"] == "network"

    def test_exit_code_is_clamped(self):
        assert RescueKitError(code=1000, msg="x").code == 255
        assert RescueKitError(code=-5, msg="x").code == 1
        assert RescueKitError(code="nope", msg="x").code == 1

    def test_message_is_single_line(self):
        err = Fatal(msg="line one\nline two")

        assert err.msg == "line one line two"

    def test_to_dict(self):
        err = wrap_fatal("copy failed", OSError("denied"), source="/etc/resolv.conf")
        d = err.to_dict(include_cause=True)

        assert d["type"] == "Fatal"
        assert d["code"] == 1
        assert d["context"] == {"source": "/etc/resolv.conf"}
        assert d["cause"]["type"] == "OSError"


@pytest.mark.security
class TestCliFormatting:
    """Context and causes only show up at higher verbosity."""

    def test_plain_message_at_default_verbosity(self):
        err = Fatal(msg="No nameserver").with_context(target="/tmp/x")

        assert format_exception_for_cli(err) == "No nameserver"

    def test_context_at_verbose_one(self):
        err = Fatal(msg="No nameserver").with_context(target="/tmp/x")

        assert "target='/tmp/x'" in format_exception_for_cli(err, verbose=1)

    def test_cause_at_verbose_two(self):
        err = wrap_fatal("copy failed", FileNotFoundError("gone"))

        out = format_exception_for_cli(err, verbose=2)
        assert "FileNotFoundError" in out
        assert "gone" in out

    def test_foreign_exception(self):
        assert format_exception_for_cli(ValueError("bad")) == "bad"
        assert format_exception_for_cli(ValueError("bad"), verbose=2) == "ValueError: bad"
