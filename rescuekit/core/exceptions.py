# SPDX-License-Identifier: LGPL-3.0-or-later
# rescuekit/core/exceptions.py
"""
Error types for rescue system builds.

Fatal aborts the build with its exit code (1 unless given). BugError is for
states that cannot happen on a sane host and always exits 99. Both carry an
optional cause and a context dict that only shows up with -v / -vv.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

BUG_EXIT_CODE = 99


def _exit_code(value: Any) -> int:
    try:
        code = int(value)
    except (TypeError, ValueError):
        return 1
    if code < 0:
        return 1
    return min(code, 255)


def _flatten(text: Any, limit: int = 600) -> str:
    flat = " ".join(str(text or "").split())
    if len(flat) > limit:
        flat = flat[: limit - 3] + "..."
    return flat


def _describe_cause(cause: BaseException) -> str:
    return f"{type(cause).__name__}: {_flatten(cause)}"


@dataclass(eq=False)
class RescueKitError(Exception):
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None
    # set when the message already went through the project logger
    logged: bool = False

    def __post_init__(self) -> None:
        self.code = _exit_code(self.code)
        self._set_msg(_flatten(self.msg) or type(self).__name__)

    def _set_msg(self, msg: str) -> None:
        self.msg = msg
        Exception.__init__(self, msg)

    def with_context(self, **ctx: Any) -> "RescueKitError":
        self.context = {**(self.context or {}), **ctx}
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        text = self.msg
        if include_context and self.context:
            pairs = ", ".join(f"{k}={v!r}" for k, v in sorted(self.context.items()))
            text += f" [{_flatten(pairs)}]"
        if include_cause and self.cause is not None:
            text += f" (cause: {_describe_cause(self.cause)})"
        return text

    def __str__(self) -> str:
        return self.msg

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.msg,
            "context": dict(self.context or {}),
        }
        if include_cause and self.cause is not None:
            out["cause"] = {"type": type(self.cause).__name__, "message": _flatten(self.cause)}
        return out


class Fatal(RescueKitError):
    """The rescue system cannot be built as configured."""


@dataclass(eq=False)
class BugError(RescueKitError):
    """Inconsistent host state, e.g. a bonding/VLAN dependency cycle."""

    code: int = BUG_EXIT_CODE

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.msg.startswith("BUG"):
            self._set_msg(f"BUG: {self.msg}")


def wrap_fatal(msg: str, exc: Optional[BaseException] = None, code: int = 1, **context: Any) -> Fatal:
    return Fatal(code=code, msg=msg, cause=exc, context=context or None)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """Context from -v on, the cause from -vv on."""
    if isinstance(e, RescueKitError):
        return e.user_message(include_context=verbose >= 1, include_cause=verbose >= 2)
    if verbose >= 2:
        return _describe_cause(e)
    return _flatten(e) or type(e).__name__
