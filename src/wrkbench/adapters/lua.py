"""Lua scripts consumed by wrk.

Every script ends with a ``done()`` hook that prints the run summary as
JSON after a ``JSON`` marker, so the executor can parse wrk's stdout.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

from wrkbench.core.exceptions import ScriptError

if TYPE_CHECKING:
    from collections.abc import Mapping

OUTPUT_MARKER = "JSON"

DONE_FUNCTION = """
-- Print the run summary as JSON, prefixed by a marker so the
-- output can be told apart from wrk's own report.
done = function(summary, latency, requests)
    local errors = summary.errors.connect
        + summary.errors.read
        + summary.errors.write
        + summary.errors.status
        + summary.errors.timeout
    io.write("JSON")
    io.write(string.format(
        [[{
    "requests": %d,
    "errors": %d,
    "successes": %d,
    "requests_per_sec": %.2f,
    "avg_latency_ms": %.2f,
    "min_latency_ms": %.2f,
    "max_latency_ms": %.2f,
    "stdev_latency_ms": %.2f,
    "transfer_mb": %d,
    "errors_connect": %d,
    "errors_read": %d,
    "errors_write": %d,
    "errors_status": %d,
    "errors_timeout": %d
}
]],
        summary.requests,
        errors,
        summary.requests - errors,
        summary.requests / (summary.duration / 1000000),
        (latency.mean / 1000),
        (latency.min / 1000),
        (latency.max / 1000),
        (latency.stdev / 1000),
        (summary.bytes / 1048576),
        summary.errors.connect,
        summary.errors.read,
        summary.errors.write,
        summary.errors.status,
        summary.errors.timeout
    ))
end
"""

_DONE_DEFINITION = re.compile(r"^\s*(?:local\s+)?(?:function\s+done\s*\(|done\s*=)", re.MULTILINE)


_LUA_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}


def _lua_escape(char: str) -> str:
    if char in _LUA_ESCAPES:
        return _LUA_ESCAPES[char]
    # Lua 5.1 has no \xXX or \u{XXXX}; use three digit decimal escapes.
    if ord(char) < 0x20 or ord(char) == 0x7F:
        return f"\\{ord(char):03d}"
    return char


def _lua_string(value: str) -> str:
    """Quote a value as a Lua string literal."""
    return '"' + "".join(_lua_escape(char) for char in value) + '"'


class LuaScript:
    """Builds the Lua script handed to wrk.

    Example:
        >>> script = LuaScript.render(None, "/pokemon", "GET", {"Accept": "application/json"}, "")
        >>> "done = function" in script
        True
    """

    @staticmethod
    def request_function(uri: str, method: str, headers: Mapping[str, str], body: str) -> str:
        """Lua ``request()`` function issuing the configured request."""
        header_lines = "".join(
            f"    wrk.headers[{_lua_string(name)}] = {_lua_string(value)}\n" for name, value in headers.items()
        )
        return (
            "request = function()\n"
            f"    wrk.method = {_lua_string(method)}\n"
            f"    wrk.body = {_lua_string(body)}\n"
            f"{header_lines}"
            f"    return wrk.format({_lua_string(method)}, {_lua_string(uri)})\n"
            "end\n"
        )

    @staticmethod
    def from_user(path: Path) -> str:
        """Read a user script and append the ``done()`` hook.

        Raises:
            ScriptError: If the script is missing or defines ``done()`` itself.
        """
        if not path.exists():
            raise ScriptError(f"Wrk Lua file not found: {path}")
        content = path.read_text()
        if _DONE_DEFINITION.search(content):
            raise ScriptError(f"Wrk Lua file {path} must not define done()")
        return content + DONE_FUNCTION

    @classmethod
    def render(
        cls,
        user_script: Path | None,
        uri: str,
        method: str,
        headers: Mapping[str, str],
        body: str,
    ) -> str:
        """Script content for one run.

        Args:
            user_script: Optional user script; replaces the generated
                ``request()`` function.
            uri: Path and query of the target URL.
            method: HTTP method.
            headers: Request headers.
            body: Request body.

        Returns:
            The Lua source.

        Raises:
            ScriptError: If the user script cannot be used.
        """
        if user_script is not None:
            return cls.from_user(Path(user_script))
        return cls.request_function(uri, method, headers, body) + DONE_FUNCTION
