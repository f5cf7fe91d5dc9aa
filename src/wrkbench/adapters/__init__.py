"""Adapters module for wrkbench.

This module provides the executor that drives the external wrk load
generator and the Lua scripts it consumes.
"""

from __future__ import annotations

from wrkbench.adapters.lua import LuaScript
from wrkbench.adapters.wrk import WrkExecutor, parse_output

__all__ = [
    "LuaScript",
    "WrkExecutor",
    "parse_output",
]
