"""wrk executor.

Runs the wrk load generator as a subprocess, one profile at a time, and
parses the JSON summary printed by the ``done()`` hook.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from pydantic import ValidationError

from wrkbench.adapters.lua import OUTPUT_MARKER, LuaScript
from wrkbench.core.exceptions import ConfigurationError, ScriptError
from wrkbench.core.types import RunResult

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wrkbench.core.types import BenchmarkConfig

logger = logging.getLogger(__name__)


def parse_output(stdout: str) -> RunResult:
    """Parse the stdout of a wrk run into a RunResult.

    Returns:
        The measured run, or a failed run if no valid summary was printed.
    """
    _, marker, payload = stdout.partition(OUTPUT_MARKER)
    if not marker or not payload.strip():
        return RunResult.fail("Wrk returned empty JSON")
    try:
        return RunResult.model_validate_json(payload.strip())
    except ValidationError as e:
        return RunResult.fail(f"Wrk JSON result deserialize failed: {e}")


class WrkExecutor:
    """Executor running the wrk binary.

    Attributes:
        url: Full URL of the request to benchmark.
        method: HTTP method.
        headers: Request headers.
        body: Request body.
        user_script: Optional user Lua script (must not define ``done()``).
        wrk_binary: Name or path of the wrk executable.
        timeout: Optional timeout for each wrk process, in seconds.

    Example:
        >>> executor = WrkExecutor("http://localhost:8080/pokemon-species/pikachu")
        >>> run = executor.execute(BenchmarkConfig(duration=5))
    """

    def __init__(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: str = "",
        user_script: Path | str | None = None,
        wrk_binary: str = "wrk",
        timeout: float | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize WrkExecutor.

        Raises:
            ConfigurationError: If ``url`` is not an absolute http(s) URL.
        """
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(f"Invalid target URL: {url}")

        self.url = url
        self.method = method
        self.headers = dict(headers or {})
        self.body = body
        self.user_script = Path(user_script) if user_script is not None else None
        self.wrk_binary = wrk_binary
        self.timeout = timeout
        self._logger = log or logger
        self._uri = (parts.path or "/") + (f"?{parts.query}" if parts.query else "")

    def args(self, config: BenchmarkConfig, script_path: str) -> list[str]:
        """Command line for one profile."""
        return [
            self.wrk_binary,
            "-t",
            str(config.threads),
            "-c",
            str(config.connections),
            "-d",
            f"{config.duration_secs}s",
            "-s",
            script_path,
            self.url,
        ]

    def execute(self, config: BenchmarkConfig) -> RunResult:
        """Run one profile and parse its summary.

        Every failure (missing binary, timeout, non-zero exit, unparsable
        output) is returned as a failed RunResult.

        Args:
            config: The load profile to run.

        Returns:
            The measured run with ``success`` not yet set.
        """
        try:
            script = LuaScript.render(self.user_script, self._uri, self.method, self.headers, self.body)
        except ScriptError as e:
            self._logger.error(str(e))
            return RunResult.fail(str(e))

        with tempfile.NamedTemporaryFile("w", prefix="wrkbench_", suffix=".lua") as script_file:
            script_file.write(script)
            script_file.flush()
            try:
                completed = subprocess.run(
                    self.args(config, script_file.name),
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                self._logger.error(f"Wrk execution failed: {e}")
                return RunResult.fail(str(e))

        if completed.returncode != 0:
            self._logger.error(
                f"Wrk execution failed.\nOutput: {completed.stdout}\nError: {completed.stderr}"
            )
            return RunResult.fail(completed.stderr.strip() or f"wrk exited with status {completed.returncode}")

        self._logger.debug(f"Wrk execution succeeded:\n{completed.stdout}")
        run = parse_output(completed.stdout)
        if run.error:
            self._logger.error(run.error)
        return run
