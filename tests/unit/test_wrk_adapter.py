"""Tests for the wrk executor."""

from __future__ import annotations

import json
import subprocess
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from wrkbench.adapters.wrk import WrkExecutor, parse_output
from wrkbench.core.exceptions import ConfigurationError
from wrkbench.core.protocols import ExecutorProtocol
from wrkbench.core.types import BenchmarkConfig

if TYPE_CHECKING:
    from pathlib import Path

SUMMARY = {
    "requests": 30000,
    "errors": 0,
    "successes": 30000,
    "requests_per_sec": 1000.5,
    "avg_latency_ms": 10.25,
    "min_latency_ms": 1.0,
    "max_latency_ms": 50.0,
    "stdev_latency_ms": 4.5,
    "transfer_mb": 12,
    "errors_connect": 0,
    "errors_read": 0,
    "errors_write": 0,
    "errors_status": 0,
    "errors_timeout": 0,
}

WRK_STDOUT = (
    "Running 30s test @ http://localhost:8080/api\n"
    "  8 threads and 32 connections\n"
    "Requests/sec:   1000.50\n"
    f"JSON{json.dumps(SUMMARY, indent=4)}\n"
)

CONFIG = BenchmarkConfig(threads=4, connections=64, duration=10)


def completed(returncode: int = 0, stdout: str = WRK_STDOUT, stderr: str = "") -> subprocess.CompletedProcess[str]:
    """Helper to build a finished wrk process."""
    return subprocess.CompletedProcess(args=["wrk"], returncode=returncode, stdout=stdout, stderr=stderr)


# ============================================================================
# Output Parsing Tests
# ============================================================================


class TestParseOutput:
    """Tests for parse_output."""

    def test_parses_summary(self) -> None:
        """The JSON after the marker becomes the run."""
        run = parse_output(WRK_STDOUT)

        assert run.error == ""
        assert run.requests == 30000
        assert run.requests_per_sec == 1000.5
        assert run.avg_latency_ms == 10.25
        assert run.transfer_mb == 12

    def test_missing_marker(self) -> None:
        """Output without a summary is a failed run."""
        run = parse_output("Running 30s test @ http://localhost:8080/\n")

        assert run.success is False
        assert run.error == "Wrk returned empty JSON"

    def test_invalid_json(self) -> None:
        """Unparsable summaries are failed runs."""
        run = parse_output("JSON{not json")

        assert run.error.startswith("Wrk JSON result deserialize failed")


# ============================================================================
# Executor Tests
# ============================================================================


class TestWrkExecutor:
    """Tests for WrkExecutor."""

    def test_implements_protocol(self) -> None:
        """WrkExecutor satisfies ExecutorProtocol."""
        assert isinstance(WrkExecutor("http://localhost:8080/"), ExecutorProtocol)

    @pytest.mark.parametrize("url", ["localhost:8080", "ftp://localhost/", "http://", "/api"])
    def test_rejects_invalid_urls(self, url: str) -> None:
        """Only absolute http(s) URLs are accepted."""
        with pytest.raises(ConfigurationError, match="Invalid target URL"):
            WrkExecutor(url)

    def test_args(self) -> None:
        """The command line carries the profile, script and URL."""
        executor = WrkExecutor("http://localhost:8080/api", wrk_binary="/opt/wrk")

        args = executor.args(CONFIG, "/tmp/script.lua")

        assert args == [
            "/opt/wrk",
            "-t",
            "4",
            "-c",
            "64",
            "-d",
            "10s",
            "-s",
            "/tmp/script.lua",
            "http://localhost:8080/api",
        ]

    def test_execute(self) -> None:
        """A successful wrk run is parsed."""
        executor = WrkExecutor("http://localhost:8080/api?page=1", method="POST", timeout=60)

        with patch("wrkbench.adapters.wrk.subprocess.run", return_value=completed()) as mock_run:
            run = executor.execute(CONFIG)

        assert run.requests_per_sec == 1000.5
        assert run.success is False  # decided by ingestion
        args = mock_run.call_args.args[0]
        assert args[:7] == ["wrk", "-t", "4", "-c", "64", "-d", "10s"]
        assert args[-1] == "http://localhost:8080/api?page=1"
        assert mock_run.call_args.kwargs["timeout"] == 60

    def test_script_is_written_for_wrk(self) -> None:
        """The generated script is on disk while wrk runs."""
        scripts: list[str] = []

        def fake_run(args: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
            with open(args[args.index("-s") + 1]) as f:
                scripts.append(f.read())
            return completed()

        executor = WrkExecutor("http://localhost:8080/api?page=1", method="POST")
        with patch("wrkbench.adapters.wrk.subprocess.run", side_effect=fake_run):
            executor.execute(CONFIG)

        assert 'return wrk.format("POST", "/api?page=1")' in scripts[0]

    def test_non_zero_exit(self) -> None:
        """A failing wrk process is a failed run with its stderr."""
        executor = WrkExecutor("http://localhost:8080/")

        with patch(
            "wrkbench.adapters.wrk.subprocess.run",
            return_value=completed(returncode=1, stdout="", stderr="unable to connect to localhost:8080"),
        ):
            run = executor.execute(CONFIG)

        assert run.error == "unable to connect to localhost:8080"

    def test_non_zero_exit_without_stderr(self) -> None:
        """The exit status is reported when stderr is empty."""
        executor = WrkExecutor("http://localhost:8080/")

        with patch("wrkbench.adapters.wrk.subprocess.run", return_value=completed(returncode=2, stdout="")):
            run = executor.execute(CONFIG)

        assert run.error == "wrk exited with status 2"

    def test_missing_binary(self) -> None:
        """A missing wrk binary is a failed run."""
        executor = WrkExecutor("http://localhost:8080/", wrk_binary="no-such-wrk")

        with patch(
            "wrkbench.adapters.wrk.subprocess.run",
            side_effect=FileNotFoundError("No such file or directory: 'no-such-wrk'"),
        ):
            run = executor.execute(CONFIG)

        assert "no-such-wrk" in run.error

    def test_timeout(self) -> None:
        """A timed out wrk process is a failed run."""
        executor = WrkExecutor("http://localhost:8080/", timeout=1)

        with patch(
            "wrkbench.adapters.wrk.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="wrk", timeout=1),
        ):
            run = executor.execute(CONFIG)

        assert "timed out" in run.error

    def test_invalid_user_script(self, tmp_path: Path) -> None:
        """Script problems fail the run without starting wrk."""
        executor = WrkExecutor("http://localhost:8080/", user_script=tmp_path / "missing.lua")

        with patch("wrkbench.adapters.wrk.subprocess.run") as mock_run:
            run = executor.execute(CONFIG)

        assert "not found" in run.error
        mock_run.assert_not_called()
