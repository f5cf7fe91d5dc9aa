"""Tests for YAML benchmark plans."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from wrkbench.core.plan import BenchmarkPlan
from wrkbench.core.types import BenchmarkConfig

if TYPE_CHECKING:
    from pathlib import Path


class TestBenchmarkPlan:
    """Tests for BenchmarkPlan."""

    def test_from_yaml(self, tmp_path: Path) -> None:
        """Plans list profiles under a benchmarks key."""
        path = tmp_path / "plan.yaml"
        path.write_text(
            """
benchmarks:
  - threads: 2
    connections: 32
    duration: 10
  - threads: 8
    connections: 128
    duration: 10
"""
        )

        plan = BenchmarkPlan.from_yaml(path)

        assert [c.to_key() for c in plan.benchmarks] == ["2-32-10", "8-128-10"]

    def test_from_yaml_bare_list(self, tmp_path: Path) -> None:
        """A bare list of profiles is accepted."""
        path = tmp_path / "plan.yaml"
        path.write_text("- threads: 4\n  connections: 64\n  duration: 5\n")

        plan = BenchmarkPlan.from_yaml(path)

        assert plan.benchmarks == [BenchmarkConfig(threads=4, connections=64, duration=5)]

    def test_from_yaml_defaults(self, tmp_path: Path) -> None:
        """Missing profile fields take their defaults."""
        path = tmp_path / "plan.yaml"
        path.write_text("benchmarks:\n  - threads: 4\n")

        plan = BenchmarkPlan.from_yaml(path)

        assert plan.benchmarks[0].to_key() == "4-32-30"

    def test_from_yaml_empty_file(self, tmp_path: Path) -> None:
        """An empty file is an empty plan."""
        path = tmp_path / "plan.yaml"
        path.write_text("")

        assert BenchmarkPlan.from_yaml(path).benchmarks == []

    def test_from_yaml_missing_file(self, tmp_path: Path) -> None:
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Plan file not found"):
            BenchmarkPlan.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_invalid_profile(self, tmp_path: Path) -> None:
        """Invalid profiles are rejected."""
        path = tmp_path / "plan.yaml"
        path.write_text("benchmarks:\n  - threads: 0\n")

        with pytest.raises(ValidationError):
            BenchmarkPlan.from_yaml(path)

    def test_to_yaml(self, tmp_path: Path) -> None:
        """Saved plans load back identically."""
        plan = BenchmarkPlan(benchmarks=BenchmarkConfig.exponential()[:3])
        path = tmp_path / "plan.yaml"

        plan.to_yaml(path)

        assert "duration: 30" in path.read_text()
        assert BenchmarkPlan.from_yaml(path) == plan
