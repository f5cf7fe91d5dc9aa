"""Benchmark plans loaded from YAML files.

A plan lists the load profiles to run in one invocation:

    benchmarks:
      - threads: 2
        connections: 32
        duration: 10
      - threads: 8
        connections: 128
        duration: 10
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from wrkbench.core.types import BenchmarkConfig


class BenchmarkPlan(BaseModel):
    """An ordered list of load profiles.

    Attributes:
        benchmarks: Profiles to run, in execution order.
    """

    model_config = {"frozen": True}

    benchmarks: list[BenchmarkConfig] = Field(
        default_factory=list,
        description="Profiles to run, in execution order",
    )

    @classmethod
    def from_yaml(cls, path: Path | str) -> BenchmarkPlan:
        """Load a plan from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            BenchmarkPlan loaded from the file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            pydantic.ValidationError: If a profile is invalid.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            msg = f"Plan file not found: {path}"
            raise FileNotFoundError(msg)

        data = yaml.safe_load(path.read_text())
        if data is None:
            return cls()
        if isinstance(data, list):
            data = {"benchmarks": data}
        return cls.model_validate(data)

    def to_yaml(self, path: Path | str) -> None:
        """Save the plan to a YAML file, durations in seconds.

        Args:
            path: Path to the output YAML file.
        """
        import yaml

        data = {
            "benchmarks": [
                {
                    "threads": config.threads,
                    "connections": config.connections,
                    "duration": config.duration_secs,
                }
                for config in self.benchmarks
            ]
        }
        Path(path).write_text(yaml.safe_dump(data, sort_keys=False))
