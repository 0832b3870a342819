"""Solver configuration.

``SolverConfig`` bundles every tunable of a run so the CLI, YAML files and
tests can pass one object around. Values come from, in increasing priority:
the dataclass defaults, an optional YAML file, explicit command-line flags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Optional

import yaml

OPERATOR_NAMES = ("lns", "swap")


@dataclass(slots=True)
class SolverConfig:
    """Bundle of all configurable parameters of a search run.

    Attributes:
        lns_size: Number of periods freed by each random LNS move.
        lns_limit: Conflict (failure) limit of the inner repair search.
        lns_pass: Random LNS moves per neighbourhood pass; a pass without an
            accepted move ends the search.
        operators: Operator names whose passes are chained, in order.
        time_limit_s: Wall-clock limit of the whole search (None: unlimited).
        solution_limit: Stop after this many reported solutions (None: unlimited).
        seed: Seed of the search random generator (None: nondeterministic).
        trace_file: Optional CSV trace of accepted moves.
        charts_dir: Optional directory for PNG charts of the best schedule.
        log_level: Logging level name.
    """

    lns_size: int = 10
    lns_limit: int = 30
    lns_pass: int = 100
    operators: tuple[str, ...] = field(default_factory=lambda: ("lns",))
    time_limit_s: Optional[float] = None
    solution_limit: Optional[int] = None
    seed: Optional[int] = None
    trace_file: Optional[str] = None
    charts_dir: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if isinstance(self.operators, str):
            self.operators = tuple(
                name.strip() for name in self.operators.split(",") if name.strip()
            )
        else:
            self.operators = tuple(self.operators)
        self.validate()

    def validate(self) -> None:
        """Raise ValueError on out-of-range values."""
        if self.lns_size <= 0:
            raise ValueError("lns_size must be positive")
        if self.lns_limit <= 0:
            raise ValueError("lns_limit must be positive")
        if self.lns_pass <= 0:
            raise ValueError("lns_pass must be positive")
        if not self.operators:
            raise ValueError("at least one operator must be enabled")
        unknown = [name for name in self.operators if name not in OPERATOR_NAMES]
        if unknown:
            raise ValueError(f"Unknown operators: {', '.join(unknown)}")
        if self.time_limit_s is not None and self.time_limit_s <= 0:
            raise ValueError("time_limit_s must be positive")
        if self.solution_limit is not None and self.solution_limit <= 0:
            raise ValueError("solution_limit must be positive")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ValueError(f"Unknown log_level: {self.log_level}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SolverConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(values))

    def with_overrides(self, overrides: Mapping[str, Any]) -> "SolverConfig":
        """Return a copy with every non-None override applied."""
        applied = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **applied)


def load_config(config_file: str) -> SolverConfig:
    """Load configuration from a YAML file."""
    with open(config_file, "r", encoding="utf-8") as file:
        try:
            data = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Configuration file {config_file} is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {config_file} must contain a mapping")
    return SolverConfig.from_mapping(data)
