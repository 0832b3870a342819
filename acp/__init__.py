"""Core package for the ACP 2014 production scheduling challenge.

Exports the instance data structures, the file loader, the model builder
and the construction + local search driver.
"""

from acp.algorithms import LocalSearchDriver  # noqa: F401
from acp.config import SolverConfig, load_config  # noqa: F401
from acp.model_builder import ModelBuilder  # noqa: F401
from acp.models import Instance, Schedule  # noqa: F401
from acp.parser import load_instance, parse_instance  # noqa: F401

__all__ = [
    "Instance",
    "Schedule",
    "load_instance",
    "parse_instance",
    "ModelBuilder",
    "LocalSearchDriver",
    "SolverConfig",
    "load_config",
]
