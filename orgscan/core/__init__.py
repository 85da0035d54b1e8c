"""
Core module containing pipeline orchestration, configuration, and base classes.
"""

from orgscan.core.config import Config, PipelineConfig
from orgscan.core.pipeline import Pipeline, PipelineStage, PipelineState
from orgscan.core.exceptions import (
    PipelineError,
    InputContractViolation,
    DuplicateRepositoryError,
    RecordLoadError,
    ReportError,
)

__all__ = [
    "Config",
    "PipelineConfig",
    "Pipeline",
    "PipelineStage",
    "PipelineState",
    "PipelineError",
    "InputContractViolation",
    "DuplicateRepositoryError",
    "RecordLoadError",
    "ReportError",
]
