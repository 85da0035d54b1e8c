"""
Stage orchestration for the organization summary engine.

A run takes one closed record batch through an ordered list of stages.
Stages read the batch and the outputs of the stages they depend on from
the shared PipelineState and publish their own output under their name.
The first failing stage aborts the run, so no partially built summary
is ever returned.
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from orgscan.core.config import PipelineConfig, Config
from orgscan.core.exceptions import PipelineError

logger = logging.getLogger(__name__)


class StageStatus(Enum):
    """Lifecycle of a stage within one run."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StageRun:
    """Bookkeeping for one stage execution."""

    stage_name: str
    status: StageStatus = StageStatus.RUNNING
    started: float = field(default_factory=time.perf_counter)
    elapsed: Optional[float] = None
    error: Optional[str] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    def finish(self, status: StageStatus) -> None:
        self.status = status
        self.elapsed = time.perf_counter() - self.started

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "stage_name": self.stage_name,
            "status": self.status.value,
            "elapsed_seconds": round(self.elapsed, 6) if self.elapsed is not None else None,
            "error": self.error,
            "metrics": self.metrics,
        }


@dataclass
class PipelineState:
    """
    Everything one run knows about its batch.

    ``records`` is fixed for the whole run. ``data`` maps each completed
    stage name to the output that stage published.
    """

    pipeline_id: str
    organization: str
    records: Tuple[Any, ...] = ()
    scan_date: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    stage_runs: Dict[str, StageRun] = field(default_factory=dict)
    data: Dict[str, Any] = field(default_factory=dict)

    def status_of(self, stage_name: str) -> StageStatus:
        run = self.stage_runs.get(stage_name)
        return run.status if run else StageStatus.PENDING

    def is_completed(self, stage_name: str) -> bool:
        return self.status_of(stage_name) is StageStatus.COMPLETED

    def mark_running(self, stage_name: str) -> None:
        self.stage_runs[stage_name] = StageRun(stage_name)

    def mark_completed(
        self, stage_name: str, output: Any, metrics: Dict[str, Any] = None
    ) -> None:
        """Publish a stage output and close its bookkeeping entry."""
        run = self.stage_runs[stage_name]
        run.metrics = metrics or {}
        run.finish(StageStatus.COMPLETED)
        self.data[stage_name] = output

    def mark_failed(self, stage_name: str, error: str) -> None:
        run = self.stage_runs[stage_name]
        run.error = error
        run.finish(StageStatus.FAILED)

    def to_dict(self) -> Dict[str, Any]:
        """Run summary without the stage outputs."""
        return {
            "pipeline_id": self.pipeline_id,
            "organization": self.organization,
            "record_count": len(self.records),
            "scan_date": self.scan_date,
            "created_at": self.created_at.isoformat(),
            "stages": {name: run.to_dict() for name, run in self.stage_runs.items()},
        }


class PipelineStage(ABC):
    """
    One step of the engine.

    Subclasses name themselves, list the stages whose outputs they read,
    and return ``(output, metrics)`` from ``execute``.
    """

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this stage."""

    @property
    def dependencies(self) -> List[str]:
        """Stages whose output this stage reads."""
        return []

    @abstractmethod
    def execute(self, state: PipelineState) -> Tuple[Any, Dict[str, Any]]:
        """
        Process the batch.

        Args:
            state: Run state holding the batch and earlier stage outputs.

        Returns:
            Tuple of (output, metrics).

        Raises:
            PipelineError: If the stage cannot produce its output.
        """


class Pipeline:
    """
    Runs registered stages in order over one record batch.

    Stages run in registration order unless set_execution_order is
    called. Before the first stage runs, every stage is checked to come
    after the stages it depends on.
    """

    def __init__(self, config: PipelineConfig = None):
        self.config = config or Config.get()
        self.stages: Dict[str, PipelineStage] = {}
        self.execution_order: List[str] = []

    def register_stage(self, stage: PipelineStage) -> None:
        """Register a stage and append it to the execution order."""
        if stage.name not in self.stages:
            self.execution_order.append(stage.name)
        self.stages[stage.name] = stage
        logger.debug(f"Registered stage: {stage.name}")

    def set_execution_order(self, order: List[str]) -> None:
        """
        Replace the execution order.

        Raises:
            ValueError: If a name in the order is not registered.
        """
        unknown = [name for name in order if name not in self.stages]
        if unknown:
            raise ValueError(f"Unknown stage: {', '.join(unknown)}")
        self.execution_order = list(order)

    def _check_order(self) -> None:
        seen = set()
        for stage_name in self.execution_order:
            missing = [
                dep for dep in self.stages[stage_name].dependencies if dep not in seen
            ]
            if missing:
                raise PipelineError(
                    f"Stage {stage_name} runs before its dependencies: {', '.join(missing)}",
                    stage=stage_name,
                    details={"missing": missing},
                )
            seen.add(stage_name)

    def run(
        self,
        records: Sequence[Any],
        organization: str,
        scan_date: Optional[str] = None,
    ) -> PipelineState:
        """
        Take one record batch through every stage.

        Args:
            records: The closed batch of repository records.
            organization: Organization identifier.
            scan_date: Optional scan timestamp carried into the summary.

        Returns:
            Final state; ``state.data`` holds every stage output.

        Raises:
            PipelineError: If the stage order is inconsistent or a stage
                fails. Engine errors are re-raised unchanged; anything
                else is wrapped with the failing stage name.
        """
        self._check_order()

        state = PipelineState(
            pipeline_id=uuid.uuid4().hex[:8],
            organization=organization,
            records=tuple(records),
            scan_date=scan_date,
        )
        logger.info(
            f"Run {state.pipeline_id}: {len(state.records)} repositories "
            f"of {organization}"
        )

        for stage_name in self.execution_order:
            stage = self.stages[stage_name]
            state.mark_running(stage_name)

            try:
                output, metrics = stage.execute(state)
            except PipelineError as e:
                state.mark_failed(stage_name, str(e))
                logger.error(f"Run {state.pipeline_id} aborted in {stage_name}: {e}")
                raise
            except Exception as e:
                state.mark_failed(stage_name, str(e))
                logger.exception(f"Unexpected error in stage {stage_name}")
                raise PipelineError(f"Unexpected error: {e}", stage=stage_name) from e

            state.mark_completed(stage_name, output, metrics)
            run = state.stage_runs[stage_name]
            logger.debug(f"{stage_name} done in {run.elapsed:.3f}s: {run.metrics}")

        return state

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a registered stage by name."""
        return self.stages.get(name)

    def list_stages(self) -> List[str]:
        """Registered stage names in execution order."""
        return list(self.execution_order)
