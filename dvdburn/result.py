"""
Result Module

Turns the final state of a pipeline run into the single result handed back
to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from .drives import DriveSelection


class PipelineState(Enum):
    """States a pipeline run moves through."""
    IDLE = "idle"
    SOURCE_SELECTED = "source_selected"
    DRIVE_RESOLVED = "drive_resolved"
    DRIVE_SKIPPED = "drive_skipped"
    TRANSCODED = "transcoded"
    AUTHORED = "authored"
    STRUCTURE_FINALIZED = "structure_finalized"
    STRUCTURE_VALIDATED = "structure_validated"
    IMAGE_BUILT = "image_built"
    IMAGE_SAVED = "image_saved"
    BURNED = "burned"
    DONE = "done"
    CANCELED = "canceled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.CANCELED, PipelineState.FAILED)


@dataclass(frozen=True)
class PipelineRequest:
    """What a single run was asked to do."""
    source_video_path: Path
    image_only: bool = False


@dataclass
class PipelineRun:
    """Bookkeeping for one run of the pipeline."""
    image_only: bool
    state: PipelineState = PipelineState.IDLE
    history: list[PipelineState] = field(default_factory=list)
    request: Optional[PipelineRequest] = None
    drive: Optional[DriveSelection] = None
    log: Optional[str] = None
    error: Optional[Exception] = None

    def __post_init__(self):
        self.history.append(self.state)

    def advance(self, state: PipelineState) -> None:
        if self.state.is_terminal:
            raise ValueError(f"Run already finished in state {self.state.value}")
        self.state = state
        self.history.append(state)


@dataclass(frozen=True)
class PipelineResult:
    """The value returned to the caller of a pipeline run."""
    success: bool
    log: Optional[str] = None
    error: Optional[str] = None
    canceled: bool = False

    def as_dict(self) -> dict:
        result = {"success": self.success}
        if self.log is not None:
            result["log"] = self.log
        if self.error is not None:
            result["error"] = self.error
        return result


class ResultReporter:
    """Maps a finished PipelineRun to a PipelineResult."""

    FAILURE_PREFIX = "An error occurred during the process: "

    def report(self, run: PipelineRun) -> PipelineResult:
        """
        Build the result for a finished run.

        Raises:
            ValueError: If the run has not reached a terminal state
        """
        if run.state == PipelineState.DONE:
            return PipelineResult(success=True, log=run.log)

        if run.state == PipelineState.CANCELED:
            return PipelineResult(success=False, error=str(run.error), canceled=True)

        if run.state == PipelineState.FAILED:
            return PipelineResult(success=False, error=f"{self.FAILURE_PREFIX}{run.error}")

        raise ValueError(f"Cannot report a run in state {run.state.value}")
