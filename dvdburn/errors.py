"""
Errors Module

Exception hierarchy shared by the disc authoring pipeline. Every error the
orchestrator turns into a PipelineResult derives from PipelineError.
"""

from pathlib import Path
from typing import Optional


class PipelineError(Exception):
    """Base exception for pipeline errors."""
    pass


class SelectionCanceled(PipelineError):
    """Raised when the user cancels one of the interactive selections."""
    pass


class ResourceError(PipelineError):
    """Raised when the scratch workspace cannot be created, removed or written."""
    pass


class LaunchError(PipelineError):
    """Raised when an external tool cannot be started at all."""

    def __init__(self, stage: str, command: str, cause: Optional[BaseException] = None):
        self.stage = stage
        self.command = command
        self.cause = cause
        message = f"{stage} failed: could not launch '{command}'"
        if cause is not None:
            message += f" ({cause})"
        super().__init__(message)


class StageFailedError(PipelineError):
    """Raised when an external tool exits with a nonzero code."""

    def __init__(self, stage: str, command: str, exit_code: int):
        self.stage = stage
        self.command = command
        self.exit_code = exit_code
        super().__init__(
            f"{stage} failed: {Path(command).name} exited with code {exit_code}"
        )


class StageTimeoutError(PipelineError):
    """Raised when an external tool runs longer than its allowed timeout."""

    def __init__(self, stage: str, command: str, timeout: float):
        self.stage = stage
        self.command = command
        self.timeout = timeout
        super().__init__(
            f"{stage} failed: {Path(command).name} did not finish within {timeout:g} seconds"
        )


class ValidationError(PipelineError):
    """Raised when an authored DVD structure is missing a required file."""

    def __init__(self, missing_path: Path):
        self.missing_path = Path(missing_path)
        super().__init__(
            f"DVD structure incomplete: {self.missing_path} not found. "
            "dvdauthor may have failed. Check the logs above for errors."
        )
