"""
DVDBurn - Video to DVD Authoring

Turns a single video file into a DVD-Video ISO image with ffmpeg, dvdauthor
and mkisofs, and optionally burns it to a blank disc.
"""

__version__ = "0.1.0"
__author__ = "DVDBurn Contributors"

from .config import (
    PipelineConfig,
    ToolPaths,
    VideoStandard,
    BurnerPlatform,
    resolve_tool_paths,
    check_dependencies,
)
from .errors import (
    PipelineError,
    SelectionCanceled,
    LaunchError,
    StageFailedError,
    StageTimeoutError,
    ValidationError,
    ResourceError,
)
from .workspace import Workspace, WorkspaceManager
from .stage_runner import StageRunner, StageInvocation, StageOutcome
from .drives import (
    DriveResolver,
    DriveSelection,
    DriveEnumerationError,
    NO_DEVICE,
    list_optical_drives,
)
from .validator import StructureValidator
from .result import (
    PipelineRequest,
    PipelineResult,
    PipelineRun,
    PipelineState,
    ResultReporter,
)
from .pipeline import PipelineOrchestrator

__all__ = [
    # Configuration
    "PipelineConfig",
    "ToolPaths",
    "VideoStandard",
    "BurnerPlatform",
    "resolve_tool_paths",
    "check_dependencies",
    # Errors
    "PipelineError",
    "SelectionCanceled",
    "LaunchError",
    "StageFailedError",
    "StageTimeoutError",
    "ValidationError",
    "ResourceError",
    # Workspace
    "Workspace",
    "WorkspaceManager",
    # Stage Runner
    "StageRunner",
    "StageInvocation",
    "StageOutcome",
    # Drives
    "DriveResolver",
    "DriveSelection",
    "DriveEnumerationError",
    "NO_DEVICE",
    "list_optical_drives",
    # Validation
    "StructureValidator",
    # Results
    "PipelineRequest",
    "PipelineResult",
    "PipelineRun",
    "PipelineState",
    "ResultReporter",
    # Pipeline
    "PipelineOrchestrator",
]
