"""
Pipeline Module

Drives the full DVD authoring pipeline for a single video file:

    source file -> drive choice -> ffmpeg -> dvdauthor -> dvdauthor -T
    -> structure check -> mkisofs -> save ISO or burn

Every run works inside its own scratch workspace, which is removed whether
the run succeeds, fails or is canceled.
"""

import logging
import shutil
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Callable, Optional

from . import stages
from .config import PipelineConfig
from .drives import NO_DEVICE, DriveResolver, list_optical_drives
from .errors import PipelineError, ResourceError, SelectionCanceled, ValidationError
from .result import (
    PipelineRequest,
    PipelineResult,
    PipelineRun,
    PipelineState,
    ResultReporter,
)
from .stage_runner import StageRunner
from .validator import StructureValidator
from .workspace import Workspace, WorkspaceManager

logger = logging.getLogger(__name__)


def sanitize_filename(name: str, max_length: int = 200) -> str:
    """
    Sanitize a string for use as a filename.

    Args:
        name: Original filename
        max_length: Maximum length for the filename

    Returns:
        Safe filename string
    """
    # Keep only alphanumeric chars, spaces, dots, underscores, and hyphens
    safe = "".join(c for c in name if c.isalnum() or c in "._- ")
    safe = " ".join(safe.split())
    return safe[:max_length].strip()


class PipelineOrchestrator:
    """
    Turns a video file into a DVD ISO and optionally burns it.

    The interactive steps are injected as callables so the same pipeline
    can be driven from the desktop app or from tests:

    - select_source() returns the video path, or None if canceled
    - list_drives() returns optical drive identifiers, or raises
      DriveEnumerationError
    - choose_drive(drives) returns the chosen drive, or None if canceled
    - select_save_path(default) returns where to save the ISO, or None
      if canceled
    """

    def __init__(
        self,
        config: PipelineConfig,
        select_source: Callable[[], Optional[Path]],
        choose_drive: Callable[[list[str]], Optional[str]],
        select_save_path: Callable[[Path], Optional[Path]],
        list_drives: Optional[Callable[[], list[str]]] = None,
        runner: Optional[StageRunner] = None,
        workspace_manager: Optional[WorkspaceManager] = None,
        validator: Optional[StructureValidator] = None,
        reporter: Optional[ResultReporter] = None,
        log_callback: Optional[Callable[[str], None]] = None
    ):
        self.config = config
        self.select_source = select_source
        self.choose_drive = choose_drive
        self.select_save_path = select_save_path
        self.list_drives = list_drives or (lambda: list_optical_drives(config.platform))
        self.log_callback = log_callback
        self.runner = runner or StageRunner(log_callback)
        self.workspace_manager = workspace_manager or WorkspaceManager(config.temp_dir)
        self.validator = validator or StructureValidator()
        self.reporter = reporter or ResultReporter()

    def _log(self, message: str):
        logger.info(message)
        if self.log_callback:
            try:
                self.log_callback(message)
            except Exception:
                logger.exception("Log callback failed")

    def _advance(self, run: PipelineRun, state: PipelineState):
        logger.debug(f"{run.state.value} -> {state.value}")
        run.advance(state)

    def burn_disc(self, image_only: bool = False) -> PipelineResult:
        """
        Run the pipeline to completion.

        Args:
            image_only: Stop after saving an ISO instead of burning a disc

        Returns:
            PipelineResult with a log on success or an error message otherwise
        """
        run = PipelineRun(image_only=image_only)

        try:
            self._execute(run)
        except SelectionCanceled as e:
            self._log(str(e))
            run.error = e
            self._advance(run, PipelineState.CANCELED)
        except PipelineError as e:
            logger.error(f"Pipeline failed in state {run.state.value}: {e}")
            run.error = e
            self._advance(run, PipelineState.FAILED)
        except Exception as e:
            logger.exception(f"Unexpected error in state {run.state.value}")
            run.error = e
            self._advance(run, PipelineState.FAILED)
        else:
            self._advance(run, PipelineState.DONE)

        result = self.reporter.report(run)
        if result.success:
            self._log(result.log)
        elif not result.canceled:
            self._log(result.error)
        return result

    def start(
        self,
        image_only: bool = False,
        on_complete: Optional[Callable[[PipelineResult], None]] = None
    ) -> "Future[PipelineResult]":
        """
        Run the pipeline on a background thread.

        Args:
            image_only: Stop after saving an ISO instead of burning a disc
            on_complete: Optional callback invoked with the result

        Returns:
            Future resolving to the PipelineResult
        """
        future: Future = Future()

        def process():
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = self.burn_disc(image_only)
            except BaseException as e:
                logger.exception("Pipeline thread crashed")
                future.set_exception(e)
                result = PipelineResult(
                    success=False,
                    error=f"{ResultReporter.FAILURE_PREFIX}{e}"
                )
            else:
                future.set_result(result)
            if on_complete:
                on_complete(result)

        threading.Thread(target=process, daemon=True).start()
        return future

    def _execute(self, run: PipelineRun):
        source = self.select_source()
        if not source:
            raise SelectionCanceled("File selection was canceled.")

        run.request = PipelineRequest(Path(source), run.image_only)
        self._advance(run, PipelineState.SOURCE_SELECTED)
        self._log(f"Selected video: {run.request.source_video_path}")

        if run.image_only:
            run.drive = NO_DEVICE
            self._advance(run, PipelineState.DRIVE_SKIPPED)
        else:
            run.drive = DriveResolver(self.list_drives, self.choose_drive).resolve()
            self._advance(run, PipelineState.DRIVE_RESOLVED)

        with self.workspace_manager.session() as workspace:
            self._build_image(run, workspace)

            if run.image_only or not run.drive.has_device:
                self._save_image(run, workspace)
            else:
                self._burn_image(run, workspace)

    def _build_image(self, run: PipelineRun, workspace: Workspace):
        config = self.config
        source = run.request.source_video_path
        content_dir = workspace.authored_content_dir

        self._log("Transcoding video...")
        self.runner.run_checked(
            stages.transcode(config, source, workspace.transcoded_media_path)
        )
        self._advance(run, PipelineState.TRANSCODED)

        self._log("Building DVD structure...")
        self.runner.run_checked(
            stages.author(config, workspace.transcoded_media_path, content_dir)
        )
        self._advance(run, PipelineState.AUTHORED)

        self.runner.run_checked(stages.finalize_structure(config, content_dir))
        self._advance(run, PipelineState.STRUCTURE_FINALIZED)

        if not self.validator.validate(content_dir):
            raise ValidationError(self.validator.marker_path(content_dir))
        self._advance(run, PipelineState.STRUCTURE_VALIDATED)

        self._log("Creating ISO image...")
        self.runner.run_checked(
            stages.build_image(config, content_dir, workspace.image_path)
        )
        self._advance(run, PipelineState.IMAGE_BUILT)

    def _save_image(self, run: PipelineRun, workspace: Workspace):
        stem = sanitize_filename(run.request.source_video_path.stem) or "output"
        default_path = self.config.default_save_dir / f"{stem}.iso"

        destination = self.select_save_path(default_path)
        if not destination:
            raise SelectionCanceled("ISO save was canceled.")
        destination = Path(destination)

        try:
            shutil.copyfile(workspace.image_path, destination)
        except OSError as e:
            raise ResourceError(f"Could not save ISO to {destination}: {e}") from e

        self._advance(run, PipelineState.IMAGE_SAVED)
        run.log = f"ISO file saved to {destination}"

    def _burn_image(self, run: PipelineRun, workspace: Workspace):
        device = run.drive.device

        self._log(f"Burning to {device}...")
        self.runner.run_checked(stages.burn(self.config, device, workspace.image_path))
        self._advance(run, PipelineState.BURNED)

        run.log = f"Successfully burned {run.request.source_video_path.name} to {device}."
