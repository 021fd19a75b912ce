"""
Workspace Module

Each pipeline run gets its own scratch directory holding the transcoded
MPEG, the authored DVD structure and the built ISO. The directory is
removed on every exit path.
"""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from .errors import ResourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Workspace:
    """Scratch directory owned by a single pipeline run."""
    root_dir: Path

    @property
    def transcoded_media_path(self) -> Path:
        return self.root_dir / "video.mpg"

    @property
    def authored_content_dir(self) -> Path:
        return self.root_dir / "dvd_content"

    @property
    def image_path(self) -> Path:
        return self.root_dir / "output.iso"


class WorkspaceManager:
    """Creates and removes per-run scratch directories."""

    PREFIX = "dvd-"

    def __init__(self, temp_dir: Optional[Path] = None):
        """
        Args:
            temp_dir: Parent directory for workspaces (system temp dir if not provided)
        """
        self.temp_dir = Path(temp_dir) if temp_dir else None

    def acquire(self) -> Workspace:
        """
        Create a uniquely named scratch directory.

        Raises:
            ResourceError: If the directory cannot be created
        """
        try:
            root = tempfile.mkdtemp(
                prefix=self.PREFIX,
                dir=str(self.temp_dir) if self.temp_dir else None
            )
        except OSError as e:
            raise ResourceError(f"Could not create workspace: {e}") from e

        logger.info(f"Created workspace: {root}")
        return Workspace(Path(root))

    def release(self, workspace: Workspace) -> None:
        """
        Recursively delete a workspace. Safe to call more than once.

        Raises:
            ResourceError: If an existing workspace cannot be removed
        """
        root = workspace.root_dir
        if not root.exists():
            return

        try:
            shutil.rmtree(root)
        except FileNotFoundError:
            return
        except OSError as e:
            raise ResourceError(f"Could not remove workspace {root}: {e}") from e

        logger.info(f"Removed workspace: {root}")

    @contextmanager
    def session(self) -> Iterator[Workspace]:
        """Acquire a workspace and release it exactly once when the block exits."""
        workspace = self.acquire()
        try:
            yield workspace
        except BaseException:
            try:
                self.release(workspace)
            except ResourceError as e:
                logger.error(f"Workspace cleanup failed: {e}")
            raise
        else:
            self.release(workspace)
