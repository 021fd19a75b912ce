"""
Drives Module

Finds optical drives and lets the user pick the one to burn to. When no
drive can be found the run falls back to saving an ISO file; when the user
cancels the choice the run stops.
"""

import glob
import logging
import os
import re
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional

from .config import BurnerPlatform, detect_platform
from .errors import PipelineError, SelectionCanceled

logger = logging.getLogger(__name__)

DRUTIL_DEVICE_PATTERN = re.compile(r"/dev/disk[0-9]+")
LINUX_DEVICE_PATTERNS = ("/dev/sr*", "/dev/dvd*")


class DriveEnumerationError(PipelineError):
    """Raised when the operating system cannot be queried for drives."""
    pass


@dataclass(frozen=True)
class DriveSelection:
    """Outcome of drive resolution: a device, or no device at all."""
    device: Optional[str] = None

    @property
    def has_device(self) -> bool:
        return self.device is not None


NO_DEVICE = DriveSelection()


def _list_macos_drives() -> list[str]:
    try:
        result = subprocess.run(
            ["drutil", "list"],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=10
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise DriveEnumerationError(f"drutil list failed: {e}") from e

    if result.returncode != 0:
        raise DriveEnumerationError(f"drutil list failed: {result.stderr.strip()}")

    drives = []
    for device in DRUTIL_DEVICE_PATTERN.findall(result.stdout):
        if device not in drives:
            drives.append(device)
    return drives


def _list_linux_drives() -> list[str]:
    # /dev/dvd is usually a symlink to one of the /dev/sr* nodes
    drives = []
    seen = set()
    for pattern in LINUX_DEVICE_PATTERNS:
        for device in sorted(glob.glob(pattern)):
            target = os.path.realpath(device)
            if target not in seen:
                seen.add(target)
                drives.append(device)
    return drives


def list_optical_drives(target: Optional[BurnerPlatform] = None) -> list[str]:
    """
    Detect available optical drives.

    Args:
        target: Platform to query (auto-detected if not provided)

    Returns:
        Device identifiers in the order the system reports them

    Raises:
        DriveEnumerationError: If the platform cannot be queried
    """
    target = target or detect_platform()

    if target == BurnerPlatform.MACOS:
        return _list_macos_drives()
    elif target == BurnerPlatform.LINUX:
        return _list_linux_drives()

    raise DriveEnumerationError(f"Drive detection is not supported on {target.value}")


class DriveResolver:
    """Resolves which drive, if any, a run burns to."""

    def __init__(
        self,
        list_drives: Callable[[], list[str]],
        choose_drive: Callable[[list[str]], Optional[str]]
    ):
        """
        Args:
            list_drives: Returns candidate device identifiers, or raises DriveEnumerationError
            choose_drive: Given the candidates, returns the chosen one or None if canceled
        """
        self.list_drives = list_drives
        self.choose_drive = choose_drive

    def resolve(self) -> DriveSelection:
        """
        Ask the user which drive to burn to.

        Returns:
            The chosen drive, or NO_DEVICE if no drive could be found

        Raises:
            SelectionCanceled: If the user cancels the choice
        """
        try:
            drives = [d for d in self.list_drives() if d]
        except Exception as e:
            logger.warning(f"No DVD drive found, an ISO file will be saved instead: {e}")
            return NO_DEVICE

        if not drives:
            logger.warning("No DVD drive found, an ISO file will be saved instead")
            return NO_DEVICE

        choice = self.choose_drive(drives)
        if choice is None:
            raise SelectionCanceled("Drive selection was canceled.")

        logger.info(f"Selected drive: {choice}")
        return DriveSelection(choice)
