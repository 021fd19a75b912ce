"""
Structure validation for authored DVD content.

dvdauthor can exit 0 while leaving a structure without its table of
contents, so the image build is gated on VIDEO_TS/VIDEO_TS.IFO existing.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

REQUIRED_MARKER = Path("VIDEO_TS") / "VIDEO_TS.IFO"


class StructureValidator:
    """Checks that a DVD structure is complete enough to build an ISO from."""

    def __init__(self, marker: Path = REQUIRED_MARKER):
        self.marker = Path(marker)

    def marker_path(self, authored_content_dir: Path) -> Path:
        return Path(authored_content_dir) / self.marker

    def validate(self, authored_content_dir: Path) -> bool:
        marker = self.marker_path(authored_content_dir)
        if marker.is_file():
            logger.debug(f"Found {marker}")
            return True

        logger.error(f"Missing required DVD structure file: {marker}")
        return False
