"""
Stages Module

Builds the command line for each external tool in the authoring pipeline:
ffmpeg to transcode, dvdauthor to author and finalize the DVD structure,
mkisofs to build the ISO, and hdiutil or growisofs to burn it.
"""

import os
from pathlib import Path
from typing import Optional

from .config import BurnerPlatform, PipelineConfig
from .errors import PipelineError
from .stage_runner import StageInvocation

TRANSCODE = "transcode"
AUTHOR = "author"
FINALIZE = "finalize-structure"
BUILD_IMAGE = "build-image"
BURN = "burn"

# mkisofs rejects longer volume identifiers
MAX_VOLUME_LABEL = 32


def strip_trailing_separator(path) -> str:
    """Remove trailing path separators, keeping a bare root intact."""
    text = os.fspath(path)
    separators = os.sep + (os.altsep or "")
    stripped = text.rstrip(separators)
    return stripped or text[:1]


def transcode(config: PipelineConfig, source: Path, output: Path) -> StageInvocation:
    """Convert the source video to a DVD-compliant MPEG-2 program stream."""
    return StageInvocation(
        stage=TRANSCODE,
        command=config.tools.ffmpeg,
        args=[
            "-i", str(source),
            "-target", f"{config.video_standard.value}-dvd",
            "-aspect", config.aspect_ratio,
            "-y",
            str(output),
        ],
        timeout=config.stage_timeout,
    )


def author(config: PipelineConfig, media: Path, content_dir: Path) -> StageInvocation:
    """Add the transcoded media as a title of the DVD structure."""
    return StageInvocation(
        stage=AUTHOR,
        command=config.tools.dvdauthor,
        args=["-o", str(content_dir), "-t", str(media)],
        timeout=config.stage_timeout,
    )


def finalize_structure(config: PipelineConfig, content_dir: Path) -> StageInvocation:
    """Write the table of contents (VIDEO_TS.IFO) for an authored structure."""
    return StageInvocation(
        stage=FINALIZE,
        command=config.tools.dvdauthor,
        args=["-o", str(content_dir), "-T"],
        timeout=config.stage_timeout,
    )


def build_image(config: PipelineConfig, content_dir: Path, image: Path) -> StageInvocation:
    """Pack a finalized DVD structure into an ISO image."""
    return StageInvocation(
        stage=BUILD_IMAGE,
        command=config.tools.mkisofs,
        args=[
            "-dvd-video",
            "-V", config.volume_label[:MAX_VOLUME_LABEL],
            "-o", str(image),
            strip_trailing_separator(content_dir),
        ],
        timeout=config.stage_timeout,
    )


def burn(
    config: PipelineConfig,
    device: str,
    image: Path,
    target: Optional[BurnerPlatform] = None
) -> StageInvocation:
    """
    Write an ISO image to the disc in a drive.

    Args:
        config: Pipeline configuration
        device: Device identifier chosen by the user
        image: ISO image to burn
        target: Platform to build the command for (defaults to config.platform)

    Raises:
        PipelineError: If burning is not supported on the platform
    """
    target = target or config.platform

    if target == BurnerPlatform.MACOS:
        args = ["burn", "-device", device, str(image)]
    elif target == BurnerPlatform.LINUX:
        args = [
            "-dvd-compat",
            f"-speed={config.burn_speed}",
            "-Z", f"{device}={image}",
        ]
    else:
        raise PipelineError(f"Burning is not supported on platform: {target.value}")

    return StageInvocation(
        stage=BURN,
        command=config.tools.burner,
        args=args,
        timeout=config.stage_timeout,
    )
