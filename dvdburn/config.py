"""
Configuration Module

Settings for the authoring pipeline: where the external tools live, which
DVD video standard to target, and where scratch and output files go.
"""

import logging
import os
import platform
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class VideoStandard(Enum):
    """DVD video standards."""
    NTSC = "ntsc"
    PAL = "pal"


class BurnerPlatform(Enum):
    """Supported burning platforms."""
    LINUX = "linux"
    MACOS = "macos"
    UNKNOWN = "unknown"


def detect_platform() -> BurnerPlatform:
    """Detect the current operating system."""
    system = platform.system().lower()

    if system == "linux":
        return BurnerPlatform.LINUX
    elif system == "darwin":
        return BurnerPlatform.MACOS
    return BurnerPlatform.UNKNOWN


def default_burner_tool(target: BurnerPlatform) -> str:
    """Name of the burning tool used on a platform."""
    if target == BurnerPlatform.LINUX:
        return "growisofs"
    return "hdiutil"


@dataclass
class ToolPaths:
    """Locations of the external tools driven by the pipeline."""
    ffmpeg: str = "ffmpeg"
    dvdauthor: str = "dvdauthor"
    mkisofs: str = "mkisofs"
    burner: str = field(default_factory=lambda: default_burner_tool(detect_platform()))

    def as_dict(self) -> dict[str, str]:
        return {
            "ffmpeg": self.ffmpeg,
            "dvdauthor": self.dvdauthor,
            "mkisofs": self.mkisofs,
            "burner": self.burner,
        }


def _find_tool(name: str, resources_dir: Optional[Path], fallbacks: tuple = ()) -> str:
    """Prefer a bundled binary, then PATH, then the bare name."""
    for candidate in (name, *fallbacks):
        if resources_dir is not None:
            bundled = Path(resources_dir) / "bin" / candidate
            if bundled.is_file():
                return str(bundled)
        found = shutil.which(candidate)
        if found:
            return found
    return name


def resolve_tool_paths(
    resources_dir: Optional[Path] = None,
    target: Optional[BurnerPlatform] = None
) -> ToolPaths:
    """
    Resolve the location of every external tool.

    Args:
        resources_dir: Directory holding bundled binaries under ``bin/``
        target: Platform to pick the burning tool for (auto-detected if not provided)

    Returns:
        ToolPaths with absolute paths where a tool was found
    """
    target = target or detect_platform()
    tools = ToolPaths(
        ffmpeg=_find_tool("ffmpeg", resources_dir),
        dvdauthor=_find_tool("dvdauthor", resources_dir),
        mkisofs=_find_tool("mkisofs", resources_dir, fallbacks=("genisoimage",)),
        burner=_find_tool(default_burner_tool(target), resources_dir),
    )
    logger.debug(f"Resolved tools: {tools.as_dict()}")
    return tools


def check_dependencies(tools: ToolPaths) -> dict[str, bool]:
    """
    Check which of the configured tools can actually be found.

    Returns:
        Dictionary of tool names and their availability
    """
    deps = {}
    for name, location in tools.as_dict().items():
        deps[name] = Path(location).is_file() or shutil.which(location) is not None
    return deps


@dataclass
class PipelineConfig:
    """Pipeline configuration."""
    tools: ToolPaths = field(default_factory=ToolPaths)
    platform: BurnerPlatform = field(default_factory=detect_platform)

    # Authoring settings
    video_standard: VideoStandard = VideoStandard.NTSC
    aspect_ratio: str = "16:9"
    volume_label: str = "DVDVIDEO"

    # Burn settings
    burn_speed: int = 4

    # Working directories
    temp_dir: Optional[Path] = None
    default_save_dir: Path = field(default_factory=lambda: Path.home() / "Documents")

    # Seconds a single stage may run; None waits forever
    stage_timeout: Optional[float] = None

    @classmethod
    def from_environment(cls, environ: Optional[dict] = None) -> "PipelineConfig":
        """
        Build a configuration from DVDBURN_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            PipelineConfig with defaults for unset variables

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        target = detect_platform()

        resources = env.get("DVDBURN_RESOURCES")
        config = cls(
            tools=resolve_tool_paths(Path(resources) if resources else None, target),
            platform=target,
        )

        standard = env.get("DVDBURN_STANDARD")
        if standard:
            try:
                config.video_standard = VideoStandard(standard.strip().lower())
            except ValueError:
                raise ValueError(f"DVDBURN_STANDARD must be 'ntsc' or 'pal', got {standard!r}")

        if env.get("DVDBURN_ASPECT"):
            config.aspect_ratio = env["DVDBURN_ASPECT"]
        if env.get("DVDBURN_VOLUME_LABEL"):
            config.volume_label = env["DVDBURN_VOLUME_LABEL"]
        if env.get("DVDBURN_TEMP_DIR"):
            config.temp_dir = Path(env["DVDBURN_TEMP_DIR"])
        if env.get("DVDBURN_SAVE_DIR"):
            config.default_save_dir = Path(env["DVDBURN_SAVE_DIR"])

        speed = env.get("DVDBURN_BURN_SPEED")
        if speed:
            try:
                config.burn_speed = int(speed)
            except ValueError:
                raise ValueError(f"DVDBURN_BURN_SPEED must be an integer, got {speed!r}")

        timeout = env.get("DVDBURN_STAGE_TIMEOUT")
        if timeout:
            try:
                config.stage_timeout = float(timeout)
            except ValueError:
                raise ValueError(f"DVDBURN_STAGE_TIMEOUT must be a number, got {timeout!r}")
            if config.stage_timeout <= 0:
                raise ValueError("DVDBURN_STAGE_TIMEOUT must be positive")

        return config
