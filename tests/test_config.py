from pathlib import Path

import pytest

from dvdburn import config as config_module
from dvdburn.config import (
    BurnerPlatform,
    PipelineConfig,
    ToolPaths,
    VideoStandard,
    check_dependencies,
    resolve_tool_paths,
)


@pytest.fixture
def no_path_tools(monkeypatch):
    monkeypatch.setattr(config_module.shutil, "which", lambda name: None)


def test_bundled_binaries_are_preferred(tmp_path, no_path_tools):
    bin_dir = tmp_path / "resources" / "bin"
    bin_dir.mkdir(parents=True)
    for name in ("ffmpeg", "dvdauthor", "mkisofs"):
        (bin_dir / name).write_text("")

    tools = resolve_tool_paths(tmp_path / "resources", BurnerPlatform.MACOS)

    assert tools.ffmpeg == str(bin_dir / "ffmpeg")
    assert tools.dvdauthor == str(bin_dir / "dvdauthor")
    assert tools.mkisofs == str(bin_dir / "mkisofs")
    assert tools.burner == "hdiutil"


def test_path_lookup_and_genisoimage_fallback(monkeypatch):
    found = {
        "ffmpeg": "/usr/bin/ffmpeg",
        "genisoimage": "/usr/bin/genisoimage",
        "growisofs": "/usr/bin/growisofs",
    }
    monkeypatch.setattr(config_module.shutil, "which", found.get)

    tools = resolve_tool_paths(None, BurnerPlatform.LINUX)

    assert tools.ffmpeg == "/usr/bin/ffmpeg"
    assert tools.dvdauthor == "dvdauthor"
    assert tools.mkisofs == "/usr/bin/genisoimage"
    assert tools.burner == "/usr/bin/growisofs"


def test_check_dependencies(tmp_path, no_path_tools):
    ffmpeg = tmp_path / "ffmpeg"
    ffmpeg.write_text("")
    tools = ToolPaths(ffmpeg=str(ffmpeg), dvdauthor="dvdauthor", mkisofs="mkisofs", burner="hdiutil")

    assert check_dependencies(tools) == {
        "ffmpeg": True,
        "dvdauthor": False,
        "mkisofs": False,
        "burner": False,
    }


def test_from_environment_defaults():
    config = PipelineConfig.from_environment({})

    assert config.video_standard == VideoStandard.NTSC
    assert config.aspect_ratio == "16:9"
    assert config.burn_speed == 4
    assert config.stage_timeout is None
    assert config.temp_dir is None


def test_from_environment_overrides(tmp_path):
    config = PipelineConfig.from_environment({
        "DVDBURN_STANDARD": "PAL",
        "DVDBURN_ASPECT": "4:3",
        "DVDBURN_VOLUME_LABEL": "HOLIDAY",
        "DVDBURN_BURN_SPEED": "8",
        "DVDBURN_TEMP_DIR": str(tmp_path / "scratch"),
        "DVDBURN_SAVE_DIR": str(tmp_path / "isos"),
        "DVDBURN_STAGE_TIMEOUT": "3600",
    })

    assert config.video_standard == VideoStandard.PAL
    assert config.aspect_ratio == "4:3"
    assert config.volume_label == "HOLIDAY"
    assert config.burn_speed == 8
    assert config.temp_dir == tmp_path / "scratch"
    assert config.default_save_dir == tmp_path / "isos"
    assert config.stage_timeout == 3600.0


def test_from_environment_uses_bundled_resources(tmp_path, no_path_tools):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    (bin_dir / "ffmpeg").write_text("")

    config = PipelineConfig.from_environment({"DVDBURN_RESOURCES": str(tmp_path)})

    assert Path(config.tools.ffmpeg) == bin_dir / "ffmpeg"


@pytest.mark.parametrize("name, value", [
    ("DVDBURN_STANDARD", "secam"),
    ("DVDBURN_BURN_SPEED", "fast"),
    ("DVDBURN_STAGE_TIMEOUT", "soon"),
    ("DVDBURN_STAGE_TIMEOUT", "-5"),
])
def test_from_environment_rejects_invalid_values(name, value):
    with pytest.raises(ValueError):
        PipelineConfig.from_environment({name: value})
