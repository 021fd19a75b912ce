from pathlib import Path

import pytest

from dvdburn.config import BurnerPlatform, PipelineConfig, ToolPaths
from dvdburn.errors import LaunchError
from dvdburn.result import ResultReporter
from dvdburn.stage_runner import StageOutcome, StageRunner
from dvdburn import stages


class FakeRunner(StageRunner):
    """Stands in for the real tools and writes the files they would write."""

    def __init__(self, exit_codes=None, launch_failures=(), write_marker=True):
        super().__init__()
        self.exit_codes = exit_codes or {}
        self.launch_failures = set(launch_failures)
        self.write_marker = write_marker
        self.invocations = []

    @property
    def stages_run(self):
        return [inv.stage for inv in self.invocations]

    def run(self, invocation):
        self.invocations.append(invocation)

        if invocation.stage in self.launch_failures:
            raise LaunchError(invocation.stage, invocation.command, FileNotFoundError(2, "No such file"))

        exit_code = self.exit_codes.get(invocation.stage, 0)
        if exit_code == 0:
            self._simulate(invocation)
        return StageOutcome(exit_code)

    def _simulate(self, invocation):
        args = invocation.args
        if invocation.stage == stages.TRANSCODE:
            Path(args[-1]).write_bytes(b"mpeg")
        elif invocation.stage == stages.AUTHOR:
            video_ts = Path(args[args.index("-o") + 1]) / "VIDEO_TS"
            video_ts.mkdir(parents=True, exist_ok=True)
            (video_ts / "VTS_01_1.VOB").write_bytes(b"vob")
        elif invocation.stage == stages.FINALIZE and self.write_marker:
            video_ts = Path(args[args.index("-o") + 1]) / "VIDEO_TS"
            video_ts.mkdir(parents=True, exist_ok=True)
            (video_ts / "VIDEO_TS.IFO").write_bytes(b"ifo")
        elif invocation.stage == stages.BUILD_IMAGE:
            Path(args[args.index("-o") + 1]).write_bytes(b"iso image")


class FakeDialogs:
    """Scripted answers for the interactive steps, with call tracking."""

    def __init__(self, source=None, drives=None, drive_choice=None, save_path=None,
                 drive_error=None):
        self.source = source
        self.drives = drives if drives is not None else []
        self.drive_choice = drive_choice
        self.save_path = save_path
        self.drive_error = drive_error
        self.calls = []
        self.save_defaults = []

    def select_source(self):
        self.calls.append("select_source")
        return self.source

    def list_drives(self):
        self.calls.append("list_drives")
        if self.drive_error is not None:
            raise self.drive_error
        return list(self.drives)

    def choose_drive(self, drives):
        self.calls.append("choose_drive")
        return self.drive_choice

    def select_save_path(self, default_path):
        self.calls.append("select_save_path")
        self.save_defaults.append(default_path)
        return self.save_path


class RecordingReporter(ResultReporter):
    def __init__(self):
        self.runs = []

    def report(self, run):
        self.runs.append(run)
        return super().report(run)


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path, scratch_dir):
    save_dir = tmp_path / "saved"
    save_dir.mkdir()
    return PipelineConfig(
        tools=ToolPaths(
            ffmpeg="/opt/dvd/bin/ffmpeg",
            dvdauthor="/opt/dvd/bin/dvdauthor",
            mkisofs="/opt/dvd/bin/mkisofs",
            burner="hdiutil",
        ),
        platform=BurnerPlatform.MACOS,
        temp_dir=scratch_dir,
        default_save_dir=save_dir,
    )
