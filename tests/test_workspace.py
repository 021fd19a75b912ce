import pytest

from dvdburn.errors import ResourceError
from dvdburn.workspace import Workspace, WorkspaceManager


def test_acquire_creates_unique_directories(scratch_dir):
    manager = WorkspaceManager(scratch_dir)

    first = manager.acquire()
    second = manager.acquire()

    assert first.root_dir.is_dir()
    assert second.root_dir.is_dir()
    assert first.root_dir != second.root_dir
    assert first.root_dir.parent == scratch_dir
    assert first.root_dir.name.startswith("dvd-")


def test_derived_paths_live_under_root(tmp_path):
    workspace = Workspace(tmp_path / "dvd-abc")

    assert workspace.transcoded_media_path == tmp_path / "dvd-abc" / "video.mpg"
    assert workspace.authored_content_dir == tmp_path / "dvd-abc" / "dvd_content"
    assert workspace.image_path == tmp_path / "dvd-abc" / "output.iso"


def test_acquire_failure_is_a_resource_error(tmp_path):
    manager = WorkspaceManager(tmp_path / "does-not-exist")

    with pytest.raises(ResourceError):
        manager.acquire()


def test_release_removes_tree(scratch_dir):
    manager = WorkspaceManager(scratch_dir)
    workspace = manager.acquire()
    (workspace.authored_content_dir / "VIDEO_TS").mkdir(parents=True)
    workspace.image_path.write_bytes(b"iso")

    manager.release(workspace)

    assert not workspace.root_dir.exists()


def test_release_is_idempotent(scratch_dir):
    manager = WorkspaceManager(scratch_dir)
    workspace = manager.acquire()

    manager.release(workspace)
    manager.release(workspace)

    assert not workspace.root_dir.exists()
    assert list(scratch_dir.iterdir()) == []


def test_release_of_never_created_workspace(tmp_path):
    WorkspaceManager().release(Workspace(tmp_path / "dvd-missing"))


def test_session_releases_on_success(scratch_dir):
    manager = WorkspaceManager(scratch_dir)

    with manager.session() as workspace:
        assert workspace.root_dir.is_dir()

    assert not workspace.root_dir.exists()


def test_session_releases_on_error(scratch_dir):
    manager = WorkspaceManager(scratch_dir)

    with pytest.raises(RuntimeError):
        with manager.session() as workspace:
            raise RuntimeError("stage broke")

    assert not workspace.root_dir.exists()


def test_session_keeps_original_error_when_cleanup_fails(scratch_dir, monkeypatch):
    manager = WorkspaceManager(scratch_dir)

    def failing_release(workspace):
        raise ResourceError("disk gone")

    monkeypatch.setattr(manager, "release", failing_release)

    with pytest.raises(RuntimeError, match="stage broke"):
        with manager.session():
            raise RuntimeError("stage broke")


def test_session_cleanup_failure_surfaces_after_success(scratch_dir, monkeypatch):
    manager = WorkspaceManager(scratch_dir)

    def failing_release(workspace):
        raise ResourceError("disk gone")

    monkeypatch.setattr(manager, "release", failing_release)

    with pytest.raises(ResourceError):
        with manager.session():
            pass
