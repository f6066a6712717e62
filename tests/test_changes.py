"""Tests for change detection against the committed snapshot."""

import os

import pytest

from deploy_state.changes import commit_snapshot, compute_changes, scan_snapshot
from deploy_state.config import StateConfig, save_config
from deploy_state.core import FileSnapshot
from deploy_state.errors import ConfigError, CorruptStateError, StateIOError
from deploy_state.hashing import compute_digest


class TestFirstRun:
    """No snapshot committed yet."""

    def test_empty_root_has_no_changes(self, project):
        changes = compute_changes(project)
        assert changes.changes == {}
        assert changes.deletions == []
        assert changes.is_empty

    def test_all_files_reported_as_added(self, project, test_files):
        test_files()
        changes = compute_changes(project)

        assert changes.changes == {
            "main.py": b"print('hello')\n",
            "requirements.txt": b"flask==1.0\nrequests\n",
            "src/app.py": b"def app():\n    return 42\n",
            "data/data.csv": b"a,b,c\n1,2,3\n",
        }
        assert changes.deletions == []

    def test_does_not_write_snapshot(self, project, store, test_files):
        test_files()
        compute_changes(project, store)
        assert not store.has_snapshot()


class TestScenarios:

    def test_modified_and_new_file(self, project, store, write_file):
        """Stored {a.py: h1}; a.py now has new content and b.py is new."""
        write_file("a.py", "old")
        store.save_snapshot(FileSnapshot(files={"a.py": compute_digest(b"old")}))

        write_file("a.py", "new")
        write_file("b.py", "bee")

        changes = compute_changes(project, store)
        assert changes.changes == {"a.py": b"new", "b.py": b"bee"}
        assert changes.deletions == []

    def test_deleted_file(self, project, store, write_file):
        """Stored {a.py, b.py}; only a.py remains, unchanged."""
        write_file("a.py", "same")
        store.save_snapshot(FileSnapshot(files={
            "a.py": compute_digest(b"same"),
            "b.py": compute_digest(b"gone"),
        }))

        changes = compute_changes(project, store)
        assert changes.changes == {}
        assert changes.deletions == ["b.py"]

    def test_directory_deleted(self, project, store, write_file):
        write_file("pkg/a.py", "a")
        write_file("pkg/b.py", "b")
        write_file("main.py", "m")
        commit_snapshot(project, store)

        (project.root / "pkg" / "a.py").unlink()
        (project.root / "pkg" / "b.py").unlink()
        (project.root / "pkg").rmdir()

        changes = compute_changes(project, store)
        assert changes.changes == {}
        assert changes.deletions == ["pkg/a.py", "pkg/b.py"]

    def test_replaced_file_at_same_path_is_a_change(self, project, store, write_file):
        write_file("a.py", "original")
        commit_snapshot(project, store)

        (project.root / "a.py").unlink()
        write_file("a.py", "unrelated new file")

        changes = compute_changes(project, store)
        assert changes.changes == {"a.py": b"unrelated new file"}
        assert changes.deletions == []


class TestProperties:

    def test_idempotent(self, project, store, test_files, write_file):
        test_files()
        commit_snapshot(project, store)
        write_file("src/app.py", "changed")
        write_file("extra.txt", "new")
        (project.root / "data" / "data.csv").unlink()

        first = compute_changes(project, store)
        second = compute_changes(project, store)
        assert first == second

    def test_idempotent_without_snapshot(self, project, test_files):
        test_files()
        assert compute_changes(project) == compute_changes(project)

    def test_complete_after_commit(self, project, store, test_files):
        test_files()
        commit_snapshot(project, store)

        changes = compute_changes(project, store)
        assert changes.changes == {}
        assert changes.deletions == []

    def test_touch_without_content_change_is_not_a_change(self, project, store, write_file):
        path = write_file("a.py", "stable")
        commit_snapshot(project, store)

        stat = path.stat()
        os.utime(path, (stat.st_atime + 1000, stat.st_mtime + 1000))
        path.write_text("stable")

        assert compute_changes(project, store).is_empty

    def test_partition(self, project, store, write_file):
        for name in ["keep.py", "edit.py", "drop.py"]:
            write_file(name, name)
        commit_snapshot(project, store)
        stored = store.load_snapshot()

        write_file("edit.py", "edited")
        write_file("add.py", "added")
        (project.root / "drop.py").unlink()

        changes = compute_changes(project, store)
        current = scan_snapshot(project)

        changed = set(changes.changes)
        deleted = set(changes.deletions)
        unchanged = {p for p in current.files if p not in changed}

        assert changed == {"edit.py", "add.py"}
        assert deleted == {"drop.py"}
        assert unchanged == {"keep.py"}
        assert not (changed & deleted) and not (changed & unchanged) and not (deleted & unchanged)
        assert changed | deleted | unchanged == set(stored.files) | set(current.files)

    def test_hidden_paths_never_appear(self, project, store, write_file):
        write_file(".cache/data.bin", "v1")
        write_file(".secret", "s1")
        write_file("main.py", "m")

        assert set(compute_changes(project, store).changes) == {"main.py"}

        commit_snapshot(project, store)
        assert set(store.load_snapshot().files) == {"main.py"}

        write_file(".cache/data.bin", "v2")
        write_file(".secret", "s2")
        assert compute_changes(project, store).is_empty

    def test_does_not_mutate_stored_snapshot(self, project, store, write_file):
        write_file("a.py", "a")
        commit_snapshot(project, store)
        before = project.snapshot_path.read_bytes()

        write_file("a.py", "changed")
        compute_changes(project, store)

        assert project.snapshot_path.read_bytes() == before


class TestConfigAndErrors:

    def test_ignore_patterns_from_config(self, project, write_file):
        save_config(StateConfig(ignore=["*.log"]), project)
        write_file("app.log", "noise")
        write_file("main.py", "m")

        assert set(compute_changes(project).changes) == {"main.py"}

    def test_ignore_file(self, project, write_file):
        write_file(".deployignore", "build/\n")
        write_file("build/out.bin", "x")
        write_file("main.py", "m")

        assert set(compute_changes(project).changes) == {"main.py"}

    def test_parallel_hashing_matches_serial(self, project, store, write_file):
        for i in range(20):
            write_file(f"pkg/m{i}.py", str(i))
        commit_snapshot(project, store)
        for i in range(0, 20, 3):
            write_file(f"pkg/m{i}.py", f"changed {i}")

        assert compute_changes(project, store, workers=4) == compute_changes(project, store, workers=1)

    def test_corrupt_snapshot_propagates(self, project, store, write_file):
        write_file("a.py", "a")
        project.snapshot_path.write_text("garbage")
        with pytest.raises(CorruptStateError):
            compute_changes(project, store)

    def test_bad_ignore_file_raises_package_errors(self, project, write_file):
        write_file("main.py", "m")
        write_file(".deployignore", b"\xff\n")
        with pytest.raises(ConfigError):
            compute_changes(project)

    def test_unreadable_config_raises_state_io_error(self, project, write_file):
        write_file("main.py", "m")
        project.config_path.mkdir()
        with pytest.raises(StateIOError):
            compute_changes(project)

    def test_unreadable_file_aborts(self, project, store, write_file, monkeypatch):
        write_file("a.py", "a")
        commit_snapshot(project, store)
        write_file("a.py", "changed")

        def fail(path):
            raise StateIOError(path, PermissionError("denied"))

        monkeypatch.setattr("deploy_state.changes.read_file", fail)
        with pytest.raises(StateIOError):
            compute_changes(project, store)


class TestScanSnapshot:

    def test_scan_matches_digests(self, project, write_file):
        write_file("a.py", "a")
        write_file("pkg/b.py", "b")

        snapshot = scan_snapshot(project)
        assert snapshot.files == {
            "a.py": compute_digest(b"a"),
            "pkg/b.py": compute_digest(b"b"),
        }

    def test_commit_saves_scan(self, project, store, write_file):
        write_file("a.py", "a")
        committed = commit_snapshot(project, store)
        assert store.load_snapshot() == committed
