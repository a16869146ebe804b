"""
End-to-end tests for Synchronizer + TreeWalker on real temp directories.

Focus: a sync leaves the destination mirroring the source, never touches
what it shouldn't, and stops before doing damage when the source vanishes.
"""

import os
import shutil
from unittest.mock import patch

import pytest

from foldersync.sync import (
    SourceVanishedError,
    SyncAlreadyRunningError,
    SyncConfigError,
    Synchronizer,
)
from foldersync.sync.copier import copy_file
from foldersync.sync.filters import is_backup_name
from tests.conftest import BASE_MTIME, tree


def without_backups(snapshot):
    return {path: data for path, data in snapshot.items()
            if not any(is_backup_name(part) for part in path.split("/"))}


class TestFirstSync:

    def test_mirrors_tree(self, sync_env):
        sync_env.make_file("a.txt", b"alpha")
        sync_env.make_file("sub/b.txt", b"beta")
        sync_env.make_file("sub/deeper/c.txt", b"gamma")

        result = sync_env.run()

        assert tree(sync_env.destination) == tree(sync_env.source)
        assert result.counters.files_copied == 3
        assert result.counters.bytes_copied == len(b"alpha") + len(b"beta") + len(b"gamma")
        assert result.counters.source_files == 3
        assert result.counters.folders_visited == 3
        assert result.success

    def test_modification_time_preserved(self, sync_env):
        sync_env.make_file("a.txt", b"alpha", mtime=BASE_MTIME)

        sync_env.run()

        assert int((sync_env.destination / "a.txt").stat().st_mtime) == BASE_MTIME

    def test_ignored_entries_not_copied(self, sync_env):
        sync_env.make_file("a.txt")
        sync_env.make_file(".DS_Store")
        sync_env.make_file("old.txt.bk202401011200")

        sync_env.run()

        assert set(tree(sync_env.destination)) == {"a.txt"}

    def test_symlinks_skipped(self, sync_env):
        target = sync_env.make_file("a.txt")
        try:
            (sync_env.source / "link.txt").symlink_to(target)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        sync_env.run()

        assert not os.path.lexists(sync_env.destination / "link.txt")


class TestIdempotence:

    def test_second_run_copies_nothing(self, sync_env):
        sync_env.make_file("a.txt", b"alpha")
        sync_env.make_file("sub/b.txt", b"beta")
        sync_env.run()

        result = sync_env.run(delete_stale=True, preserve_old_versions=True)

        assert result.counters.files_copied == 0
        assert result.counters.files_deleted == 0
        assert result.counters.files_renamed == 0
        assert result.counters.files_in_sync == 2
        assert result.counters.bytes_in_sync == len(b"alpha") + len(b"beta")

    def test_changed_file_copied_again(self, sync_env):
        sync_env.make_file("a.txt", b"alpha")
        sync_env.run()

        sync_env.make_file("a.txt", b"alpha v2", mtime=BASE_MTIME + 60)
        result = sync_env.run()

        assert result.counters.files_copied == 1
        assert (sync_env.destination / "a.txt").read_bytes() == b"alpha v2"


class TestVersioning:

    def test_replaced_file_kept_as_backup(self, sync_env):
        sync_env.make_file("a.txt", b"v1")
        sync_env.run()
        sync_env.make_file("a.txt", b"v2", mtime=BASE_MTIME + 60)

        result = sync_env.run(preserve_old_versions=True)

        backups = [p for p in sync_env.destination.iterdir() if is_backup_name(p.name)]
        assert len(backups) == 1
        assert backups[0].read_bytes() == b"v1"
        assert (sync_env.destination / "a.txt").read_bytes() == b"v2"
        assert result.counters.files_renamed == 1

    def test_backups_survive_later_runs(self, sync_env):
        sync_env.make_file("a.txt", b"v1")
        sync_env.run()
        sync_env.make_file("a.txt", b"v2", mtime=BASE_MTIME + 60)
        sync_env.run(preserve_old_versions=True)

        result = sync_env.run(delete_stale=True, preserve_old_versions=True)

        backups = [p for p in sync_env.destination.iterdir() if is_backup_name(p.name)]
        assert len(backups) == 1
        assert result.counters.files_deleted == 0
        assert result.counters.files_renamed == 0


class TestStaleEntries:

    def test_stale_deleted_only_when_enabled(self, sync_env):
        sync_env.make_file("a.txt")
        sync_env.make_dest_file("old.txt")
        sync_env.make_dest_file("old_folder/inner.txt")

        sync_env.run()
        assert (sync_env.destination / "old.txt").exists()

        result = sync_env.run(delete_stale=True)
        assert set(tree(sync_env.destination)) == {"a.txt"}
        # old.txt, old_folder/inner.txt, old_folder
        assert result.counters.files_deleted == 3

    def test_stale_renamed_with_versioning(self, sync_env):
        sync_env.make_file("a.txt")
        sync_env.make_dest_file("old.txt", b"keep me")

        result = sync_env.run(delete_stale=True, preserve_old_versions=True)

        assert not (sync_env.destination / "old.txt").exists()
        backups = [p for p in sync_env.destination.iterdir() if is_backup_name(p.name)]
        assert [p.read_bytes() for p in backups] == [b"keep me"]
        assert result.counters.files_renamed == 1


class TestTypeChange:

    def test_file_folder_swap_round_trip(self, sync_env):
        src = sync_env.source
        sync_env.make_file("arquivo1", b"file content")
        sync_env.make_file("pasta1/inside.txt", b"inside")
        sync_env.run(delete_stale=True, preserve_old_versions=True)
        first_layout = tree(src)
        assert without_backups(tree(sync_env.destination)) == first_layout

        # Swap types
        (src / "arquivo1").unlink()
        shutil.rmtree(src / "pasta1")
        sync_env.make_file("arquivo1/inside.txt", b"now a folder")
        sync_env.make_file("pasta1", b"now a file")
        sync_env.run(delete_stale=True, preserve_old_versions=True)

        assert (sync_env.destination / "arquivo1").is_dir()
        assert (sync_env.destination / "pasta1").is_file()
        assert without_backups(tree(sync_env.destination)) == tree(src)

        # Swap back
        shutil.rmtree(src / "arquivo1")
        (src / "pasta1").unlink()
        sync_env.make_file("arquivo1", b"file content")
        sync_env.make_file("pasta1/inside.txt", b"inside")
        sync_env.run(delete_stale=True, preserve_old_versions=True)

        assert without_backups(tree(sync_env.destination)) == first_layout

    def test_file_replaced_by_folder_without_versioning(self, sync_env):
        sync_env.make_dest_file("thing", b"old file")
        sync_env.make_file("thing/new.txt", b"new")

        result = sync_env.run()

        assert (sync_env.destination / "thing" / "new.txt").read_bytes() == b"new"
        assert result.counters.files_deleted == 1


class TestEmptyFolders:

    @pytest.fixture
    def source_with_empty_folder(self, sync_env):
        sync_env.make_file("pastaComConteudo/arquivo.txt")
        sync_env.make_dir("pastaSemConteudo")
        return sync_env

    def test_only_folders_with_content(self, source_with_empty_folder):
        env = source_with_empty_folder
        env.run(create_dirs_only_with_content=True)

        assert set(tree(env.destination)) == {"pastaComConteudo", "pastaComConteudo/arquivo.txt"}

    def test_all_folders_by_default(self, source_with_empty_folder):
        env = source_with_empty_folder
        env.run()

        assert set(tree(env.destination)) == {
            "pastaComConteudo", "pastaComConteudo/arquivo.txt", "pastaSemConteudo",
        }


class TestSyncedFilesAndFilter:

    def test_custom_filter_and_synced_list(self, sync_env):
        sync_env.make_file("b.txt")
        sync_env.make_file("a.txt")
        sync_env.make_file("c.dat")
        sync_env.make_file("sub/d.txt")

        session = sync_env.synchronizer(track_synced_files=True)
        session.options.file_filter = lambda p: p.suffix != ".dat"
        session.sync()

        expected = sorted([sync_env.source / "a.txt", sync_env.source / "b.txt", sync_env.source / "sub" / "d.txt"])
        assert session.synced_files == expected
        assert not (sync_env.destination / "c.dat").exists()

        # Files already in sync are listed too
        session.sync()
        assert session.synced_files == expected

    def test_filtered_sync_lists_copied_and_already_synced_files(self, sync_env):
        """Copied and already-identical files are both listed; stale and filtered entries are left alone."""
        for name in ["a.txt", "b.txt", "c.dat"]:
            sync_env.make_file(name, name.encode())
        sync_env.make_file("shared.txt", b"same on both sides")
        sync_env.make_dest_file("shared.txt", b"same on both sides")
        old = sync_env.make_dest_file("old.txt", b"not in source", mtime=BASE_MTIME - 3600)
        shared = sync_env.destination / "shared.txt"
        shared_mtime = shared.stat().st_mtime_ns

        session = sync_env.synchronizer(track_synced_files=True)
        session.options.file_filter = lambda p: p.is_dir() or p.suffix == ".txt"
        result = session.sync()

        assert not (sync_env.destination / "c.dat").exists()
        assert old.read_bytes() == b"not in source"
        assert int(old.stat().st_mtime) == BASE_MTIME - 3600
        assert shared.read_bytes() == b"same on both sides"
        assert shared.stat().st_mtime_ns == shared_mtime
        assert [p.name for p in session.synced_files] == ["a.txt", "b.txt", "shared.txt"]
        assert result.counters.files_copied == 2
        assert result.counters.files_in_sync == 1

    def test_synced_list_empty_when_not_tracking(self, sync_env):
        sync_env.make_file("a.txt")
        session = sync_env.synchronizer()
        session.sync()
        assert session.synced_files == []


class TestDryRun:

    def test_nothing_touched(self, sync_env):
        sync_env.make_file("a.txt")
        sync_env.make_file("sub/b.txt")
        sync_env.make_dest_file("old.txt")

        session = sync_env.synchronizer(simulate=True, delete_stale=True, preserve_old_versions=True)
        result = session.sync()

        assert set(tree(sync_env.destination)) == {"old.txt"}
        assert result.counters.files_copied == 2
        assert result.counters.files_deleted == 1
        assert sync_env.store.data == {}


class TestFailures:

    def test_source_vanishing_mid_walk_stops_before_deleting(self, sync_env):
        sync_env.make_file("sub/a.txt")
        sync_env.make_file("sub/b.txt")
        sync_env.run()
        vanishing = sync_env.source / "sub"

        def unplug(path):
            if path == vanishing / "a.txt":
                shutil.rmtree(vanishing)
            return True

        session = sync_env.synchronizer(delete_stale=True)
        session.options.file_filter = unplug

        with pytest.raises(SourceVanishedError):
            session.sync()

        assert set(tree(sync_env.destination)) == {"sub", "sub/a.txt", "sub/b.txt"}
        assert session.result.errors.count == 1
        assert "Unexpected error" in session.result.errors.samples[0]

    def test_sync_safe_reports_failure(self, sync_env):
        sync_env.make_file("sub/a.txt")
        session = sync_env.synchronizer()
        shutil.rmtree(sync_env.source)

        assert session.sync_safe() is False

    def test_one_bad_file_does_not_stop_the_walk(self, sync_env):
        sync_env.make_file("a.txt")
        sync_env.make_file("bad.txt")
        sync_env.make_file("c.txt")

        def flaky_copy(source, destination, result, **kwargs):
            if source.name == "bad.txt":
                raise PermissionError(13, "Permission denied", str(destination))
            return copy_file(source, destination, result, **kwargs)

        with patch("foldersync.sync.walker.copy_file", side_effect=flaky_copy):
            result = sync_env.run()

        assert result.errors.count == 1
        assert "bad.txt" in result.errors.samples[0]
        assert (sync_env.destination / "a.txt").exists()
        assert (sync_env.destination / "c.txt").exists()
        assert result.counters.files_copied == 2

    def test_unreadable_file_is_a_warning(self, sync_env):
        sync_env.make_file("a.txt")
        session = sync_env.synchronizer()

        with patch("foldersync.sync.walker.os.access", return_value=False):
            result = session.sync()

        assert result.warnings.count == 1
        assert result.warnings.samples[0].startswith("Cannot read")
        assert not (sync_env.destination / "a.txt").exists()

    def test_reentrant_sync_refused(self, sync_env):
        sync_env.make_file("a.txt")
        session = sync_env.synchronizer()

        with session._lock:
            with pytest.raises(SyncAlreadyRunningError):
                session.sync()


class TestRootValidation:

    def test_missing_source(self, sync_env):
        with pytest.raises(SyncConfigError):
            Synchronizer(sync_env.tmp / "nope", sync_env.destination)

    def test_empty_source(self, sync_env):
        sync_env.make_file(".DS_Store")
        with pytest.raises(SyncConfigError):
            Synchronizer(sync_env.source, sync_env.destination)

    def test_missing_destination(self, sync_env):
        sync_env.make_file("a.txt")
        with pytest.raises(SyncConfigError):
            Synchronizer(sync_env.source, sync_env.tmp / "nope")


class TestStatistics:

    def test_saved_and_loaded_by_next_session(self, sync_env):
        sync_env.make_file("a.txt")
        sync_env.make_file("sub/b.txt")
        sync_env.run()

        session = sync_env.synchronizer()
        assert session.previous_folders == 2
        assert session.statistics.folders_key in sync_env.store.data
        assert session.statistics.non_copy_key in sync_env.store.data

    def test_default_statistics_file(self, sync_env):
        sync_env.make_file("a.txt")
        Synchronizer(sync_env.source, sync_env.destination, report_interval=60.0).sync()

        stats_file = sync_env.tmp / "tmp" / "estatisticas_copias.properties"
        assert stats_file.exists()
        assert "total_pastas_copiadas_" in stats_file.read_text(encoding="latin-1")
