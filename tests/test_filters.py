"""
Tests for entry filtering: OS metadata, tool-generated backups, custom filters.
"""

from pathlib import Path

import pytest

from foldersync.sync.filters import (
    accept_entry,
    has_visible_entry,
    is_backup_name,
    is_ignored_name,
    list_children,
)


class TestNames:

    @pytest.mark.parametrize("name", [
        "photo.jpg.bk202501311842",
        "folder.bk199912312359",
        ".bk000000000000",
    ])
    def test_backup_names(self, name):
        assert is_backup_name(name)
        assert is_ignored_name(name)

    @pytest.mark.parametrize("name", [
        "photo.jpg.bk2025013118",       # too short
        "photo.bk202501311842.jpg",     # suffix not at the end
        "photo.jpg.BK202501311842",
    ])
    def test_non_backup_names(self, name):
        assert not is_backup_name(name)

    @pytest.mark.parametrize("name", [".DS_Store", "iPod Photo Cache", "Icon\r", "icon?"])
    def test_os_metadata_ignored(self, name):
        assert is_ignored_name(name)

    def test_regular_names_kept(self):
        assert not is_ignored_name("notes.txt")
        assert not is_ignored_name("Icons")


class TestListChildren:

    @pytest.fixture
    def folder(self, tmp_path):
        for name in ["b.txt", "A.txt", "c.dat", ".DS_Store", "old.txt.bk202401011200"]:
            (tmp_path / name).write_text("x")
        (tmp_path / "sub").mkdir()
        return tmp_path

    def test_sorted_case_insensitively_without_ignored(self, folder):
        names = [p.name for p in list_children(folder)]
        assert names == ["A.txt", "b.txt", "c.dat", "sub"]

    def test_custom_filter_applied(self, folder):
        names = [p.name for p in list_children(folder, lambda p: p.suffix != ".dat")]
        assert names == ["A.txt", "b.txt", "sub"]

    def test_custom_filter_never_sees_backups(self, folder):
        seen = []
        list_children(folder, lambda p: seen.append(p.name) or True)
        assert "old.txt.bk202401011200" not in seen
        assert ".DS_Store" not in seen

    def test_missing_folder_raises(self, tmp_path):
        with pytest.raises(OSError):
            list_children(tmp_path / "gone")

    def test_accept_entry(self):
        assert accept_entry(Path("/x/a.txt"))
        assert not accept_entry(Path("/x/a.txt"), lambda p: False)
        assert not accept_entry(Path("/x/.DS_Store"), lambda p: True)


class TestHasVisibleEntry:

    def test_only_metadata_is_empty(self, tmp_path):
        (tmp_path / ".DS_Store").write_text("x")
        assert not has_visible_entry(tmp_path)

    def test_file_is_visible(self, tmp_path):
        (tmp_path / "a.txt").write_text("x")
        assert has_visible_entry(tmp_path)
