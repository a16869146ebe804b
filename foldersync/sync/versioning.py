"""
Old-version handling for destination entries about to be replaced or removed.

With versioning enabled, "photo.jpg" becomes "photo.jpg.bk202501311842"
instead of being deleted. Every rename in one session uses the same suffix,
so one run produces one backup generation.
"""

import os
import stat
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config.settings import SyncOptions
from ..ui.widgets import display
from .result import WalkResult

BACKUP_SUFFIX_PREFIX = ".bk"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M"


def make_backup_suffix(now: Optional[datetime] = None) -> str:
    """Build the session backup suffix, e.g. ".bk202501311842"."""
    now = now or datetime.now()
    return BACKUP_SUFFIX_PREFIX + now.strftime(BACKUP_TIMESTAMP_FORMAT)


def backup_path_for(path: Path, suffix: str) -> Path:
    return path.with_name(path.name + suffix)


def _exists(path: Path) -> bool:
    # Broken symlinks count as existing entries
    return os.path.lexists(path)


def _fix_path_permissions(path: Path) -> bool:
    """Try to make a file/folder writable. Returns True if successful."""
    try:
        mode = os.stat(path, follow_symlinks=False).st_mode
        if not (mode & stat.S_IWUSR):
            os.chmod(path, mode | stat.S_IWUSR)
        # Also fix parent folder if needed
        parent = path.parent
        parent_mode = parent.stat().st_mode
        if not (parent_mode & stat.S_IWUSR):
            parent.chmod(parent_mode | stat.S_IWUSR)
        return True
    except OSError:
        return False


class BackupVersioner:
    """Archives (renames) or deletes destination entries for one session."""

    def __init__(self, options: SyncOptions, suffix: str, name: str = ""):
        self.options = options
        self.suffix = suffix
        self.name = name

    def archive_or_delete(self, path: Path, result: WalkResult):
        """
        Move an entry out of the way before it is replaced or removed.

        Renames to <path><suffix> when versioning is on; otherwise, and always
        in dry runs, deletes. A failed rename (e.g. the new name is too long
        for the filesystem) is a warning and falls back to deletion.
        """
        if not _exists(path):
            return

        if not self.options.preserve_old_versions or self.options.simulate:
            self.delete_recursive(path, result)
            return

        backup = backup_path_for(path, self.suffix)

        # A backup with this exact name comes from an earlier run in the same minute
        if _exists(backup):
            self.delete_recursive(backup, result)

        display.keeping_old_version(self.name, backup)
        try:
            with result.timing_file_ops():
                os.rename(path, backup)
        except OSError:
            message = f"Could not rename old version, deleting it: {path}"
            display.warning(self.name, message)
            result.warnings.add(message)
            self.delete_recursive(path, result)
            return
        result.counters.files_renamed += 1

    def delete_recursive(self, path: Path, result: WalkResult):
        """
        Delete a file or a whole directory tree, children first.

        Every removed entry counts in files_deleted. Dry runs count without
        deleting. A file that can't be deleted is a warning and stays in place.
        """
        if os.path.isdir(path) and not os.path.islink(path):
            for entry in self._walk_bottom_up(path):
                self._delete_entry(entry, result)
        else:
            self._delete_entry(path, result)

    def _walk_bottom_up(self, root: Path) -> list[Path]:
        entries = []
        for dirpath, dirnames, filenames in os.walk(root, topdown=False):
            base = Path(dirpath)
            # os.walk lists directory symlinks under dirnames; they're removed as links
            entries.extend(base / name for name in sorted(filenames, reverse=True))
            entries.extend(base / name for name in sorted(dirnames, reverse=True) if os.path.islink(base / name))
            entries.append(base)
        return entries

    def _delete_entry(self, path: Path, result: WalkResult):
        display.deleting(self.name, path)
        if self.options.simulate:
            result.counters.files_deleted += 1
            return
        try:
            with result.timing_file_ops():
                self._remove(path)
        except PermissionError:
            if _fix_path_permissions(path):
                try:
                    with result.timing_file_ops():
                        self._remove(path)
                except OSError:
                    self._delete_failed(path, result)
                    return
            else:
                self._delete_failed(path, result)
                return
        except OSError:
            self._delete_failed(path, result)
            return
        result.counters.files_deleted += 1

    @staticmethod
    def _remove(path: Path):
        if os.path.isdir(path) and not os.path.islink(path):
            os.rmdir(path)
        else:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass

    def _delete_failed(self, path: Path, result: WalkResult):
        message = f"Could not delete {path}"
        display.warning(self.name, message)
        result.warnings.add(message)
