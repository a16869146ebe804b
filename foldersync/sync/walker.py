"""
Recursive source/destination tree walk.

Walks the source tree depth-first in lock-step with the destination tree
and applies create/update/delete decisions. All counters and problems go
to the WalkResult passed down every call; the walker keeps no run state of
its own, so one walker can run several walks.

Safety rules:
- Before every child, the source folder must still exist. A removable drive
  unplugged mid-walk would otherwise look like "every file was deleted" and
  the stale pass would wipe the backup.
- A destination entry is only touched when its source counterpart needs a
  copy, is gone (stale), or changed type (file <-> folder).
"""

import os
import time
from pathlib import Path
from typing import Optional

from ..config.settings import SyncOptions
from ..core.logging import debug_log
from ..ui.widgets import display
from .copier import copy_file, copy_metadata
from .errors import SourceVanishedError
from .filters import list_children
from .policy import copy_reason, read_meta, is_regular_file
from .progress import ProgressTracker
from .result import WalkResult, error_message
from .versioning import BackupVersioner

STALE_LISTING_LOG_INTERVAL = 10.0


def ensure_directory(path: Path):
    """Raise SourceVanishedError unless path is still a directory."""
    if not os.path.isdir(path):
        raise SourceVanishedError(f"Folder no longer exists: {path}")


def _is_real_dir(path: Path) -> bool:
    return os.path.isdir(path) and not os.path.islink(path)


class TreeWalker:
    """Mirrors one source tree into one destination tree."""

    def __init__(
        self,
        options: SyncOptions,
        versioner: BackupVersioner,
        tracker: Optional[ProgressTracker] = None,
        name: str = "",
    ):
        self.options = options
        self.versioner = versioner
        self.tracker = tracker or ProgressTracker(name)
        self.name = name
        self._last_stale_listing_log = 0.0

    def walk(self, source: Path, destination: Path, result: Optional[WalkResult] = None) -> WalkResult:
        """
        Walk source into destination.

        Raises:
            SourceVanishedError: a source folder disappeared mid-walk
            OSError: a folder listing could not be read
        """
        if result is None:
            result = WalkResult()
        self._walk_folder(Path(source), Path(destination), result)
        return result

    # =========================================================================
    # Folder level
    # =========================================================================

    def _walk_folder(self, source: Path, destination: Path, result: WalkResult):
        previous = self.tracker.enter_folder(source)
        ensure_directory(source)

        if self.options.delete_stale:
            self._delete_stale(source, destination, result)

        for child in list_children(source, self.options.file_filter):
            ensure_directory(source)
            target = destination / child.name

            if child.is_symlink():
                debug_log(f"{self.name}Ignoring symbolic link: {child}")
            elif child.is_dir():
                self._sync_folder(child, target, result)
            elif child.is_file():
                if os.access(child, os.R_OK):
                    self._sync_file(child, target, result)
                else:
                    self._warn(result, f"Cannot read: {child}")
            else:
                self._warn(result, f"Unknown file type: {child}")

        result.counters.folders_visited += 1
        self.tracker.leave_folder(previous)

    def _delete_stale(self, source: Path, destination: Path, result: WalkResult):
        """Archive or delete destination children that no longer exist in source."""
        if not _is_real_dir(destination) or not os.access(destination, os.R_OK):
            return

        now = time.monotonic()
        if now - self._last_stale_listing_log > STALE_LISTING_LOG_INTERVAL:
            debug_log(f"{self.name}Listing destination for deletion: {destination}")
            self._last_stale_listing_log = now

        for child in list_children(destination, self.options.file_filter):
            ensure_directory(source)
            if os.path.lexists(source / child.name):
                continue
            if not self.options.preserve_old_versions:
                display.deleting_stale(self.name, child)
            self.versioner.archive_or_delete(child, result)

    def _sync_folder(self, source: Path, target: Path, result: WalkResult):
        # A file (or link) where the folder should be: it changed type in the source
        if os.path.lexists(target) and not _is_real_dir(target):
            self.versioner.archive_or_delete(target, result)

        if not self.options.simulate and not self.options.create_dirs_only_with_content:
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                self._error(result, f"Error creating folder '{target}': {exc}")
                return

        self._walk_folder(source, target, result)

    # =========================================================================
    # File level
    # =========================================================================

    def _sync_file(self, source: Path, target: Path, result: WalkResult):
        try:
            src_meta = read_meta(source)
            if src_meta is None:
                raise FileNotFoundError(f"File disappeared: {source}")
            result.counters.source_files += 1
            result.counters.source_bytes += src_meta.size

            if os.path.lexists(target) and not is_regular_file(target):
                reason = "destination is not a file"
            else:
                reason = copy_reason(src_meta, read_meta(target), self.options)
        except OSError as exc:
            self._error(result, error_message(exc, source))
            return

        if reason is None:
            result.counters.files_in_sync += 1
            result.counters.bytes_in_sync += src_meta.size
            if self.options.track_synced_files:
                result.synced_files.append(source)
            self.tracker.publish()
            return

        self.tracker.set_file(target)
        try:
            display.copying(self.name, source, reason)
            self.versioner.archive_or_delete(target, result)
            if not self.options.simulate:
                # Folders deferred by create_dirs_only_with_content appear here
                target.parent.mkdir(parents=True, exist_ok=True)
                copy_file(source, target, result, on_progress=self._show_copy_progress)
                copy_metadata(source, target)
            result.counters.files_copied += 1
            if self.options.track_synced_files:
                result.synced_files.append(source)
        except OSError as exc:
            self._error(result, error_message(exc, source))
        finally:
            self.tracker.set_file(None)

    def _show_copy_progress(self, copied: int, total: int, bytes_per_sec: float):
        display.copy_progress(self.name, copied, total, bytes_per_sec)

    # =========================================================================
    # Problem recording
    # =========================================================================

    def _warn(self, result: WalkResult, message: str):
        display.warning(self.name, message)
        result.warnings.add(message)

    def _error(self, result: WalkResult, message: str):
        display.error(self.name, message)
        result.errors.add(message)
