"""
Sync session: one source/destination pair, run as many times as needed.

Ties together root validation, previous-run statistics, the tree walker,
the progress reporter and result rendering.
"""

import os
import shutil
import threading
from pathlib import Path
from typing import Optional, Union

from ..config.settings import SyncOptions
from ..core.logging import debug_log
from ..stats import KeyValueStore, PropertiesStore, SyncStatistics
from ..ui.widgets import display
from .errors import SyncAlreadyRunningError, SyncConfigError
from .filters import has_visible_entry
from .progress import REPORT_INTERVAL, ProgressReporter, ProgressTracker
from .result import WalkResult
from .versioning import BackupVersioner, make_backup_suffix
from .walker import TreeWalker


def validate_roots(source: Path, destination: Path):
    """
    Check both roots before any walk begins.

    Raises:
        SyncConfigError: source missing, unreadable or empty; destination
            missing or not writable
    """
    if not source.is_dir():
        raise SyncConfigError(f"Source folder does not exist: {source}")
    if not os.access(source, os.R_OK):
        raise SyncConfigError(f"Source folder is not readable: {source}")
    if not has_visible_entry(source):
        raise SyncConfigError(f"Source folder is empty: {source}")
    if not destination.is_dir():
        raise SyncConfigError(f"Destination folder does not exist: {destination}")
    if not os.access(destination, os.W_OK):
        raise SyncConfigError(f"Destination folder is not writable: {destination}")


class Synchronizer:
    """
    Mirrors `source` into `destination`.

    Usage:
        sync = Synchronizer("/media/photos", "/backup/photos", name="Photos")
        sync.options.delete_stale = True
        if sync.sync_safe():
            sync.show_results()
    """

    def __init__(
        self,
        source: Union[str, Path],
        destination: Union[str, Path],
        name: str = "",
        options: Optional[SyncOptions] = None,
        stats_path: Optional[Path] = None,
        store: Optional[KeyValueStore] = None,
        report_interval: float = REPORT_INTERVAL,
    ):
        self.source = Path(source)
        self.destination = Path(destination)
        self.name = f"{name} - " if name else ""
        self.options = options or SyncOptions()
        self.report_interval = report_interval

        validate_roots(self.source, self.destination)

        # Fixed for the session: every rename in one run shares one backup generation
        self.backup_suffix = make_backup_suffix()

        if store is None and stats_path is not None:
            store = PropertiesStore(stats_path)
        self.statistics = SyncStatistics(self.source, self.destination, store)
        self.previous_folders, self.previous_non_copy_ms = self.statistics.load()

        self._lock = threading.Lock()
        self._result = WalkResult()

    # =========================================================================
    # Running
    # =========================================================================

    def sync(self) -> WalkResult:
        """
        Run one sync pass.

        Per-entry problems are recorded on the result; only fatal conditions
        raise.

        Raises:
            SyncAlreadyRunningError: another sync() on this session is running
            SourceVanishedError: a source folder disappeared mid-walk
            OSError: a folder listing failed
        """
        if not self._lock.acquire(blocking=False):
            raise SyncAlreadyRunningError(f"{self.name}Sync already running: {self.source}")
        try:
            return self._run()
        finally:
            self._lock.release()

    def _run(self) -> WalkResult:
        options = self.options
        result = WalkResult()
        self._result = result

        tracker = ProgressTracker(self.name, self.previous_folders, self.previous_non_copy_ms)
        reporter = ProgressReporter(tracker, self.report_interval)
        versioner = BackupVersioner(options, self.backup_suffix, self.name)
        walker = TreeWalker(options, versioner, tracker, self.name)

        debug_log(f"{self.name}Sync start: {self.source} -> {self.destination} ({options.to_dict()})")
        result.start()
        tracker.begin(result)
        reporter.start()
        try:
            walker.walk(self.source, self.destination, result)
        except Exception as e:
            result.errors.add(f"Unexpected error: {type(e).__name__}: {e}")
            raise
        finally:
            result.finish()
            tracker.end()
            reporter.stop()

        if not options.simulate:
            self.statistics.save(result.counters.folders_visited, int(result.non_copy_time * 1000))
        debug_log(f"{self.name}Sync done: {result.counters}")
        return result

    def sync_safe(self) -> bool:
        """Run sync(), printing any fatal error instead of raising. Returns True on completion."""
        try:
            self.sync()
            return True
        except Exception as e:
            display.fatal_error(self.name, f"{type(e).__name__}: {e}")
            return False

    # =========================================================================
    # Results
    # =========================================================================

    @property
    def result(self) -> WalkResult:
        return self._result

    @property
    def synced_files(self) -> list[Path]:
        return sorted(self._result.synced_files)

    @property
    def source_bytes(self) -> int:
        return self._result.counters.source_bytes

    @property
    def elapsed(self) -> float:
        return self._result.elapsed

    @property
    def elapsed_file_ops(self) -> float:
        return self._result.file_time

    def free_space(self) -> Optional[tuple[int, int]]:
        """(free, total) bytes on the destination volume, or None if unknown."""
        try:
            usage = shutil.disk_usage(self.destination)
        except OSError:
            return None
        return usage.free, usage.total

    def show_results(self):
        result = self._result
        display.results_header(self.name)
        display.results_errors(result.errors.count, result.errors.samples)
        display.results_warnings(result.warnings.count, result.warnings.samples)
        display.results_summary(
            self.source,
            self.destination,
            result.elapsed,
            result.file_time,
            result.counters,
            self.free_space(),
        )

    def show_last_run(self):
        display.last_run(self.name, self.previous_non_copy_ms)
