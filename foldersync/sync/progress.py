"""
Background progress reporting.

The walker publishes snapshots of its position and counters to a
ProgressTracker; a ProgressReporter thread prints the latest snapshot
every few seconds. The reporter never touches walker state directly.
"""

import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional

from ..core.formatting import format_hms
from ..ui.widgets import display
from .result import RunCounters, WalkResult

REPORT_INTERVAL = 5.0


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time view of a running walk."""
    counters: RunCounters
    current_folder: Optional[Path] = None
    current_file: Optional[Path] = None
    elapsed: float = 0.0
    file_time: float = 0.0
    running: bool = False

    @property
    def non_copy_ms(self) -> int:
        return int(max(0.0, self.elapsed - self.file_time) * 1000)


class ProgressTracker:
    """
    Thread-safe holder of the walker's current position.

    Writers (the walker) call enter_folder/leave_folder/set_file/publish;
    readers (the reporter) call snapshot(). All access goes through one lock.
    """

    def __init__(self, name: str = "", previous_folders: int = 0, previous_non_copy_ms: int = 0):
        self.name = name
        self.previous_folders = previous_folders
        self.previous_non_copy_ms = previous_non_copy_ms
        self.lock = threading.Lock()
        self._result: Optional[WalkResult] = None
        self._snapshot = ProgressSnapshot(counters=RunCounters())

    def begin(self, result: WalkResult):
        """Attach to a new walk."""
        with self.lock:
            self._result = result
            self._snapshot = ProgressSnapshot(counters=RunCounters(), running=True)

    def end(self):
        """Mark the walk as finished (final snapshot keeps the last position)."""
        with self.lock:
            self._snapshot = self._take(self._snapshot.current_folder, self._snapshot.current_file, running=False)

    def _take(self, folder: Optional[Path], file: Optional[Path], running: bool) -> ProgressSnapshot:
        # Caller must hold lock
        result = self._result
        if result is None:
            return replace(self._snapshot, current_folder=folder, current_file=file, running=running)
        return ProgressSnapshot(
            counters=replace(result.counters),
            current_folder=folder,
            current_file=file,
            elapsed=result.elapsed,
            file_time=result.file_time,
            running=running,
        )

    def enter_folder(self, folder: Path) -> Optional[Path]:
        """Publish the folder being walked. Returns the previous one, for leave_folder()."""
        with self.lock:
            previous = self._snapshot.current_folder
            self._snapshot = self._take(folder, None, self._snapshot.running)
            return previous

    def leave_folder(self, previous: Optional[Path]):
        with self.lock:
            self._snapshot = self._take(previous, None, self._snapshot.running)

    def set_file(self, file: Optional[Path]):
        """Publish the file being copied (None when the copy is done)."""
        with self.lock:
            self._snapshot = self._take(self._snapshot.current_folder, file, self._snapshot.running)

    def publish(self):
        """Refresh counters without moving."""
        with self.lock:
            self._snapshot = self._take(self._snapshot.current_folder, self._snapshot.current_file,
                                        self._snapshot.running)

    def snapshot(self) -> ProgressSnapshot:
        """Latest position, with elapsed time and counters read from the running walk."""
        with self.lock:
            if self._result is not None and self._snapshot.running:
                self._snapshot = self._take(self._snapshot.current_folder, self._snapshot.current_file, True)
            return self._snapshot


def format_progress_line(
    snapshot: ProgressSnapshot,
    name: str = "",
    previous_folders: int = 0,
    previous_non_copy_ms: int = 0,
) -> str:
    """
    Build the periodic progress line.

    Format: "<name>(<done>[/<previous total>] folders[ - ETA > H:MM:SS]) <folder>[/<file>]"
    """
    done = snapshot.counters.folders_visited
    line = f"{name}({done:,}"
    if previous_folders > done:
        line += f"/{previous_folders:,}"
    line += " folders"
    if snapshot.running and previous_non_copy_ms > 0:
        current = snapshot.non_copy_ms
        if current < previous_non_copy_ms:
            line += f" - ETA > {format_hms(previous_non_copy_ms - current)}"
    line += ")"
    if snapshot.current_folder is not None:
        line += f" {snapshot.current_folder}"
    if snapshot.current_file is not None:
        line += f"/{snapshot.current_file.name}"
    return line


class ProgressReporter:
    """
    Prints the tracker's latest snapshot every `interval` seconds on a
    daemon thread.

    stop() is cooperative: it signals the thread, waits for it, then prints
    one final report so the end state is always visible.
    """

    def __init__(
        self,
        tracker: ProgressTracker,
        interval: float = REPORT_INTERVAL,
        emit: Callable[[str], None] = display.progress_report,
    ):
        self.tracker = tracker
        self.interval = interval
        self._emit = emit
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.reports = 0

    def report(self):
        """Print one progress line now."""
        t = self.tracker
        self._emit(format_progress_line(t.snapshot(), t.name, t.previous_folders, t.previous_non_copy_ms))
        self.reports += 1

    def _run(self):
        while True:
            self.report()
            if self._stop_event.wait(self.interval):
                return

    def start(self):
        """Start periodic reporting (first report is immediate)."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="sync-progress", daemon=True)
        self._thread.start()

    def stop(self, final_report: bool = True):
        """Stop reporting and print the final state."""
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
        if final_report:
            self.report()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

