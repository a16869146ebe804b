"""
Run results for a sync session.

WalkResult is created once per sync() call and threaded through every
walker, versioner and copier call. The progress reporter only reads it.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

MAX_SAMPLES = 100


@dataclass
class RunCounters:
    """Session-scoped counters."""
    folders_visited: int = 0
    source_files: int = 0
    source_bytes: int = 0
    files_copied: int = 0
    bytes_copied: int = 0
    files_deleted: int = 0
    files_renamed: int = 0
    files_in_sync: int = 0
    bytes_in_sync: int = 0


@dataclass
class MessageLog:
    """
    Append-only message samples with an unbounded count.

    Only the first MAX_SAMPLES messages are kept, but count keeps growing
    so the summary always shows the real number of problems.
    """
    count: int = 0
    samples: list[str] = field(default_factory=list)
    limit: int = MAX_SAMPLES

    def add(self, message: str):
        self.count += 1
        if len(self.samples) < self.limit:
            self.samples.append(message)

    def __len__(self) -> int:
        return self.count

    def __bool__(self) -> bool:
        return self.count > 0


@dataclass
class WalkResult:
    """Everything a walk produced: counters, problems, synced files, timings."""
    counters: RunCounters = field(default_factory=RunCounters)
    errors: MessageLog = field(default_factory=MessageLog)
    warnings: MessageLog = field(default_factory=MessageLog)
    synced_files: list[Path] = field(default_factory=list)
    start_time: float = 0.0
    end_time: float = 0.0
    file_time: float = 0.0   # Seconds spent copying, renaming and deleting

    def start(self):
        self.start_time = time.time()
        self.end_time = 0.0

    def finish(self):
        self.end_time = time.time()

    @property
    def elapsed(self) -> float:
        if self.start_time == 0:
            return 0
        end = self.end_time if self.end_time > 0 else time.time()
        return end - self.start_time

    @property
    def non_copy_time(self) -> float:
        """Seconds spent walking and comparing (total minus file manipulation)."""
        return max(0.0, self.elapsed - self.file_time)

    @property
    def success(self) -> bool:
        return self.errors.count == 0

    @contextmanager
    def timing_file_ops(self):
        """Accumulate time spent inside the block on file_time."""
        started = time.monotonic()
        try:
            yield
        finally:
            self.file_time += time.monotonic() - started


def error_message(exc: BaseException, path: Path) -> str:
    """Describe a per-entry error, naming the path once even if the OS message already has it."""
    message = f"{type(exc).__name__}: {exc}"
    if str(path) not in message:
        message += f" - {path}"
    return message
