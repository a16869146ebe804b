"""
File copy with live progress.

Files are streamed in fixed-size chunks so large copies can report
progress (at most once per second) and so bytes_copied grows while a
copy is still in flight.
"""

import os
import stat
import time
from pathlib import Path
from typing import Callable, Optional

from .result import WalkResult

CHUNK_SIZE = 10_000
PROGRESS_INTERVAL = 1.0

# (bytes copied so far, total bytes, bytes per second since last report)
ProgressCallback = Callable[[int, int, float], None]


def copy_file(
    source: Path,
    destination: Path,
    result: WalkResult,
    on_progress: Optional[ProgressCallback] = None,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """
    Stream source into destination (created or truncated).

    Returns:
        Number of bytes copied.
    """
    total = os.path.getsize(source)
    copied = 0
    with result.timing_file_ops():
        last_report = time.monotonic()
        since_report = 0
        with open(source, "rb") as src, open(destination, "wb") as dst:
            while True:
                chunk = src.read(chunk_size)
                if not chunk:
                    break
                dst.write(chunk)
                copied += len(chunk)
                since_report += len(chunk)
                result.counters.bytes_copied += len(chunk)

                now = time.monotonic()
                if on_progress is not None and now - last_report > PROGRESS_INTERVAL:
                    on_progress(copied, total, since_report / (now - last_report))
                    last_report = now
                    since_report = 0
    return copied


def copy_metadata(source: Path, destination: Path):
    """
    Copy modification time and, best-effort, POSIX permission bits.

    Filesystems without a POSIX permission model (FAT, exFAT, some network
    mounts) reject or ignore chmod; that's not an error.
    """
    st = os.stat(source)
    os.utime(destination, ns=(st.st_atime_ns, st.st_mtime_ns))
    try:
        os.chmod(destination, stat.S_IMODE(st.st_mode))
    except (NotImplementedError, PermissionError):
        pass
