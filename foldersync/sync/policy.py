"""
Copy decision for a source file and its destination counterpart.

Modification times from different operating systems and filesystems can
disagree by whole hours (a timezone misread) while describing the same
instant. A date difference is therefore only trusted when it is larger than
the tolerance AND either larger than 10 hours or not a whole number of hours.

Known limitation: zones with half-hour offsets are not forgiven.
"""

import os
import stat
from pathlib import Path
from typing import NamedTuple, Optional

from ..config.settings import SyncOptions
from ..core.formatting import format_hms

HOUR_MS = 3_600_000
MAX_TIMEZONE_SKEW_HOURS = 10


class FileMeta(NamedTuple):
    """Size and modification time of a file, as used by the copy decision."""
    size: int
    mtime_ms: int


def read_meta(path: Path) -> Optional[FileMeta]:
    """Stat a path without following symlinks. Returns None if it doesn't exist."""
    try:
        st = os.stat(path, follow_symlinks=False)
    except (FileNotFoundError, NotADirectoryError):
        return None
    return FileMeta(size=st.st_size, mtime_ms=st.st_mtime_ns // 1_000_000)


def is_timezone_skew(diff_ms: int, tolerance_ms: int = 0) -> bool:
    """
    True if a date difference can be explained by a whole-hour timezone misread.

    Differences over MAX_TIMEZONE_SKEW_HOURS are never forgiven. Below that,
    the distance to the nearest whole hour must be within the tolerance, so
    "6 hours + a few ms" is forgiven exactly when "a few ms" alone would be.
    """
    if diff_ms > MAX_TIMEZONE_SKEW_HOURS * HOUR_MS:
        return False
    remainder = diff_ms % HOUR_MS
    off_by = min(remainder, HOUR_MS - remainder)
    return off_by <= tolerance_ms


def copy_reason(src: FileMeta, dst: Optional[FileMeta], options: SyncOptions) -> Optional[str]:
    """
    Decide whether the source file must be copied.

    Returns:
        A short human-readable reason, or None if the destination is already in sync.
    """
    if dst is None:
        return "destination missing"

    if options.copy_if_sizes_differ and src.size != dst.size:
        return f"size differs ({src.size:,} - {dst.size:,})"

    if options.copy_if_dates_differ:
        diff = abs(src.mtime_ms - dst.mtime_ms)
        if diff > options.date_tolerance_ms and not is_timezone_skew(diff, options.date_tolerance_ms):
            return f"modification time differs by {format_hms(diff)}"

    return None


def must_copy(src: FileMeta, dst: Optional[FileMeta], options: SyncOptions) -> bool:
    return copy_reason(src, dst, options) is not None


def is_regular_file(path: Path) -> bool:
    try:
        return stat.S_ISREG(os.stat(path, follow_symlinks=False).st_mode)
    except (FileNotFoundError, NotADirectoryError):
        return False
